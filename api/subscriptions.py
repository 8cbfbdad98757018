import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import EmailSubscription
from schemas.purchase import SubscriptionCreate
from services.email_templates import build_subscription_text
from services.mailer import Mailer, MailerError, get_mailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])

SUBJECT = "You are subscribed to Genius Toyota updates"


@router.post("")
async def subscribe(
    body: SubscriptionCreate,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    email = body.email.strip().lower()
    now = datetime.now(timezone.utc)

    subscription = await db.get(EmailSubscription, email)
    if subscription is None:
        subscription = EmailSubscription(email=email, name=body.name, subscribed_at=now, updated_at=now)
        db.add(subscription)
    else:
        subscription.name = body.name
        subscription.subscribed_at = now
        subscription.updated_at = now
    # Keep the subscription even if the confirmation e-mail fails.
    await db.commit()

    try:
        await run_in_threadpool(mailer.send, email, SUBJECT, build_subscription_text(body.name))
    except MailerError:
        logger.exception("Failed to send subscription confirmation email")
        raise HTTPException(status_code=500, detail="Unable to send confirmation email")
    return {"success": True}
