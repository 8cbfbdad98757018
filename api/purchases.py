import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from schemas.purchase import PurchaseConfirm
from services.email_templates import build_purchase_confirmation
from services.mailer import Mailer, MailerError, get_mailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/purchases", tags=["purchases"])

SUBJECT = "Your Toyota Finance Navigator purchase confirmation"


@router.post("/confirm")
async def confirm_purchase(body: PurchaseConfirm, mailer: Mailer = Depends(get_mailer)):
    text, html = build_purchase_confirmation(body.model_dump())
    try:
        await run_in_threadpool(mailer.send, body.customer.email, SUBJECT, text, html)
    except MailerError:
        logger.exception("Failed to send purchase confirmation email for offer %s", body.offer_id)
        raise HTTPException(status_code=500, detail="Unable to send purchase confirmation email")
    return {"success": True}
