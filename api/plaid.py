from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request

from api.deps import get_journey_store, open_transport_body, parse_body, read_json
from schemas.plaid import LinkTokenCreate, PublicTokenExchange
from services.journey_store import JourneyStore
from services.plaid import PlaidClient, PlaidError, get_plaid_client
from services.sealing import TransportSealer, get_transport_sealer
from utils.case import dict_keys_to_camel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plaid", tags=["plaid"])

GUEST_NAME = "Toyota Guest"


@router.post("/link_token/create")
async def create_link_token(
    request: Request,
    store: JourneyStore = Depends(get_journey_store),
    sealer: TransportSealer = Depends(get_transport_sealer),
    plaid: PlaidClient = Depends(get_plaid_client),
):
    # An empty body means guest mode.
    body = open_transport_body(await read_json(request, required=False), sealer)
    data = parse_body(LinkTokenCreate, body)

    name = GUEST_NAME
    legal_name = None
    if data.prequal_request_id:
        record = store.get(data.prequal_request_id)
        if record is not None:
            name = store.get_customer_profile(record).full_name
            legal_name = name

    try:
        response = await plaid.create_link_token(
            user_id=data.prequal_request_id or f"guest-{int(time.time() * 1000)}",
            name=name,
            legal_name=legal_name,
        )
    except PlaidError:
        logger.exception("Plaid link token error")
        raise HTTPException(status_code=503, detail="Unable to generate Plaid link token at this time.")

    return {"linkToken": response["link_token"], "expiration": response["expiration"]}


@router.post("/item/public_token/exchange")
async def exchange_public_token(
    request: Request,
    store: JourneyStore = Depends(get_journey_store),
    sealer: TransportSealer = Depends(get_transport_sealer),
    plaid: PlaidClient = Depends(get_plaid_client),
):
    body = open_transport_body(await read_json(request), sealer)
    data = parse_body(PublicTokenExchange, body)

    record = store.get(data.prequal_request_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Pre-qualification not found")

    institution_name = (data.institution.name if data.institution else None) or (
        record.plaid.institution_name if record.plaid else None
    )
    try:
        exchange = await plaid.exchange_public_token(data.public_token)
        summary = await plaid.build_plaid_summary(exchange["access_token"], institution_name)
    except PlaidError:
        logger.exception("Plaid exchange error")
        raise HTTPException(status_code=503, detail="Unable to verify with Plaid sandbox right now.")

    store.record_plaid_summary(
        record.id,
        summary,
        access_token=exchange["access_token"],
        item_id=exchange["item_id"],
    )

    # The simulated timeline may already have produced this milestone.
    if not any(e.type == "income_verified" for e in record.events):
        profile = store.get_customer_profile(record)
        store.append_event(
            record.id,
            "income_verified",
            f"Plaid matched recurring deposits to {profile.first_name}'s profile "
            "and confirmed account ownership.",
        )

    return {
        "itemId": exchange["item_id"],
        "plaid": dict_keys_to_camel(store.get_sanitized_record(record.id)["plaid"]),
        "referenceNumber": record.reference_number,
        "updatedAt": datetime.now(timezone.utc).isoformat(),
    }
