from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_journey_store
from schemas.prequalification import PreferencesUpdate, PrequalificationCreate
from services.journey_models import CustomerProfile, Dealer
from services.journey_store import JourneyStore
from utils.case import dict_keys_to_camel

router = APIRouter(prefix="/api/prequalifications", tags=["prequalifications"])

MSG_NOT_FOUND = "Pre-qualification not found"


def _sanitized_or_404(store: JourneyStore, prequal_id: str) -> dict[str, Any]:
    view = store.get_sanitized_record(prequal_id)
    if view is None:
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    # Preference keys are milestone types and stay snake_case.
    return dict_keys_to_camel(view, verbatim=("preferences",))


@router.post("")
async def create_prequalification(
    body: PrequalificationCreate, store: JourneyStore = Depends(get_journey_store)
):
    record = store.create(
        customer=CustomerProfile(**body.customer_profile.model_dump()),
        scenario=body.scenario,
        dealer=Dealer(id=body.dealer.id, name=body.dealer.name),
        consent=body.soft_pull_consent,
    )
    view = _sanitized_or_404(store, record.id)
    return {
        "prequalRequestId": record.id,
        "referenceNumber": record.reference_number,
        "status": record.status,
        "timeline": view["events"],
        "preferences": view["preferences"],
        "dealer": view["dealer"],
        "notifications": view["notifications"],
        "customer": view["customer"],
        "lastUpdated": record.updated_at.isoformat(),
    }


@router.get("/{prequal_id}")
async def get_prequalification(prequal_id: str, store: JourneyStore = Depends(get_journey_store)):
    view = _sanitized_or_404(store, prequal_id)
    return {
        "prequalRequestId": view["id"],
        "referenceNumber": view["referenceNumber"],
        "status": view["status"],
        "dealer": view["dealer"],
        "preferences": view["preferences"],
        "consent": view["consent"],
        "customer": view["customer"],
        "events": view["events"],
        "notifications": view["notifications"],
        "plaid": view["plaid"],
        "createdAt": view["createdAt"],
        "updatedAt": view["updatedAt"],
    }


@router.patch("/{prequal_id}")
async def update_preferences(
    prequal_id: str, body: PreferencesUpdate, store: JourneyStore = Depends(get_journey_store)
):
    record = store.update_preferences(prequal_id, body.preferences)
    if record is None:
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    return {
        "prequalRequestId": record.id,
        "preferences": dict(record.preferences),
        "updatedAt": record.updated_at.isoformat(),
    }
