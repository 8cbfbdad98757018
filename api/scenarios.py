from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException

from schemas.scenario import QuoteRequest
from services.pricing import CREDIT_TIERS, VEHICLES, ScenarioInputs, Vehicle, get_vehicle, quote_scenario
from utils.case import dict_keys_to_camel

router = APIRouter(prefix="/api", tags=["scenarios"])


def _vehicle_to_response(v: Vehicle) -> dict[str, Any]:
    return {
        "id": v.id,
        "modelName": v.model_name,
        "msrp": v.msrp,
        "keySpecs": v.key_specs,
        "badges": list(v.badges),
        "residualValue": v.residual_value,
    }


@router.get("/vehicles")
async def list_vehicles():
    return [_vehicle_to_response(v) for v in VEHICLES.values()]


@router.get("/credit-tiers")
async def list_credit_tiers():
    return [dict_keys_to_camel(asdict(t)) for t in CREDIT_TIERS.values()]


@router.post("/scenarios/quote")
async def quote(body: QuoteRequest):
    vehicle = get_vehicle(body.vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    scenario = ScenarioInputs(
        credit_score_tier=body.scenario.credit_score_tier,
        down_payment=body.scenario.down_payment,
        trade_in_value=body.scenario.trade_in_value,
        finance_term=body.scenario.finance_term,
        lease_term=body.scenario.lease_term,
    )
    quotes = [quote_scenario(vehicle, scenario, plan) for plan in dict.fromkeys(body.plans)]
    return {
        "vehicle": _vehicle_to_response(vehicle),
        "quotes": [dict_keys_to_camel(asdict(q)) for q in quotes],
    }
