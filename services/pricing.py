from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from services.finance import lease_payment, loan_payment

PlanType = Literal["finance", "lease"]

DEFAULT_CREDIT_TIER = "Fair (630-689)"


@dataclass(frozen=True)
class CreditTier:
    tier: str
    label: str
    finance_apr: float
    money_factor: float


@dataclass(frozen=True)
class Vehicle:
    id: str
    model_name: str
    msrp: float
    key_specs: str
    badges: tuple[str, ...]
    residual_value: float


CREDIT_TIERS: dict[str, CreditTier] = {
    t.tier: t
    for t in (
        CreditTier("Excellent (720-850)", "Excellent (720-850)", 0.049, 0.00204),
        CreditTier("Good (690-719)", "Good (690-719)", 0.065, 0.00270),
        CreditTier("Fair (630-689)", "Fair (630-689)", 0.098, 0.00408),
        CreditTier("Poor (<630)", "Needs Improvement (<630)", 0.145, 0.00604),
    )
}

VEHICLES: dict[str, Vehicle] = {
    v.id: v
    for v in (
        Vehicle("corolla", "Corolla", 22050, "Compact Sedan | FWD", ("Safety Sense 3.0", "Top Seller"), 0.60),
        Vehicle("camry", "Camry", 26420, "Mid-size Sedan | FWD/AWD", ("Safety Sense 2.5+", "Spacious"), 0.58),
        Vehicle("rav4-hybrid", "RAV4 Hybrid", 31725, "Compact SUV | Hybrid | AWD", ("Hybrid", "AWD", "Versatile"), 0.65),
        Vehicle("sienna", "Sienna", 37185, "Minivan | Hybrid | FWD/AWD", ("Hybrid", "Family Friendly", "AWD"), 0.62),
        Vehicle("tundra", "Tundra", 41815, "Full-size Truck | i-FORCE", ("Towing", "Powerful"), 0.70),
        Vehicle(
            "highlander",
            "Highlander",
            39120,
            "Mid-size SUV | FWD/AWD | Up to 8 Passengers",
            ("Family", "AWD", "3rd Row"),
            0.64,
        ),
        Vehicle("tacoma", "Tacoma", 31500, "Mid-size Truck | Off-road capable", ("Off-road", "Capable", "Best-seller"), 0.72),
    )
}


def rates_for_tier(tier: str) -> CreditTier:
    return CREDIT_TIERS.get(tier) or CREDIT_TIERS[DEFAULT_CREDIT_TIER]


def get_vehicle(vehicle_id: str) -> Optional[Vehicle]:
    return VEHICLES.get(vehicle_id)


@dataclass(frozen=True)
class ScenarioInputs:
    credit_score_tier: str
    down_payment: float
    trade_in_value: float
    finance_term: int
    lease_term: int


@dataclass(frozen=True)
class Quote:
    plan_type: PlanType
    vehicle_id: str
    monthly_payment: float
    term_months: int
    due_at_signing: float
    total_cost: float
    apr: Optional[float] = None
    money_factor: Optional[float] = None


def quote_scenario(vehicle: Vehicle, scenario: ScenarioInputs, plan: PlanType) -> Quote:
    """Price one plan for a vehicle under the shopper's scenario."""
    rates = rates_for_tier(scenario.credit_score_tier)

    if plan == "lease":
        term = scenario.lease_term
        payment = lease_payment(vehicle.msrp, vehicle.residual_value, term, rates.money_factor)
    else:
        term = scenario.finance_term
        principal = max(vehicle.msrp - scenario.down_payment - scenario.trade_in_value, 0)
        payment = loan_payment(principal, rates.finance_apr, term)

    return Quote(
        plan_type=plan,
        vehicle_id=vehicle.id,
        monthly_payment=payment,
        term_months=term,
        due_at_signing=scenario.down_payment + scenario.trade_in_value + payment,
        total_cost=payment * term + scenario.down_payment - scenario.trade_in_value,
        apr=rates.finance_apr if plan == "finance" else None,
        money_factor=rates.money_factor if plan == "lease" else None,
    )
