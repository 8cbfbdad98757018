"""
Milestone catalog: copy and resulting status for every timeline event type.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from services.journey_models import CustomerProfile, Dealer, EventType, JourneyStatus


@dataclass(frozen=True)
class EventDefinition:
    title: Callable[[CustomerProfile, Dealer], str]
    description: Callable[[CustomerProfile, Dealer], str]
    subject: Callable[[Dealer], str]
    status: JourneyStatus
    greeting: str


EVENT_DEFINITIONS: dict[str, EventDefinition] = {
    "prequalification_submitted": EventDefinition(
        title=lambda customer, dealer: f"Request received for {customer.first_name} {customer.last_name}",
        description=lambda customer, dealer: (
            f"We logged your soft pull consent and shared your profile with {dealer.name}. "
            "Expect a status update shortly."
        ),
        subject=lambda dealer: f"We got your pre-qualification for {dealer.name}",
        status="received",
        greeting="We received your pre-qualification request",
    ),
    "offer_received": EventDefinition(
        title=lambda customer, dealer: "Dealer offer received",
        description=lambda customer, dealer: (
            f"{dealer.name} dropped a purchase outline and we archived it in your account for quick review."
        ),
        subject=lambda dealer: f"Offer from {dealer.name}",
        status="in_verification",
        greeting="Your dealer offer just landed",
    ),
    "income_verified": EventDefinition(
        title=lambda customer, dealer: "Income verified via Plaid",
        description=lambda customer, dealer: (
            "Recurring deposits and account owners matched your application. "
            "You are clear to move forward."
        ),
        subject=lambda dealer: "Income verification complete",
        status="in_verification",
        greeting="Income verification complete",
    ),
    "decision_ready": EventDefinition(
        title=lambda customer, dealer: "Decision ready to review",
        description=lambda customer, dealer: (
            "Your approval terms are available. "
            "Take a look when you're ready and lock in the structure you prefer."
        ),
        subject=lambda dealer: "Your financing decision is ready",
        status="decision_ready",
        greeting="Your decision is ready to review",
    ),
    "contract_available": EventDefinition(
        title=lambda customer, dealer: "Contract package prepared",
        description=lambda customer, dealer: (
            "We prepared a digital contract packet with the latest numbers and disclosures."
        ),
        subject=lambda dealer: "Contract package is ready to sign",
        status="contract_ready",
        greeting="Your finance paperwork is prepped",
    ),
    "pickup_scheduled": EventDefinition(
        title=lambda customer, dealer: "Vehicle pickup scheduled",
        description=lambda customer, dealer: (
            f"{dealer.name} locked in a delivery window. "
            "We'll send a reminder before you head to the store."
        ),
        subject=lambda dealer: "Pickup confirmed",
        status="scheduled",
        greeting="We booked your pickup appointment",
    ),
}

# (event type, delay in seconds after creation)
PROGRESSION_STEPS: tuple[tuple[EventType, float], ...] = (
    ("offer_received", 2.0),
    ("income_verified", 4.0),
    ("decision_ready", 6.5),
    ("contract_available", 9.0),
    ("pickup_scheduled", 12.0),
)

EMAIL_SEND_DELAY_SECONDS = 0.15


def get_definition(event_type: str) -> EventDefinition:
    return EVENT_DEFINITIONS[event_type]
