"""In-memory shapes for pre-qualification journeys."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional, get_args

from services.sealing import EncryptedPayload

EventType = Literal[
    "prequalification_submitted",
    "offer_received",
    "income_verified",
    "decision_ready",
    "contract_available",
    "pickup_scheduled",
]

JourneyStatus = Literal[
    "idle",
    "received",
    "in_verification",
    "decision_ready",
    "contract_ready",
    "scheduled",
]

# Milestone order of a healthy application.
EVENT_TYPES: tuple[str, ...] = get_args(EventType)


def default_preferences() -> dict[str, bool]:
    return {event_type: True for event_type in EVENT_TYPES}


@dataclass
class CustomerProfile:
    first_name: str
    last_name: str
    email: str
    phone: str
    city: Optional[str] = None
    state: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomerProfile":
        return cls(**data)


@dataclass(frozen=True)
class Dealer:
    id: str
    name: str


@dataclass
class TimelineEvent:
    id: str
    type: EventType
    title: str
    description: str
    occurred_at: datetime
    reference_number: str
    email_subject: str
    email_queued_at: datetime
    email_sent_at: Optional[datetime] = None


@dataclass
class NotificationRecord:
    id: str
    type: EventType
    to: str
    subject: str
    queued_at: datetime
    html: str
    sent_at: Optional[datetime] = None


@dataclass
class PlaidSummary:
    institution_name: Optional[str] = None
    last_synced_at: Optional[str] = None
    recurring_deposits: Optional[list[dict[str, Any]]] = None
    account_owners: Optional[list[dict[str, Any]]] = None
    paystubs: Optional[list[dict[str, Any]]] = None
    item_id: Optional[str] = None
    encrypted_access_token: Optional[EncryptedPayload] = None


@dataclass
class PrequalificationRecord:
    id: str
    reference_number: str
    encrypted_customer: EncryptedPayload
    scenario: Any
    dealer: Dealer
    consent: bool
    created_at: datetime
    updated_at: datetime
    status: JourneyStatus = "idle"
    events: list[TimelineEvent] = field(default_factory=list)
    preferences: dict[str, bool] = field(default_factory=default_preferences)
    notifications: list[NotificationRecord] = field(default_factory=list)
    plaid: Optional[PlaidSummary] = None
    # Pending milestone timers; see JourneyStore.cancel_progression
    progression: list[Any] = field(default_factory=list, repr=False)
