from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from html import escape
from typing import Any, Callable, Optional

from services.email_templates import build_event_email_html
from services.journey_catalog import EMAIL_SEND_DELAY_SECONDS, PROGRESSION_STEPS, get_definition
from services.journey_models import (
    CustomerProfile,
    Dealer,
    NotificationRecord,
    PlaidSummary,
    PrequalificationRecord,
    TimelineEvent,
)
from services.journey_repository import JourneyRepository
from services.scheduler import Scheduler
from services.sealing import PayloadSealer
from utils.masking import mask_email, mask_value

logger = logging.getLogger(__name__)

_PLAID_SUMMARY_FIELDS = frozenset(f.name for f in dataclasses.fields(PlaidSummary)) - {"encrypted_access_token"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def build_reference_number(record_id: str) -> str:
    return f"TF-{record_id[-6:].upper()}"


def mask_person_name(name: str) -> str:
    """'Jane Doe' -> 'Jane D••'. A single-word name is masked whole."""
    first, _, rest = (name or "").strip().partition(" ")
    if not rest:
        return mask_value(first, prefix=1, suffix=0)
    return " ".join([first, *(mask_value(part, prefix=1, suffix=0) for part in rest.split())])


def _hide_name(text: Optional[str], full_name: str, masked_name: str) -> Optional[str]:
    # Event titles and e-mail bodies embed the full name, raw or HTML-escaped.
    if not text or not full_name:
        return text
    return text.replace(full_name, masked_name).replace(escape(full_name), escape(masked_name))


class JourneyStore:
    """
    Tracks pre-qualification journeys: timeline events, status, notification
    preferences and queued e-mails. Progression after submission is simulated
    with scheduled callbacks; e-mails are queued and stamped as sent, never
    delivered.

    Unknown ids are a no-op (None). Sealing failures raise ValueError.
    """

    def __init__(
        self,
        repository: JourneyRepository,
        sealer: PayloadSealer,
        scheduler: Scheduler,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._repository = repository
        self._sealer = sealer
        self._scheduler = scheduler
        self._clock = clock

    def create(
        self,
        customer: CustomerProfile,
        scenario: Any,
        dealer: Dealer,
        consent: bool,
    ) -> PrequalificationRecord:
        record_id = f"prq_{uuid.uuid4().hex[:18]}"
        now = self._clock()
        record = PrequalificationRecord(
            id=record_id,
            reference_number=build_reference_number(record_id),
            encrypted_customer=self._sealer.seal(customer.to_dict()),
            scenario=scenario,
            dealer=dealer,
            consent=consent,
            created_at=now,
            updated_at=now,
        )
        self._repository.add(record)
        logger.info("Pre-qualification %s created (%s)", record.id, record.reference_number)

        self._append(record, "prequalification_submitted", customer)
        self._schedule_progression(record.id)
        return record

    def get(self, record_id: str) -> Optional[PrequalificationRecord]:
        return self._repository.get(record_id)

    def get_customer_profile(self, record: PrequalificationRecord) -> CustomerProfile:
        return CustomerProfile.from_dict(self._sealer.open(record.encrypted_customer))

    def update_preferences(
        self, record_id: str, preferences: dict[str, bool]
    ) -> Optional[PrequalificationRecord]:
        record = self._repository.get(record_id)
        if record is None:
            return None
        record.preferences = {**record.preferences, **preferences}
        record.updated_at = self._clock()
        return record

    def record_plaid_summary(
        self,
        record_id: str,
        summary: dict[str, Any],
        access_token: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> Optional[PrequalificationRecord]:
        record = self._repository.get(record_id)
        if record is None:
            return None

        current = record.plaid or PlaidSummary()
        encrypted_token = (
            self._sealer.seal({"token": access_token}) if access_token else current.encrypted_access_token
        )
        # Unknown summary keys are ignored; the sealed token is only set from access_token.
        changes = {k: v for k, v in summary.items() if k in _PLAID_SUMMARY_FIELDS}
        if item_id:
            changes["item_id"] = item_id
        record.plaid = dataclasses.replace(current, **changes, encrypted_access_token=encrypted_token)
        record.updated_at = self._clock()
        return record

    def append_event(
        self, record_id: str, event_type: str, description_override: Optional[str] = None
    ) -> Optional[TimelineEvent]:
        record = self._repository.get(record_id)
        if record is None:
            return None
        customer = self.get_customer_profile(record)
        return self._append(record, event_type, customer, description_override)

    def get_sanitized_record(self, record_id: str) -> Optional[dict[str, Any]]:
        """The only record shape that leaves the process; PII is masked."""
        record = self._repository.get(record_id)
        if record is None:
            return None

        customer = self.get_customer_profile(record)
        masked_last = mask_value(customer.last_name, prefix=1, suffix=0)
        full_name = customer.full_name
        masked_name = f"{customer.first_name} {masked_last}".strip()

        plaid = None
        if record.plaid:
            plaid = {
                "institution_name": record.plaid.institution_name,
                "last_synced_at": record.plaid.last_synced_at,
                "recurring_deposits": record.plaid.recurring_deposits,
                "account_owners": [
                    {**account, "owners": [mask_person_name(owner) for owner in account.get("owners") or []]}
                    for account in record.plaid.account_owners or []
                ],
                "paystubs": record.plaid.paystubs,
            }

        return {
            "id": record.id,
            "reference_number": record.reference_number,
            "status": record.status,
            "created_at": _iso(record.created_at),
            "updated_at": _iso(record.updated_at),
            "dealer": {"id": record.dealer.id, "name": record.dealer.name},
            "preferences": dict(record.preferences),
            "consent": record.consent,
            "events": [
                {
                    "id": e.id,
                    "type": e.type,
                    "title": _hide_name(e.title, full_name, masked_name),
                    "description": _hide_name(e.description, full_name, masked_name),
                    "occurred_at": _iso(e.occurred_at),
                    "reference_number": e.reference_number,
                    "email_subject": e.email_subject,
                    "email_queued_at": _iso(e.email_queued_at),
                    "email_sent_at": _iso(e.email_sent_at),
                }
                for e in record.events
            ],
            "notifications": [
                {
                    "id": n.id,
                    "type": n.type,
                    "to": mask_email(n.to),
                    "subject": n.subject,
                    "queued_at": _iso(n.queued_at),
                    "sent_at": _iso(n.sent_at),
                    "html": _hide_name(n.html, full_name, masked_name),
                }
                for n in record.notifications
            ],
            "customer": {
                "first_name": customer.first_name,
                "last_name": masked_last,
                "email": mask_email(customer.email),
                "phone": mask_value(customer.phone, prefix=3, suffix=2),
                "city": customer.city,
                "state": customer.state,
            },
            "plaid": plaid,
        }

    def cancel_progression(self, record_id: str) -> int:
        """Cancel pending milestone timers; returns how many were pending."""
        record = self._repository.get(record_id)
        if record is None:
            return 0
        pending = record.progression
        record.progression = []
        for _, task in pending:
            task.cancel()
        if pending:
            logger.info("Cancelled %d pending milestones for %s", len(pending), record_id)
        return len(pending)

    def close(self) -> None:
        for record in self._repository:
            self.cancel_progression(record.id)

    def _append(
        self,
        record: PrequalificationRecord,
        event_type: str,
        customer: CustomerProfile,
        description_override: Optional[str] = None,
    ) -> TimelineEvent:
        definition = get_definition(event_type)
        occurred_at = self._clock()
        event = TimelineEvent(
            id=str(uuid.uuid4()),
            type=event_type,
            title=definition.title(customer, record.dealer),
            description=description_override or definition.description(customer, record.dealer),
            occurred_at=occurred_at,
            reference_number=record.reference_number,
            email_subject=definition.subject(record.dealer),
            email_queued_at=occurred_at,
        )
        record.events.append(event)
        record.status = definition.status
        record.updated_at = occurred_at
        logger.info("Journey %s: %s -> %s", record.id, event_type, record.status)

        self._queue_email(record, event, customer)
        return event

    def _queue_email(self, record: PrequalificationRecord, event: TimelineEvent, customer: CustomerProfile) -> None:
        if not record.preferences.get(event.type, False):
            return

        html = build_event_email_html(
            event.type,
            customer_name=customer.full_name,
            dealer_name=record.dealer.name,
            summary=event.description,
            occurred_at=event.occurred_at,
            reference_number=record.reference_number,
        )
        notification = NotificationRecord(
            id=str(uuid.uuid4()),
            type=event.type,
            to=customer.email,
            subject=event.email_subject,
            queued_at=event.email_queued_at,
            html=html,
        )
        record.notifications.append(notification)

        def mark_sent() -> None:
            sent_at = self._clock()
            notification.sent_at = sent_at
            event.email_sent_at = sent_at
            record.updated_at = sent_at

        self._scheduler.call_later(EMAIL_SEND_DELAY_SECONDS, mark_sent)

    def _schedule_progression(self, record_id: str) -> None:
        record = self._repository.get(record_id)
        for event_type, delay in PROGRESSION_STEPS:
            task = self._scheduler.call_later(delay, self._milestone_callback(record_id, event_type))
            record.progression.append((event_type, task))

    def _milestone_callback(self, record_id: str, event_type: str) -> Callable[[], None]:
        def fire() -> None:
            latest = self._repository.get(record_id)
            if latest is None:
                return
            latest.progression = [(t, task) for t, task in latest.progression if t != event_type]
            self._append(latest, event_type, self.get_customer_profile(latest))

        return fire
