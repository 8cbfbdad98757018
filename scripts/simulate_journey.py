"""
Walk one demo pre-qualification through the simulated milestone timeline and
print each event as it lands. Needs DATA_ENCRYPTION_KEY (env or .env).
Run: python -m scripts.simulate_journey (from the project root).
"""
import asyncio
import os
import sys

# Add parent so we can import from the project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.journey_catalog import PROGRESSION_STEPS
from services.journey_models import CustomerProfile, Dealer
from services.journey_repository import InMemoryJourneyRepository
from services.journey_store import JourneyStore
from services.scheduler import AsyncioScheduler
from services.sealing import get_payload_sealer

DEMO_CUSTOMER = CustomerProfile(
    first_name="Jane",
    last_name="Doe",
    email="jane.doe@example.com",
    phone="3105550142",
    city="Torrance",
    state="CA",
)
DEMO_DEALER = Dealer(id="genius-toyota", name="Genius Toyota")


async def simulate() -> None:
    store = JourneyStore(InMemoryJourneyRepository(), get_payload_sealer(), AsyncioScheduler())
    record = store.create(DEMO_CUSTOMER, {"vehicleId": "rav4-hybrid"}, DEMO_DEALER, consent=True)
    print(f"Created {record.id} ({record.reference_number})")

    seen = 0
    deadline = PROGRESSION_STEPS[-1][1] + 1
    elapsed = 0.0
    while elapsed < deadline:
        for event in record.events[seen:]:
            print(f"[{event.occurred_at:%H:%M:%S}] {record.status:<16} {event.title}")
        seen = len(record.events)
        await asyncio.sleep(0.25)
        elapsed += 0.25

    view = store.get_sanitized_record(record.id)
    print(f"Final status: {view['status']}; {len(view['notifications'])} notifications to {view['customer']['email']}")


if __name__ == "__main__":
    asyncio.run(simulate())
