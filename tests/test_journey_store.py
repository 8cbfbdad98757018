"""
Tests for the journey store: creation, simulated progression, preferences,
Plaid summaries and the sanitized view.
"""
import unittest

from fakes import ManualScheduler
from services.journey_catalog import PROGRESSION_STEPS
from services.journey_models import EVENT_TYPES, CustomerProfile, Dealer
from services.journey_repository import InMemoryJourneyRepository
from services.journey_store import JourneyStore, build_reference_number, mask_person_name
from services.sealing import PayloadSealer


def _customer(**overrides):
    values = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane.doe@example.com",
        "phone": "3105550142",
        "city": "Torrance",
        "state": "CA",
    }
    values.update(overrides)
    return CustomerProfile(**values)


DEALER = Dealer(id="genius-toyota", name="Genius Toyota")


class JourneyStoreTestCase(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.repository = InMemoryJourneyRepository()
        self.sealer = PayloadSealer("unit-test-secret")
        self.store = JourneyStore(self.repository, self.sealer, self.scheduler, clock=self.scheduler.clock)

    def _create(self, **customer_overrides):
        return self.store.create(_customer(**customer_overrides), {"vehicleId": "camry"}, DEALER, True)


class TestCreate(JourneyStoreTestCase):
    def test_create_records_submission(self):
        record = self._create()
        self.assertEqual(record.status, "received")
        self.assertEqual([e.type for e in record.events], ["prequalification_submitted"])
        self.assertEqual(record.events[0].title, "Request received for Jane Doe")
        self.assertEqual(record.events[0].email_subject, "We got your pre-qualification for Genius Toyota")
        self.assertEqual(record.scenario, {"vehicleId": "camry"})
        self.assertTrue(record.consent)
        self.assertIs(self.store.get(record.id), record)

    def test_identifiers(self):
        record = self._create()
        self.assertTrue(record.id.startswith("prq_"))
        self.assertEqual(len(record.id), len("prq_") + 18)
        self.assertEqual(record.reference_number, "TF-" + record.id[-6:].upper())
        self.assertEqual(build_reference_number("prq_0000abcdef"), "TF-ABCDEF")
        self.assertEqual(record.events[0].reference_number, record.reference_number)

    def test_customer_is_sealed(self):
        record = self._create()
        self.assertNotIn("jane.doe", repr(record.encrypted_customer))
        self.assertEqual(self.store.get_customer_profile(record), _customer())

    def test_returns_before_progression(self):
        record = self._create()
        self.assertEqual(len(record.events), 1)
        self.assertEqual(len(record.progression), len(PROGRESSION_STEPS))

    def test_submission_email_is_queued_then_stamped(self):
        record = self._create()
        [notification] = record.notifications
        self.assertEqual(notification.type, "prequalification_submitted")
        self.assertEqual(notification.to, "jane.doe@example.com")
        self.assertIsNone(notification.sent_at)
        self.assertIn("We received your pre-qualification request", notification.html)

        self.scheduler.advance(0.15)
        self.assertIsNotNone(notification.sent_at)
        self.assertEqual(record.events[0].email_sent_at, notification.sent_at)
        self.assertEqual(record.updated_at, notification.sent_at)


class TestProgression(JourneyStoreTestCase):
    def test_milestones_fire_in_order(self):
        record = self._create()
        self.scheduler.advance(12.5)
        self.assertEqual(tuple(e.type for e in record.events), EVENT_TYPES)
        self.assertEqual(record.status, "scheduled")
        self.assertEqual(len(record.notifications), 6)
        self.assertTrue(all(n.sent_at for n in record.notifications))
        self.assertEqual(record.progression, [])

    def test_partial_progression(self):
        record = self._create()
        self.scheduler.advance(4.5)
        self.assertEqual(
            [e.type for e in record.events],
            ["prequalification_submitted", "offer_received", "income_verified"],
        )
        self.assertEqual(record.status, "in_verification")
        self.scheduler.advance(2.0)
        self.assertEqual(record.status, "decision_ready")

    def test_disabled_preference_suppresses_notification(self):
        record = self._create()
        self.store.update_preferences(record.id, {"offer_received": False})
        self.scheduler.advance(13)
        self.assertIn("offer_received", [e.type for e in record.events])
        self.assertNotIn("offer_received", [n.type for n in record.notifications])
        self.assertEqual(len(record.notifications), 5)

    def test_cancel_progression(self):
        record = self._create()
        self.scheduler.advance(2.5)
        self.assertEqual(self.store.cancel_progression(record.id), 4)
        self.scheduler.advance(20)
        self.assertEqual(len(record.events), 2)
        self.assertEqual(self.store.cancel_progression(record.id), 0)
        self.assertEqual(self.store.cancel_progression("prq_missing"), 0)

    def test_close_cancels_every_record(self):
        first = self._create()
        second = self._create(email="john@example.com")
        self.store.close()
        self.scheduler.advance(20)
        self.assertEqual(len(first.events), 1)
        self.assertEqual(len(second.events), 1)

    def test_removed_record_ignores_timers(self):
        record = self._create()
        self.repository.remove(record.id)
        self.scheduler.advance(20)
        self.assertEqual(len(record.events), 1)


class TestMutations(JourneyStoreTestCase):
    def test_update_preferences_merges(self):
        record = self._create()
        updated = self.store.update_preferences(record.id, {"decision_ready": False})
        self.assertIs(updated, record)
        self.assertFalse(record.preferences["decision_ready"])
        self.assertTrue(record.preferences["pickup_scheduled"])

    def test_update_preferences_unknown_id(self):
        self.assertIsNone(self.store.update_preferences("prq_missing", {"offer_received": False}))
        self.assertEqual(len(self.repository), 0)

    def test_append_event_with_description_override(self):
        record = self._create()
        event = self.store.append_event(record.id, "income_verified", "Plaid matched deposits.")
        self.assertEqual(event.description, "Plaid matched deposits.")
        self.assertEqual(event.title, "Income verified via Plaid")
        self.assertEqual(event.email_subject, "Income verification complete")
        self.assertEqual(record.status, "in_verification")
        self.assertEqual(record.notifications[-1].type, "income_verified")

    def test_append_event_out_of_order_is_accepted(self):
        record = self._create()
        self.store.append_event(record.id, "pickup_scheduled")
        self.assertEqual(record.status, "scheduled")
        self.assertEqual(
            record.events[-1].description,
            "Genius Toyota locked in a delivery window. We'll send a reminder before you head to the store.",
        )

    def test_append_event_unknown_id(self):
        self.assertIsNone(self.store.append_event("prq_missing", "offer_received"))

    def test_record_plaid_summary_keeps_previous_token(self):
        record = self._create()
        self.store.record_plaid_summary(
            record.id,
            {"institution_name": "First Platypus Bank", "recurring_deposits": []},
            access_token="access-sandbox-1",
            item_id="item-1",
        )
        token = record.plaid.encrypted_access_token
        self.assertEqual(self.sealer.open(token), {"token": "access-sandbox-1"})

        self.store.record_plaid_summary(record.id, {"last_synced_at": "2025-01-05T15:04:05+00:00"})
        self.assertIs(record.plaid.encrypted_access_token, token)
        self.assertEqual(record.plaid.institution_name, "First Platypus Bank")
        self.assertEqual(record.plaid.item_id, "item-1")
        self.assertEqual(record.plaid.last_synced_at, "2025-01-05T15:04:05+00:00")

    def test_record_plaid_summary_unknown_id(self):
        self.assertIsNone(self.store.record_plaid_summary("prq_missing", {}))

    def test_record_plaid_summary_ignores_unknown_keys(self):
        record = self._create()
        self.store.record_plaid_summary(record.id, {"institution_name": "X"}, access_token="access-sandbox-1")
        token = record.plaid.encrypted_access_token

        self.store.record_plaid_summary(
            record.id,
            {"institution_name": "Y", "institution_id": "ins_1", "encrypted_access_token": "forged"},
        )
        self.assertEqual(record.plaid.institution_name, "Y")
        self.assertIs(record.plaid.encrypted_access_token, token)


class TestSanitizedRecord(JourneyStoreTestCase):
    def test_full_last_name_never_appears(self):
        record = self._create(last_name="Montgomery")
        self.store.record_plaid_summary(
            record.id,
            {"account_owners": [{"account_name": "Checking", "mask": "0000", "owners": ["Jane Montgomery"]}]},
        )
        self.scheduler.advance(13)
        view = self.store.get_sanitized_record(record.id)

        self.assertNotIn("Montgomery", repr(view))
        self.assertEqual(view["events"][0]["title"], "Request received for Jane M" + "•" * 9)
        self.assertIn("Hi Jane M" + "•" * 9 + ",", view["notifications"][0]["html"])
        self.assertEqual(view["plaid"]["account_owners"][0]["owners"], ["Jane M" + "•" * 9])
        self.assertEqual(view["plaid"]["account_owners"][0]["mask"], "0000")
        # The stored record keeps the real name.
        self.assertEqual(record.events[0].title, "Request received for Jane Montgomery")

    def test_mask_person_name(self):
        self.assertEqual(mask_person_name("Jane Doe"), "Jane D••")
        self.assertEqual(mask_person_name("Mary Ann Smith"), "Mary A•• S••••")
        self.assertEqual(mask_person_name("Doe"), "D••")
        self.assertEqual(mask_person_name(""), "")

    def test_escaped_name_is_masked_in_html(self):
        record = self._create(last_name="O'Neil")
        view = self.store.get_sanitized_record(record.id)
        self.assertNotIn("Neil", repr(view))
        self.assertEqual(view["customer"]["last_name"], "O" + "•" * 5)

    def test_pii_is_masked(self):
        record = self._create()
        self.store.record_plaid_summary(
            record.id, {"institution_name": "First Platypus Bank"}, access_token="access-sandbox-1"
        )
        view = self.store.get_sanitized_record(record.id)

        self.assertEqual(view["customer"]["first_name"], "Jane")
        self.assertEqual(view["customer"]["last_name"], "D••")
        self.assertEqual(view["customer"]["email"], "j••••••e@e•••••e.com")
        self.assertEqual(view["customer"]["phone"], "310•••••42")
        self.assertEqual(view["notifications"][0]["to"], "j••••••e@e•••••e.com")
        self.assertEqual(view["plaid"]["institution_name"], "First Platypus Bank")
        self.assertNotIn("encrypted_access_token", view["plaid"])

        flattened = repr(view)
        for secret in ("Doe", "jane.doe@example.com", "3105550142", "access-sandbox-1"):
            self.assertNotIn(secret, flattened)

    def test_view_shape(self):
        record = self._create()
        view = self.store.get_sanitized_record(record.id)
        self.assertEqual(view["reference_number"], record.reference_number)
        self.assertEqual(view["status"], "received")
        self.assertEqual(view["dealer"], {"id": "genius-toyota", "name": "Genius Toyota"})
        self.assertIsNone(view["plaid"])
        self.assertEqual(view["events"][0]["occurred_at"], "2025-01-05T15:04:05+00:00")
        self.assertIsNone(view["events"][0]["email_sent_at"])

    def test_unknown_id(self):
        self.assertIsNone(self.store.get_sanitized_record("prq_missing"))


if __name__ == "__main__":
    unittest.main()
