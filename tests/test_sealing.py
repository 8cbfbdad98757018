"""
Tests for at-rest sealing, transport envelopes and masking helpers.
"""
import base64
import dataclasses
import unittest
from unittest import mock

from services import sealing
from services.sealing import PayloadSealer, TransportSealer, is_transport_envelope
from utils.masking import mask_email, mask_value


def _flip_first_byte(b64: str) -> str:
    raw = bytearray(base64.b64decode(b64))
    raw[0] ^= 0x01
    return base64.b64encode(bytes(raw)).decode("ascii")


class TestPayloadSealer(unittest.TestCase):
    def setUp(self):
        self.sealer = PayloadSealer("unit-test-secret")

    def test_round_trip_json_values(self):
        values = [
            {"firstName": "Jane", "tags": ["a", "b"], "score": 712, "ok": True, "none": None},
            "plain string",
            42,
            [1, 2.5, "three"],
            None,
        ]
        for value in values:
            with self.subTest(value=value):
                self.assertEqual(self.sealer.open(self.sealer.seal(value)), value)

    def test_ciphertext_hides_plaintext_and_uses_fresh_iv(self):
        first = self.sealer.seal({"email": "jane.doe@example.com"})
        second = self.sealer.seal({"email": "jane.doe@example.com"})
        self.assertNotIn("jane", first.ciphertext)
        self.assertNotEqual(first.iv, second.iv)
        self.assertEqual(len(base64.b64decode(first.iv)), 12)
        self.assertEqual(len(base64.b64decode(first.auth_tag)), 16)

    def test_tampered_auth_tag_raises(self):
        payload = self.sealer.seal({"token": "abc"})
        tampered = dataclasses.replace(payload, auth_tag=_flip_first_byte(payload.auth_tag))
        with self.assertRaises(ValueError):
            self.sealer.open(tampered)

    def test_wrong_key_raises(self):
        payload = self.sealer.seal("secret")
        with self.assertRaises(ValueError):
            PayloadSealer("another-secret").open(payload)

    def test_empty_secret_rejected(self):
        with self.assertRaises(ValueError):
            PayloadSealer("")


class TestTransportSealer(unittest.TestCase):
    def setUp(self):
        self.sealer = TransportSealer("shared-transport-secret")

    def test_envelope_shape_and_round_trip(self):
        body = {"prequalRequestId": "prq_1", "publicToken": "public-sandbox-1"}
        envelope = self.sealer.seal(body)
        self.assertEqual(envelope["version"], "v1")
        self.assertEqual(envelope["algorithm"], "AES-256-GCM")
        self.assertTrue(is_transport_envelope(envelope))
        self.assertEqual(self.sealer.open(envelope), body)

    def test_ciphertext_carries_tag(self):
        envelope = self.sealer.seal({})
        # "{}" is two bytes of plaintext plus a 16-byte GCM tag
        self.assertEqual(len(base64.b64decode(envelope["ciphertext"])), 2 + 16)

    def test_tampered_ciphertext_raises(self):
        envelope = self.sealer.seal({"a": 1})
        envelope["ciphertext"] = _flip_first_byte(envelope["ciphertext"])
        with self.assertRaises(ValueError):
            self.sealer.open(envelope)

    def test_is_transport_envelope_rejects_other_shapes(self):
        self.assertFalse(is_transport_envelope(None))
        self.assertFalse(is_transport_envelope({"version": "v2", "algorithm": "AES-256-GCM", "iv": "", "ciphertext": ""}))
        self.assertFalse(is_transport_envelope({"version": "v1", "algorithm": "AES-256-GCM", "iv": 1, "ciphertext": ""}))
        self.assertFalse(is_transport_envelope(["v1"]))


class TestSealerProviders(unittest.TestCase):
    def setUp(self):
        sealing.get_payload_sealer.cache_clear()
        sealing.get_transport_sealer.cache_clear()

    tearDown = setUp

    def test_missing_data_key_is_a_configuration_error(self):
        with mock.patch.object(sealing.settings, "data_encryption_key", ""):
            with self.assertRaises(RuntimeError):
                sealing.get_payload_sealer()

    def test_transport_key_falls_back_to_data_key(self):
        with mock.patch.object(sealing.settings, "data_encryption_key", "fallback-secret"), \
                mock.patch.object(sealing.settings, "transport_encryption_key", None):
            envelope = TransportSealer("fallback-secret").seal({"x": 1})
            self.assertEqual(sealing.get_transport_sealer().open(envelope), {"x": 1})


class TestMasking(unittest.TestCase):
    def test_mask_email_keeps_domain_structure(self):
        self.assertEqual(mask_email("jane.doe@example.com"), "j••••••e@e•••••e.com")

    def test_mask_email_multi_label_domain(self):
        self.assertEqual(mask_email("jo@mail.example.co.uk"), "j•@m••l.example.co.uk")

    def test_mask_email_without_at_sign(self):
        self.assertEqual(mask_email("nodomain"), "n••••••n")

    def test_mask_value_defaults(self):
        self.assertEqual(mask_value("4111111111111111"), "41••••••••••••11")

    def test_short_values_are_fully_masked(self):
        self.assertEqual(mask_value("abc"), "••")
        self.assertEqual(mask_value(""), "")

    def test_zero_suffix_hides_the_tail(self):
        self.assertEqual(mask_value("Doe", prefix=1, suffix=0), "D••")

    def test_phone_mask(self):
        self.assertEqual(mask_value("3105550142", prefix=3, suffix=2), "310•••••42")


if __name__ == "__main__":
    unittest.main()
