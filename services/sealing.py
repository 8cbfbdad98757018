"""
AES-256-GCM sealing for customer data.

Two schemes share the algorithm but not the wire shape:
- PayloadSealer keeps PII out of plaintext in the journey store
  ({iv, ciphertext, auth_tag}, tag stored separately).
- TransportSealer opens/creates request-body envelopes exchanged with the
  browser ({version, algorithm, iv, ciphertext}, tag appended to ciphertext
  as Web Crypto does).
"""
from __future__ import annotations

import base64
import hashlib
import json
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from config import settings

IV_BYTES = 12
TAG_BYTES = 16
ENVELOPE_VERSION = "v1"
ENVELOPE_ALGORITHM = "AES-256-GCM"


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(data: str) -> bytes:
    return base64.b64decode(data.encode("ascii"), validate=True)


def derive_key(secret: str) -> bytes:
    """SHA-256 of the secret gives the 32-byte AES key."""
    return hashlib.sha256(secret.encode("utf-8")).digest()


@dataclass(frozen=True)
class EncryptedPayload:
    iv: str
    ciphertext: str
    auth_tag: str


class PayloadSealer:
    """At-rest sealing of JSON-serialisable values."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("An encryption secret is required")
        self._aead = AESGCM(derive_key(secret))

    def seal(self, value: Any) -> EncryptedPayload:
        iv = os.urandom(IV_BYTES)
        serialized = json.dumps(value).encode("utf-8")
        sealed = self._aead.encrypt(iv, serialized, None)
        return EncryptedPayload(
            iv=_b64encode(iv),
            ciphertext=_b64encode(sealed[:-TAG_BYTES]),
            auth_tag=_b64encode(sealed[-TAG_BYTES:]),
        )

    def open(self, payload: EncryptedPayload) -> Any:
        try:
            iv = _b64decode(payload.iv)
            data = _b64decode(payload.ciphertext) + _b64decode(payload.auth_tag)
            plaintext = self._aead.decrypt(iv, data, None)
        except (InvalidTag, ValueError) as e:
            raise ValueError("Invalid or corrupted encrypted data") from e
        return json.loads(plaintext.decode("utf-8"))


def is_transport_envelope(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and value.get("version") == ENVELOPE_VERSION
        and value.get("algorithm") == ENVELOPE_ALGORITHM
        and isinstance(value.get("iv"), str)
        and isinstance(value.get("ciphertext"), str)
    )


class TransportSealer:
    """Envelope sealing for request bodies (pre-shared key, on top of TLS)."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("A transport secret is required")
        self._aead = AESGCM(derive_key(secret))

    def seal(self, value: Any) -> dict[str, str]:
        iv = os.urandom(IV_BYTES)
        sealed = self._aead.encrypt(iv, json.dumps(value).encode("utf-8"), None)
        return {
            "version": ENVELOPE_VERSION,
            "algorithm": ENVELOPE_ALGORITHM,
            "iv": _b64encode(iv),
            "ciphertext": _b64encode(sealed),
        }

    def open(self, envelope: dict[str, Any]) -> Any:
        if not is_transport_envelope(envelope):
            raise ValueError("Not a transport envelope")
        try:
            plaintext = self._aead.decrypt(
                _b64decode(envelope["iv"]),
                _b64decode(envelope["ciphertext"]),
                None,
            )
        except (InvalidTag, ValueError) as e:
            raise ValueError("Unable to open transport envelope") from e
        return json.loads(plaintext.decode("utf-8"))


@lru_cache(maxsize=1)
def get_payload_sealer() -> PayloadSealer:
    if not settings.data_encryption_key:
        raise RuntimeError(
            "DATA_ENCRYPTION_KEY not configured. "
            'Generate with: python -c "import secrets; print(secrets.token_urlsafe(32))"'
        )
    return PayloadSealer(settings.data_encryption_key)


@lru_cache(maxsize=1)
def get_transport_sealer() -> TransportSealer:
    if not settings.transport_secret:
        raise RuntimeError("TRANSPORT_ENCRYPTION_KEY (or DATA_ENCRYPTION_KEY) not configured.")
    return TransportSealer(settings.transport_secret)
