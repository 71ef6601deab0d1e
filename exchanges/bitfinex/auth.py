"""
Request signing for Bitfinex v1 private endpoints.

Signed calls carry everything in headers: the request path, a nonce and the
call-specific fields are serialized to JSON, base64-encoded into the payload
header, and the payload is signed with HMAC-SHA384 keyed by the API secret.
The HTTP body stays empty.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Mapping, Optional

from exchanges.base_client import ExchangeCredentials

RESERVED_FIELDS = frozenset({"request", "nonce"})


class NonceGenerator:
    """
    Issue millisecond-resolution nonces that strictly increase.

    The exchange rejects a nonce that is not larger than the last one it saw
    for the same API key, so a clock stepping backwards (or two calls within
    the same millisecond) is clamped to one above the previous value.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = Lock()

    def next(self) -> int:
        with self._lock:
            candidate = int(self._clock() * 1000 + 0.5)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate

    @property
    def last(self) -> int:
        return self._last


# Shared by every client in the process so nonces for one API key never repeat.
PROCESS_NONCE = NonceGenerator()


@dataclass(slots=True, frozen=True)
class SignedPayload:
    """Envelope for a single signed call."""

    nonce: int
    payload: str
    signature: str


def encode_payload(request_path: str, nonce: int, fields: Optional[Mapping[str, Any]] = None) -> str:
    """Serialize the request envelope to compact JSON and base64-encode it."""
    extra = dict(fields or {})
    clashes = RESERVED_FIELDS.intersection(extra)
    if clashes:
        raise ValueError(f"Payload fields may not override {sorted(clashes)}")
    envelope: Dict[str, Any] = {"request": request_path, "nonce": str(nonce)}
    envelope.update(extra)
    raw = json.dumps(envelope, separators=(",", ":"))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def sign_payload(payload: str, secret: str) -> str:
    """Return the lowercase hex HMAC-SHA384 of `payload`."""
    mac = hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha384,
    )
    return mac.hexdigest()


def sign_request(
    credentials: ExchangeCredentials,
    request_path: str,
    nonce: int,
    fields: Optional[Mapping[str, Any]] = None,
) -> SignedPayload:
    payload = encode_payload(request_path, nonce, fields)
    return SignedPayload(nonce=nonce, payload=payload, signature=sign_payload(payload, credentials.api_secret))


def build_auth_headers(credentials: ExchangeCredentials, signed: SignedPayload) -> Dict[str, str]:
    """Compose the HTTP headers required by Bitfinex private endpoints."""
    return {
        "X-BFX-APIKEY": credentials.api_key,
        "X-BFX-SIGNATURE": signed.signature,
        "X-BFX-PAYLOAD": signed.payload,
    }
