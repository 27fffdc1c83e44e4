"""Stripe webhook signature verification.

Stripe signs ``"{timestamp}.{raw_body}"`` with HMAC-SHA256 and sends
``Stripe-Signature: t=<timestamp>,v1=<hex>[,v1=<hex>...]``. Verification must
run over the exact bytes received, before any JSON parsing.
See: https://docs.stripe.com/webhooks#verify-manually
"""

import hashlib
import hmac
import json
import logging
import time
from typing import Protocol

from pydantic import ValidationError

from stripe_relay.errors.exceptions import InvalidSignatureError, MissingSignatureError
from stripe_relay.models.event import VerifiedEvent

logger = logging.getLogger(__name__)

SIGNATURE_SCHEME = "v1"
DEFAULT_TOLERANCE_SECONDS = 300


class SignatureVerifier(Protocol):
    """Authenticates a raw webhook body and returns the parsed event."""

    def verify(self, raw_body: bytes, signature_header: str | None) -> VerifiedEvent: ...


def compute_signature(raw_body: bytes, secret: str, timestamp: int) -> str:
    """HMAC-SHA256 hex digest over ``"{timestamp}." + raw_body``."""
    signed_payload = f"{timestamp}.".encode("utf-8") + raw_body
    return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()


def generate_signature_header(raw_body: bytes, secret: str, timestamp: int | None = None) -> str:
    """Build a valid Stripe-Signature header value, e.g. for test deliveries."""
    if timestamp is None:
        timestamp = int(time.time())
    return f"t={timestamp},{SIGNATURE_SCHEME}={compute_signature(raw_body, secret, timestamp)}"


def _parse_header(signature_header: str) -> tuple[int, list[str]]:
    """Split the header into its timestamp and the candidate v1 signatures."""
    timestamp: int | None = None
    signatures: list[str] = []
    for item in signature_header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise InvalidSignatureError(details="Unable to parse timestamp from header")
        elif key == SIGNATURE_SCHEME and value:
            signatures.append(value)

    if timestamp is None:
        raise InvalidSignatureError(details="No timestamp found in header")
    if not signatures:
        raise InvalidSignatureError(details=f"No {SIGNATURE_SCHEME} signatures found in header")
    return timestamp, signatures


def _parse_event(raw_body: bytes) -> VerifiedEvent:
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise InvalidSignatureError(details="Payload is not valid JSON")
    if not isinstance(payload, dict):
        raise InvalidSignatureError(details="Payload is not a JSON object")
    try:
        return VerifiedEvent.from_payload(payload)
    except ValidationError:
        raise InvalidSignatureError(details="Payload has no event type")


def verify_event(
    raw_body: bytes,
    signature_header: str | None,
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> VerifiedEvent:
    """Verify a Stripe webhook and return the parsed event.

    Args:
        raw_body: Request body exactly as received.
        signature_header: Value of the Stripe-Signature header.
        secret: Endpoint signing secret (whsec_...).
        tolerance: Maximum age in seconds of the signed timestamp. 0 disables
            the replay check.
        now: Current unix time; defaults to ``time.time()``.

    Raises:
        MissingSignatureError: Header absent or blank.
        InvalidSignatureError: Header malformed, timestamp outside tolerance,
            no matching signature, or the body is not a Stripe event.
    """
    if not signature_header or not signature_header.strip():
        raise MissingSignatureError()
    if not secret:
        logger.warning("STRIPE_WEBHOOK_SECRET not set, rejecting webhook")
        raise InvalidSignatureError(details="Signing secret not configured")

    timestamp, signatures = _parse_header(signature_header)

    # Header values are latin-1 decoded and may hold non-ASCII; compare as bytes
    expected = compute_signature(raw_body, secret, timestamp).encode("ascii")
    if not any(
        hmac.compare_digest(expected, candidate.encode("utf-8", "surrogateescape")) for candidate in signatures
    ):
        raise InvalidSignatureError(details="No signatures found matching the expected signature for payload")

    # Replay window
    current = time.time() if now is None else now
    if tolerance > 0 and abs(current - timestamp) > tolerance:
        raise InvalidSignatureError(details="Timestamp outside the tolerance zone")

    return _parse_event(raw_body)


class StripeSignatureVerifier:
    """SignatureVerifier bound to one signing secret and tolerance window."""

    def __init__(self, secret: str, tolerance: int = DEFAULT_TOLERANCE_SECONDS) -> None:
        self._secret = secret
        self._tolerance = tolerance

    def verify(self, raw_body: bytes, signature_header: str | None) -> VerifiedEvent:
        return verify_event(raw_body, signature_header, self._secret, self._tolerance)

    def __repr__(self) -> str:
        return f"StripeSignatureVerifier(tolerance={self._tolerance})"
