"""Reduce a Stripe event to the compact payload the billing backend consumes.

Stripe objects are untyped JSON. Every field is read through an accessor that
returns a typed default when the value is missing or of the wrong type, so
``simplify`` never raises.
"""

import json
import math
from datetime import datetime, timezone
from typing import Any

from stripe_relay.models.event import VerifiedEvent
from stripe_relay.models.payload import EventKind, GenericPayload, InvoicePayload, SimplifiedPayload

INVOICE_PREFIX = "invoice."
DEFAULT_CURRENCY = "usd"


def classify(event_type: str) -> EventKind:
    if event_type.startswith(INVOICE_PREFIX):
        return EventKind.INVOICE
    return EventKind.GENERIC


def _text(obj: dict[str, Any], key: str, default: str = "") -> str:
    value = obj.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def _int(obj: dict[str, Any], key: str) -> int | None:
    value = obj.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _ref(obj: dict[str, Any], key: str) -> str:
    """Id of a reference that may arrive expanded into a full object."""
    value = obj.get(key)
    if isinstance(value, dict):
        return _text(value, "id")
    return _text(obj, key)


def _mapping(obj: dict[str, Any], key: str) -> dict[str, Any]:
    value = obj.get(key)
    return value if isinstance(value, dict) else {}


def to_iso8601(unix_seconds: int | None) -> str:
    """Unix seconds -> ``YYYY-MM-DDTHH:MM:SS.sssZ``; falsy or invalid -> ``""``."""
    if not unix_seconds:
        return ""
    try:
        moment = datetime.fromtimestamp(unix_seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return ""
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_major_units(obj: dict[str, Any], key: str) -> float | None:
    """Minor units (cents) -> major units. Missing or non-numeric -> None."""
    value = obj.get(key)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return value / 100


def _metadata_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), default=str)


def _metadata(obj: dict[str, Any]) -> dict[str, str]:
    """Stripe metadata is string-valued; anything else is rendered as JSON text."""
    return {str(k): _metadata_value(v) for k, v in _mapping(obj, "metadata").items()}


def _simplify_invoice(obj: dict[str, Any]) -> InvoicePayload:
    transitions = _mapping(obj, "status_transitions")
    return InvoicePayload(
        invoice_id=_text(obj, "id"),
        status=_text(obj, "status"),
        hosted_invoice_url=_text(obj, "hosted_invoice_url"),
        amount_due=to_major_units(obj, "amount_due"),
        currency=_text(obj, "currency", DEFAULT_CURRENCY),
        created_at=to_iso8601(_int(obj, "created")),
        paid_at=to_iso8601(_int(transitions, "paid_at")),
        customer=_ref(obj, "customer"),
        number=_text(obj, "number"),
        metadata=_metadata(obj),
    )


def _simplify_generic(event_type: str, obj: dict[str, Any]) -> GenericPayload:
    return GenericPayload(
        raw_type=event_type,
        object_id=_text(obj, "id"),
        object_type=_text(obj, "object"),
    )


def simplify(event: VerifiedEvent) -> SimplifiedPayload:
    """Map a verified event to its invoice or generic payload."""
    kind = classify(event.type)
    if kind is EventKind.INVOICE:
        return _simplify_invoice(event.object)
    return _simplify_generic(event.type, event.object)
