"""Event type allow-list."""

from collections.abc import Set

DEFAULT_ALLOWED_EVENT_TYPES = "invoice.paid,invoice.payment_failed,invoice.finalized"


def parse_allowed_types(raw: str) -> frozenset[str]:
    """Parse a comma-separated list of event types, ignoring blank entries."""
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def is_allowed(event_type: str, allow_set: Set[str]) -> bool:
    """Exact, case-sensitive membership check. No wildcards."""
    return event_type in allow_set
