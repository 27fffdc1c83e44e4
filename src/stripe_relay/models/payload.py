"""Pydantic models for the simplified payload and the downstream envelope."""

import json
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventKind(StrEnum):
    INVOICE = "invoice"
    GENERIC = "generic"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class InvoicePayload(_CamelModel):
    """Invoice fields the billing backend needs."""

    invoice_id: str = ""
    status: str = ""
    hosted_invoice_url: str = ""
    amount_due: float | None = None  # major units
    currency: str = "usd"
    created_at: str = ""  # ISO-8601 UTC or ""
    paid_at: str = ""
    customer: str = ""
    number: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)


class GenericPayload(_CamelModel):
    """Fallback shape for non-invoice events."""

    raw_type: str
    object_id: str = ""
    object_type: str = ""


SimplifiedPayload = InvoicePayload | GenericPayload


class ForwardEnvelope(_CamelModel):
    """JSON document POSTed to the downstream endpoint."""

    shared_secret: str
    event_id: str
    type: str
    data: SimplifiedPayload

    def to_json_bytes(self) -> bytes:
        body = self.model_dump(mode="json", by_alias=True)
        return json.dumps(body, separators=(",", ":")).encode("utf-8")
