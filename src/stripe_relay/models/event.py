"""Pydantic model for an authenticated Stripe event."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerifiedEvent(BaseModel):
    """A Stripe event whose signature has been checked.

    Only the fields the relay reads are modelled; ``object`` is the untyped
    ``data.object`` mapping of the event.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    type: str
    object: dict[str, Any] = Field(default_factory=dict)
    created: int | None = None
    livemode: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "VerifiedEvent":
        """Build from a decoded Stripe event body.

        Raises pydantic.ValidationError when ``type`` is missing or not a string.
        """
        data = payload.get("data")
        obj = data.get("object") if isinstance(data, dict) else None
        created = payload.get("created")
        return cls.model_validate(
            {
                "id": payload.get("id") if isinstance(payload.get("id"), str) else "",
                "type": payload.get("type"),
                "object": obj if isinstance(obj, dict) else {},
                "created": created if isinstance(created, int) and not isinstance(created, bool) else None,
                "livemode": payload.get("livemode") is True,
            },
            strict=True,
        )
