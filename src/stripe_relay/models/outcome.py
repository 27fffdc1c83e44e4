"""Result types returned by the forwarder and the relay."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ForwardOutcome:
    """Result of one delivery attempt including its redirect chain.

    ``status`` is 0 when the redirect limit was exhausted.
    """

    ok: bool
    status: int
    final_url: str
    body: str
    hop_count: int


@dataclass(frozen=True)
class RelayResult:
    """Successful (2xx) handling of an inbound webhook."""

    status_code: int
    message: str
    outcome: ForwardOutcome | None = None

    @property
    def delivered(self) -> bool:
        return self.outcome is not None and self.outcome.ok
