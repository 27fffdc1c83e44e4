"""Per-request webhook pipeline: verify, filter, simplify, forward.

Outcome -> response:
    missing / bad signature        400  (Stripe does not retry)
    event type not allowed         200  Ignored
    forwarding not configured      500
    downstream accepted            200  Forwarded OK
    downstream failed              502
    anything unexpected            500
"""

import logging

import httpx

from stripe_relay.config import Settings
from stripe_relay.errors.exceptions import (
    ForwardFailedError,
    InternalRelayError,
    RelayError,
    ServerMisconfiguredError,
)
from stripe_relay.logging_config import bind_event_context
from stripe_relay.models.outcome import RelayResult
from stripe_relay.models.payload import ForwardEnvelope
from stripe_relay.services.event_filter import is_allowed
from stripe_relay.services.forwarder import RedirectPreservingForwarder, truncate
from stripe_relay.services.signature import SignatureVerifier
from stripe_relay.services.simplifier import simplify

logger = logging.getLogger(__name__)

LOG_BODY_CHARS = 300


class WebhookRelay:
    """Sequences the pipeline for one inbound webhook.

    Holds no per-request state; one instance may serve concurrent requests.
    """

    def __init__(
        self,
        settings: Settings,
        verifier: SignatureVerifier,
        forwarder: RedirectPreservingForwarder,
    ) -> None:
        self._settings = settings
        self._verifier = verifier
        self._forwarder = forwarder
        self._allowed = settings.allowed_event_set

    async def handle(self, raw_body: bytes, signature_header: str | None) -> RelayResult:
        """Run the pipeline.

        Returns a 200 RelayResult, or raises a RelayError carrying the status
        code to answer with.
        """
        try:
            return await self._process(raw_body, signature_header)
        except RelayError:
            raise
        except Exception as exc:
            logger.exception("webhook_handler_error")
            raise InternalRelayError(details=type(exc).__name__) from exc

    async def _process(self, raw_body: bytes, signature_header: str | None) -> RelayResult:
        event = self._verifier.verify(raw_body, signature_header)
        bind_event_context(event.id, event.type)

        if not is_allowed(event.type, self._allowed):
            logger.info("event_ignored")
            return RelayResult(status_code=200, message="Ignored")

        if not self._settings.forwarding_configured:
            raise ServerMisconfiguredError(
                details="Missing APPS_SCRIPT_WEBHOOK_URL or BILLING_WEBHOOK_SHARED_SECRET"
            )

        envelope = ForwardEnvelope(
            shared_secret=self._settings.billing_webhook_shared_secret,
            event_id=event.id,
            type=event.type,
            data=simplify(event),
        )

        try:
            outcome = await self._forwarder.deliver(self._settings.apps_script_webhook_url, envelope)
        except httpx.HTTPError as exc:
            raise ForwardFailedError(details=f"{type(exc).__name__}: {exc}") from exc

        if not outcome.ok:
            raise ForwardFailedError(
                details={
                    "status": outcome.status,
                    "final_url": outcome.final_url,
                    "hops": outcome.hop_count,
                    "body": truncate(outcome.body, LOG_BODY_CHARS),
                },
                outcome=outcome,
            )

        logger.info(
            "event_forwarded",
            extra={
                "status": outcome.status,
                "final_url": outcome.final_url,
                "hops": outcome.hop_count,
                "body": truncate(outcome.body, LOG_BODY_CHARS),
            },
        )
        return RelayResult(status_code=200, message="Forwarded OK", outcome=outcome)
