"""Inbound Stripe webhook endpoint."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from stripe_relay.dependencies import Relay

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stripe"])


@router.post("/stripe-webhook", response_class=PlainTextResponse)
@router.post("/webhooks/stripe", response_class=PlainTextResponse, include_in_schema=False)
async def stripe_webhook(request: Request, relay: Relay) -> PlainTextResponse:
    """Verify a Stripe event and forward its simplified form downstream.

    The body is read raw; Stripe signs the exact bytes it sent.
    """
    raw_body = await request.body()
    logger.info("stripe_webhook_received", extra={"bytes": len(raw_body)})

    result = await relay.handle(raw_body, request.headers.get("stripe-signature"))
    return PlainTextResponse(result.message, status_code=result.status_code)
