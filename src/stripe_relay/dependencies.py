"""FastAPI dependency injection providers."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from stripe_relay.config import Settings
from stripe_relay.services.forwarder import RedirectPreservingForwarder
from stripe_relay.services.relay import WebhookRelay
from stripe_relay.services.signature import StripeSignatureVerifier


def get_settings(request: Request) -> Settings:
    """Return the settings the app was created with."""
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared outbound HTTP client from app state."""
    return request.app.state.http_client


def get_relay(
    settings: Annotated[Settings, Depends(get_settings)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> WebhookRelay:
    """Assemble the webhook pipeline from app-wide configuration."""
    return WebhookRelay(
        settings=settings,
        verifier=StripeSignatureVerifier(
            settings.stripe_webhook_secret,
            tolerance=settings.stripe_signature_tolerance_seconds,
        ),
        forwarder=RedirectPreservingForwarder(client),
    )


# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
Relay = Annotated[WebhookRelay, Depends(get_relay)]
