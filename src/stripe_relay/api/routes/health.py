"""Health check endpoints."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from stripe_relay.dependencies import AppSettings
from stripe_relay.version import SERVICE_NAME, __version__

router = APIRouter(tags=["Health"])


@router.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness probe used by Cloud Run."""
    return "ok"


@router.get("/health")
async def health_check(settings: AppSettings):
    """Return service health and whether forwarding is configured."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": __version__,
        "configured": settings.forwarding_configured and bool(settings.stripe_webhook_secret),
    }
