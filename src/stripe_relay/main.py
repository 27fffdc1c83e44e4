"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from stripe_relay.config import Settings
from stripe_relay.logging_config import configure_logging
from stripe_relay.version import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared outbound HTTP client for the life of the process."""
    settings: Settings = app.state.settings
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.forward_timeout_seconds,
        follow_redirects=False,
    )
    logger.info(
        "Stripe relay started (allowed=%s)",
        ",".join(sorted(settings.allowed_event_set)),
    )
    yield

    await app.state.http_client.aclose()
    logger.info("Stripe relay shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Stripe Relay",
        version=__version__,
        description="Verifies Stripe webhooks and forwards simplified billing events downstream.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Missing values are reported now but only fail the requests that need them
    for name in settings.missing_settings():
        logger.warning("Missing %s", name)

    from stripe_relay.api.middleware.request_id import RequestIdMiddleware
    app.add_middleware(RequestIdMiddleware)

    # Register error handlers
    from stripe_relay.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Import and mount routers
    from stripe_relay.api.router import api_router
    app.include_router(api_router)

    return app


def build_app() -> FastAPI:
    """uvicorn factory: configure logging from the environment, then build the app."""
    settings = Settings()
    configure_logging(log_level=settings.log_level, json_output=settings.log_json)
    return create_app(settings)
