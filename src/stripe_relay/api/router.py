"""Master API router mounted at the application root."""

from fastapi import APIRouter

from stripe_relay.api.routes import health, stripe_webhook

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(stripe_webhook.router)
