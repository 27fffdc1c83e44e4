"""Shared test fixtures."""

import json
from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from stripe_relay.config import Settings
from stripe_relay.services.signature import generate_signature_header

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

STRIPE_SECRET = "whsec_test_6f1c0b2d"
SHARED_SECRET = "billing_shared_test"
DOWNSTREAM_URL = "https://script.example.test/macros/s/abc/exec?mode=billingWebhook"


def load_event(name: str) -> dict:
    return json.loads((FIXTURES_DIR / "events" / f"{name}.json").read_text(encoding="utf-8"))


def encode(event: dict) -> bytes:
    return json.dumps(event).encode("utf-8")


def signed_headers(body: bytes, secret: str = STRIPE_SECRET, timestamp: int | None = None) -> dict:
    return {
        "Content-Type": "application/json",
        "Stripe-Signature": generate_signature_header(body, secret, timestamp),
    }


def make_settings(**overrides) -> Settings:
    values = {
        "stripe_webhook_secret": STRIPE_SECRET,
        "apps_script_webhook_url": DOWNSTREAM_URL,
        "billing_webhook_shared_secret": SHARED_SECRET,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class Downstream:
    """Mock downstream endpoint recording every request it receives.

    ``responder`` maps a request to a response; defaults to 200 "ok".
    """

    def __init__(self, responder=None):
        self.requests: list[httpx.Request] = []
        self.responder = responder or (lambda request: httpx.Response(200, text="ok"))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def envelopes(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def downstream():
    return Downstream()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
async def http_client(downstream):
    """Outbound client wired to the mock downstream."""
    async with httpx.AsyncClient(transport=downstream.transport(), follow_redirects=False) as client:
        yield client


@pytest.fixture
def app(settings, http_client):
    """Create a test application instance talking to the mock downstream."""
    from stripe_relay.main import create_app

    _app = create_app(settings)
    _app.state.http_client = http_client
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
