"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings

from stripe_relay.services.event_filter import DEFAULT_ALLOWED_EVENT_TYPES, parse_allowed_types


class Settings(BaseSettings):
    # Inbound Stripe signing secret (whsec_...)
    stripe_webhook_secret: str = ""
    stripe_signature_tolerance_seconds: int = 300

    # Downstream destination and the secret this relay presents to it
    apps_script_webhook_url: str = ""
    billing_webhook_shared_secret: str = ""
    forward_timeout_seconds: float = 10.0

    # Comma-separated event types to forward; everything else is acknowledged and dropped
    allowed_event_types: str = DEFAULT_ALLOWED_EVENT_TYPES

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    log_json: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @property
    def allowed_event_set(self) -> frozenset[str]:
        return parse_allowed_types(self.allowed_event_types)

    @property
    def forwarding_configured(self) -> bool:
        """True when both the destination URL and its shared secret are set."""
        return bool(self.apps_script_webhook_url and self.billing_webhook_shared_secret)

    def missing_settings(self) -> list[str]:
        """Return the environment variable names of unset required values."""
        required = {
            "STRIPE_WEBHOOK_SECRET": self.stripe_webhook_secret,
            "APPS_SCRIPT_WEBHOOK_URL": self.apps_script_webhook_url,
            "BILLING_WEBHOOK_SHARED_SECRET": self.billing_webhook_shared_secret,
        }
        return [name for name, value in required.items() if not value]
