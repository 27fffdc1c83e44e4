"""Structured logging configuration using structlog.

All modules log through ``logging.getLogger(__name__)``; records are rendered
by structlog so request and event context bound per request appear on every
line.
"""

import logging
import sys

import structlog

from stripe_relay.version import SERVICE_NAME

# Event-dict keys whose values must never reach the log output
SECRET_KEYS = frozenset({"shared_secret", "sharedSecret", "stripe_webhook_secret", "billing_webhook_shared_secret"})
REDACTED = "[redacted]"

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def redact_secrets(_logger, _method_name: str, event_dict: dict) -> dict:
    """Mask secret values, including inside nested ``details`` mappings."""
    for key, value in event_dict.items():
        if key in SECRET_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, dict) and SECRET_KEYS.intersection(value):
            event_dict[key] = {k: REDACTED if k in SECRET_KEYS else v for k, v in value.items()}
    return event_dict


def add_service_name(_logger, _method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
    ]


def configure_logging(log_level: str = "info", json_output: bool = True) -> None:
    """Send stdlib log records through structlog renderers on stdout.

    Args:
        log_level: Logging level string (debug/info/warning/error).
        json_output: One JSON object per line (Cloud Run) when True, colored
            console output for local runs otherwise.
    """
    pre_chain = _pre_chain()
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(request_id: str) -> None:
    """Bind the request id to the current async context."""
    structlog.contextvars.bind_contextvars(request_id=request_id)


def bind_event_context(event_id: str, event_type: str) -> None:
    """Add the verified event to the current request's log context."""
    ctx = {"event_type": event_type}
    if event_id:
        ctx["event_id"] = event_id
    structlog.contextvars.bind_contextvars(**ctx)


def clear_request_context() -> None:
    """Clear bound context variables after a request."""
    structlog.contextvars.clear_contextvars()
