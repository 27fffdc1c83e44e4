"""FastAPI exception handlers producing plain-text webhook responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from stripe_relay.errors.exceptions import RelayError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "webhook_rejected",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "path": request.url.path,
                "code": exc.code,
                "status_code": exc.status_code,
                "reason": exc.message,
                "details": exc.details,
            },
        )
        return PlainTextResponse(exc.message, status_code=exc.status_code)
