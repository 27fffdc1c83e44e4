"""Request ID middleware for request/response and log propagation."""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from stripe_relay.logging_config import bind_request_context, clear_request_context


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Take X-Request-Id from the request or generate one, bind it for logging, echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or f"req_{uuid.uuid4().hex[:16]}"
        request.state.request_id = request_id
        clear_request_context()
        bind_request_context(request_id)

        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-Id"] = request_id
        return response
