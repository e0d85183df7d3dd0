"""Request correlation IDs.

Every request gets an ID: the caller's ``X-Request-ID`` when it is a UUID
(or a ``test-`` ID), otherwise a fresh UUID. The ID is bound into the
structlog context, stored on ``request.state`` and echoed in the response.
"""

import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from structlog.contextvars import bind_contextvars, clear_contextvars

REQUEST_ID_HEADER = "X-Request-ID"


def is_valid_request_id(value: str | None) -> bool:
    if not value:
        return False
    if value.startswith("test-"):
        return True
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to each request and its log events."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        header_value = request.headers.get(REQUEST_ID_HEADER)
        correlation_id = (
            header_value if is_valid_request_id(header_value) else str(uuid.uuid4())
        )

        clear_contextvars()
        bind_contextvars(correlation_id=correlation_id)
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response
