"""Error handling middleware.

Exceptions that escape an endpoint are returned as JSON bodies of the form
``{error, message, status_code, correlation_id}``.
"""

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from fitfindr.core.logging import get_logger
from fitfindr.middleware.correlation import REQUEST_ID_HEADER

logger = get_logger()

# First matching entry wins
STATUS_BY_EXCEPTION: tuple[tuple[type[Exception], int], ...] = (
    (KeyError, HTTP_404_NOT_FOUND),
    (ValueError, HTTP_422_UNPROCESSABLE_ENTITY),
    (SQLAlchemyError, HTTP_503_SERVICE_UNAVAILABLE),
)


def error_status(exc: Exception) -> int:
    """HTTP status for an unhandled exception."""
    if isinstance(exc, HTTPException):
        return exc.status_code
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return HTTP_500_INTERNAL_SERVER_ERROR


def error_message(exc: Exception) -> str:
    """Client-facing message; database internals are not exposed."""
    if isinstance(exc, HTTPException):
        return str(exc.detail)
    if isinstance(exc, SQLAlchemyError):
        return "Database unavailable"
    if isinstance(exc, KeyError):
        return f"'{exc.args[0]}'" if exc.args else str(exc)
    return str(exc.args[0]) if exc.args else str(exc)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn exceptions escaping an endpoint into JSON error responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            correlation_id = getattr(request.state, "correlation_id", None)
            status_code = error_status(exc)
            message = error_message(exc)

            log = logger.exception if status_code >= 500 else logger.warning
            log(
                "request_error",
                error_type=exc.__class__.__name__,
                error_message=message,
                status_code=status_code,
                path=request.url.path,
                method=request.method,
            )

            response = JSONResponse(
                status_code=status_code,
                content={
                    "error": exc.__class__.__name__,
                    "message": message,
                    "status_code": status_code,
                    "correlation_id": correlation_id or "unknown",
                },
            )
            if correlation_id:
                response.headers[REQUEST_ID_HEADER] = correlation_id
            return response
