"""Global exception handlers for consistent error responses.

Design:
- ValidationAppError / malformed bodies → 400
- RateLimitAppError → 429
- StoreAppError and unexpected exceptions → 500 with a generic message;
  the detail only goes to the server log
- Every error body has the shape {"error": {code, message, request_id}}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from waitlist_api.core.errors import AppError, RateLimitAppError, StoreAppError
from waitlist_api.core.logging import get_request_id

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Something went wrong. Please try again later."


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build the JSON error body shared by every non-2xx response."""

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "request_id": get_request_id(),
            }
        },
    )


def _status_for(exc: AppError) -> int:
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, StoreAppError):
        return 500
    return 400


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map domain errors to their HTTP status.

    Server-side failures are logged with their details and answered with a
    generic message so no internals leak to the caller.
    """
    status_code = _status_for(exc)

    if status_code >= 500:
        logger.error(
            "app_error_handled",
            extra={
                "error_code": exc.code,
                "error_message": exc.message,
                "error_details": exc.details,
                "status_code": status_code,
                "request_path": request.url.path,
            },
        )
        return error_response(status_code, "server_error", GENERIC_SERVER_ERROR)

    logger.info(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "request_path": request.url.path,
        },
    )
    return error_response(status_code, exc.code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed bodies with 400 instead of FastAPI's default 422."""

    logger.info(
        "request_validation_failed",
        extra={
            "request_path": request.url.path,
            "error_count": len(exc.errors()),
        },
    )
    return error_response(400, "invalid_request", "email or phone required")


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net)."""

    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return error_response(500, "server_error", GENERIC_SERVER_ERROR)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)


__all__ = [
    "GENERIC_SERVER_ERROR",
    "error_response",
    "setup_exception_handlers",
]
