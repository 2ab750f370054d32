"""HTTP middleware: request correlation, origin allow-listing, hardening headers.

Usage (see app_factory):
    app.middleware("http")(unhandled_error_middleware)
    app.middleware("http")(build_origin_guard(origins))
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(build_request_id_middleware(header_name))
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Awaitable, Callable, Iterable

from fastapi import Request, Response

from waitlist_api.core.exception_handlers import error_response, general_exception_handler
from waitlist_api.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, CallNext], Awaitable[Response]]

# Same baseline a helmet()-protected service would send
SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
}


def build_request_id_middleware(header_name: str = "X-Request-ID") -> Middleware:
    """Create middleware propagating or generating a request id.

    The incoming ``header_name`` header is reused when present; otherwise a
    UUID is generated. The id is stored in contextvars for log correlation
    and echoed on the response together with X-Request-Duration-ms.

    Args:
        header_name: Header carrying the correlation id (LOG_REQUEST_ID_HEADER).

    Returns:
        An ``http`` middleware callable.
    """

    async def request_id_middleware(request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(header_name) or str(uuid.uuid4())
        set_request_id(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            clear_request_id()

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers[header_name] = request_id
        response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
        return response

    return request_id_middleware


async def unhandled_error_middleware(request: Request, call_next: CallNext) -> Response:
    """Render unexpected exceptions inside the middleware stack.

    Exception handlers registered for ``Exception`` run in Starlette's
    outermost ServerErrorMiddleware, where the request id is already cleared
    and no other middleware touches the response. Catching here keeps the
    500 body correlated and the hardening headers applied.
    """

    try:
        return await call_next(request)
    except Exception as exc:
        return await general_exception_handler(request, exc)


async def security_headers_middleware(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def build_origin_guard(allowed_origins: Iterable[str]) -> Middleware:
    """Create middleware rejecting browser calls from unknown origins.

    Requests without an Origin header (same-origin navigation, curl,
    server-to-server) pass through untouched.

    Args:
        allowed_origins: Exact origins allowed to call the API.

    Returns:
        An ``http`` middleware callable.
    """

    allowed = frozenset(allowed_origins)

    async def origin_guard(request: Request, call_next: CallNext) -> Response:
        origin = request.headers.get("Origin")
        if origin is None or origin in allowed:
            return await call_next(request)

        logger.warning(
            "cors.origin_rejected",
            extra={"origin": origin, "request_path": request.url.path},
        )
        return error_response(403, "origin_not_allowed", "Not allowed by CORS")

    return origin_guard
