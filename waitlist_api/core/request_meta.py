"""Helpers reading provenance metadata off an incoming request.

These values are recorded with each signup and used to key the rate limiter.
They are never used for authorization.
"""

from __future__ import annotations

from fastapi import Request

FORWARDED_FOR_HEADER = "X-Forwarded-For"


def forwarded_for_ip(request: Request) -> str | None:
    """Return the first address of the X-Forwarded-For chain, if any."""

    header = request.headers.get(FORWARDED_FOR_HEADER)
    if not header:
        return None
    first = header.split(",")[0].strip()
    return first or None


def peer_ip(request: Request) -> str | None:
    """Return the address of the direct connection, if known."""

    return request.client.host if request.client else None


def resolve_client_ip(request: Request) -> str | None:
    """First X-Forwarded-For entry, else the peer address, else None."""

    return forwarded_for_ip(request) or peer_ip(request)


def resolve_user_agent(request: Request) -> str | None:
    return request.headers.get("User-Agent") or None
