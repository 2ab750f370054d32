"""Rate limiting glue between the HTTP layer and the limiter adapter.

Strategy:
- Fixed-window limit per client, keyed on the peer address.
- Behind a trusted proxy the first X-Forwarded-For entry can be used
  instead (APP_RATE_LIMIT_TRUST_FORWARDED_FOR).
- Keys are hashed before they are logged so client IPs never hit the logs.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from waitlist_api.adapters.rate_limit.base import AbstractRateLimiter
from waitlist_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from waitlist_api.core.config import AppSettings
from waitlist_api.core.errors import RateLimitAppError
from waitlist_api.core.request_meta import forwarded_for_ip, peer_ip

logger = logging.getLogger(__name__)


def build_rate_limiter(app_settings: AppSettings) -> AbstractRateLimiter:
    """Construct the limiter configured for this process."""

    return InMemoryFixedWindowRateLimiter(
        limit=app_settings.rate_limit_requests,
        window_seconds=app_settings.rate_limit_window_seconds,
    )


def build_rate_limit_key(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Build the limiter key for the current request.

    Args:
        request: FastAPI request.
        trust_forwarded_for: Prefer the first X-Forwarded-For entry.

    Returns:
        str: Namespaced limiter key.
    """

    client_host = None
    if trust_forwarded_for:
        client_host = forwarded_for_ip(request)
    client_host = client_host or peer_ip(request) or "unknown"
    return f"ip:{client_host}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client IPs."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def enforce_rate_limit(limiter: AbstractRateLimiter, key: str) -> None:
    """Count one call against ``key`` and reject it when over budget.

    Args:
        limiter: Limiter owning the per-client counters.
        key: Client key from build_rate_limit_key().

    Raises:
        RateLimitAppError: When the client exceeded its budget for the window.
    """

    decision = limiter.admit(key)
    if decision.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": _hash_limiter_key(key),
                "limit": decision.limit,
                "remaining": decision.remaining,
            },
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "limit": decision.limit,
        },
    )
    raise RateLimitAppError(code="rate_limited", message="Too many requests")
