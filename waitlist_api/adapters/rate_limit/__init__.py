"""Rate limiting adapters.

A small abstraction layer so the service can start with an in-memory limiter
and later move to Redis or another shared store without touching the
signup flow.
"""

from waitlist_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from waitlist_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = ["AbstractRateLimiter", "InMemoryFixedWindowRateLimiter", "RateLimitDecision"]
