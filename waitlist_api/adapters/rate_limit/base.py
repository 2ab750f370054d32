"""Rate limiter interfaces.

The signup flow depends on this abstraction (not the concrete implementation)
so the in-process limiter can later be replaced by a shared store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of an admission check.

    Attributes:
        allowed: True when the call was admitted and counted.
        limit: Max admitted calls per window.
        remaining: Calls left in the current window (0 when rejected).
    """

    allowed: bool
    limit: int
    remaining: int


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def admit(self, key: str) -> RateLimitDecision:
        """Check and count one call for the given client key.

        Args:
            key: Client identifier (e.g. ``ip:203.0.113.7``).

        Returns:
            RateLimitDecision describing whether the call may proceed.
        """
        raise NotImplementedError
