"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: check-and-increment runs under a lock, so concurrent requests
  can never be admitted beyond the budget.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from waitlist_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision


@dataclass
class _Window:
    opened_at: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per key.

    A key's window opens with its first call and lasts ``window_seconds``.
    Up to ``limit`` calls are admitted inside it; later calls are rejected
    until the window expires, at which point the next call opens a new one.

    Expired windows are swept once the number of tracked keys reaches
    ``sweep_threshold``, so memory follows the number of active clients.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = 10_000,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admitted calls per window.
            window_seconds: Window length in seconds.
            clock: Time source returning seconds; monotonic by default.
            sweep_threshold: Tracked-key count that triggers a sweep.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._lock = threading.Lock()
        self._windows: dict[str, _Window] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _expired(self, window: _Window, now: float) -> bool:
        return now - window.opened_at >= self._window_seconds

    def _sweep(self, now: float) -> None:
        # Caller holds the lock
        stale = [key for key, window in self._windows.items() if self._expired(window, now)]
        for key in stale:
            del self._windows[key]

    def admit(self, key: str) -> RateLimitDecision:
        """Admit or reject one call for ``key``.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self._clock()

        with self._lock:
            window = self._windows.get(key)
            if window is None or self._expired(window, now):
                if window is None and len(self._windows) >= self._sweep_threshold:
                    self._sweep(now)
                window = _Window(opened_at=now, count=0)
                self._windows[key] = window

            if window.count < self._limit:
                window.count += 1
                return RateLimitDecision(
                    allowed=True,
                    limit=self._limit,
                    remaining=self._limit - window.count,
                )

            return RateLimitDecision(allowed=False, limit=self._limit, remaining=0)
