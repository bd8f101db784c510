"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Keeps one timestamp per admitted request, so memory per key is bounded by
  the limit.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from typing import Callable

from restaurant_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter admitting at most ``limit`` requests in any trailing window.

    Each key owns a deque of admission timestamps. Entries older than
    ``window_seconds`` are dropped on access; keys whose deque empties are
    evicted during periodic sweeps.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
        sweep_interval_seconds: float | None = None,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of admitted units per window.
            window_seconds: Length of the trailing window in seconds.
            clock: Time source returning UNIX time in seconds.
            sweep_interval_seconds: How often idle keys are evicted
                (defaults to the window length).

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._sweep_interval = sweep_interval_seconds or float(window_seconds)
        self._last_sweep = clock()
        self._lock = threading.RLock()
        self._hits_by_key: dict[str, deque[float]] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    @property
    def tracked_keys(self) -> int:
        """Number of keys currently holding request timestamps."""
        return len(self._hits_by_key)

    def _expire(self, hits: deque[float], now: float) -> None:
        cutoff = now - self._window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        """Drop keys with no requests left inside the window."""
        if now - self._last_sweep < self._sweep_interval:
            return
        for key in list(self._hits_by_key):
            hits = self._hits_by_key[key]
            self._expire(hits, now)
            if not hits:
                del self._hits_by_key[key]
        self._last_sweep = now

    def _reset_at(self, hits: deque[float], now: float) -> float:
        oldest = hits[0] if hits else now
        return oldest + self._window_seconds

    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        """Consume budget for ``key`` if the trailing window has room.

        Args:
            key: Client identity.
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty or cost is invalid.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self._clock()

        with self._lock:
            self._sweep(now)
            hits = self._hits_by_key.setdefault(key, deque())
            self._expire(hits, now)

            if len(hits) + cost <= self._limit:
                hits.extend([now] * cost)
                return RateLimitResult(
                    allowed=True,
                    limit=self._limit,
                    remaining=self._limit - len(hits),
                    reset_at=int(math.ceil(self._reset_at(hits, now))),
                    retry_after_seconds=None,
                )

            reset_at = self._reset_at(hits, now)
            return RateLimitResult(
                allowed=False,
                limit=self._limit,
                remaining=max(0, self._limit - len(hits)),
                reset_at=int(math.ceil(reset_at)),
                retry_after_seconds=max(1, int(math.ceil(reset_at - now))),
            )
