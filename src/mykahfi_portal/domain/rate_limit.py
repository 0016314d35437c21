"""Process-local fixed-window rate limiter for the login boundary.

Counters live in memory: they reset on restart and are not shared between
instances.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(slots=True)
class _Bucket:
    count: int
    reset_at: float


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    retry_after_seconds: int


class FixedWindowRateLimiter:
    """Counts hits per key inside a fixed window."""

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit < 1:
            raise ValueError("Rate limit must allow at least one hit.")
        if window_seconds <= 0:
            raise ValueError("Rate limit window must be greater than zero.")
        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None or bucket.reset_at <= now:
                self._buckets[key] = _Bucket(
                    count=1,
                    reset_at=now + self._window_seconds,
                )
                self._evict_expired(now)
                return RateLimitDecision(allowed=True, retry_after_seconds=0)

            if bucket.count >= self._limit:
                retry_after = max(1, math.ceil(bucket.reset_at - now))
                return RateLimitDecision(
                    allowed=False,
                    retry_after_seconds=retry_after,
                )

            bucket.count += 1
            return RateLimitDecision(allowed=True, retry_after_seconds=0)

    def reset(self, key: str) -> None:
        with self._lock:
            self._buckets.pop(key, None)

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, bucket in self._buckets.items() if bucket.reset_at <= now
        ]
        for key in expired:
            del self._buckets[key]
