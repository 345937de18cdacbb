from __future__ import annotations

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after_seconds: int

    def headers(self) -> dict[str, str]:
        out = {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after_seconds),
        }
        if not self.allowed:
            out["Retry-After"] = str(self.reset_after_seconds)
        return out


class FixedWindowRateLimiter:
    """One request budget shared by every caller of the process.

    The window index is derived from a monotonic clock, so the counter resets
    whenever a new window starts. Increment-and-check runs under a single lock.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = asyncio.Lock()
        self._bucket: int | None = None
        self._count = 0

    async def hit(self, *, limit: int, window_seconds: int) -> RateLimitDecision:
        window_seconds = max(1, int(window_seconds))
        limit = max(1, int(limit))

        async with self._lock:
            now = self._clock()
            bucket = int(now // window_seconds)
            if bucket != self._bucket:
                self._bucket = bucket
                self._count = 0
            self._count += 1
            current = self._count

        reset_after = max(1, math.ceil((bucket + 1) * window_seconds - now))
        return RateLimitDecision(
            allowed=current <= limit,
            limit=limit,
            remaining=max(0, limit - current),
            reset_after_seconds=reset_after,
        )

    async def reset(self) -> None:
        async with self._lock:
            self._bucket = None
            self._count = 0
