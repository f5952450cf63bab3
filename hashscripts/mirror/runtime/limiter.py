"""Admission control for requests sharing one mirror-node rate limit."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable


class RequestLimiter:
    """Bounded concurrency plus a requests-per-second budget.

    A semaphore caps requests in flight; start times are spaced at least
    ``1 / requests_per_second`` apart. One limiter is shared by every
    traversal of a client so concurrent traversals draw from the same budget.
    """

    def __init__(
        self,
        max_concurrency: int = 8,
        requests_per_second: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if requests_per_second is not None and requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.max_concurrency = max_concurrency
        self.requests_per_second = requests_per_second
        self._interval = 1.0 / requests_per_second if requests_per_second else 0.0
        self._clock = clock
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._lock = asyncio.Lock()
        self._next_start = 0.0
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def acquire(self) -> None:
        await self._semaphore.acquire()
        try:
            if self._interval:
                async with self._lock:
                    now = self._clock()
                    start = max(now, self._next_start)
                    self._next_start = start + self._interval
                wait = start - now
                if wait > 0:
                    await asyncio.sleep(wait)
        except BaseException:
            self._semaphore.release()
            raise
        self._in_flight += 1

    def release(self) -> None:
        self._in_flight -= 1
        self._semaphore.release()

    async def __aenter__(self) -> RequestLimiter:
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()
