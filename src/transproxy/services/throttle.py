"""
Outbound call throttling.

Keeps a minimum interval between consecutive calls to a rate-limited API.
"""

import asyncio
import time
from typing import Awaitable, Callable


class MinIntervalLimiter:
    """
    Async limiter enforcing a minimum interval between calls.

    Usage:
        limiter = MinIntervalLimiter(1.0)
        async with limiter:
            await call_api()
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until the next call is allowed, then claim the slot."""
        async with self._lock:
            if self._last_call is not None:
                wait = self.min_interval - (self._clock() - self._last_call)
                if wait > 0:
                    await self._sleep(wait)
            self._last_call = self._clock()

    def reset(self) -> None:
        """Forget the previous call so the next one goes out immediately."""
        self._last_call = None

    async def __aenter__(self) -> "MinIntervalLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None
