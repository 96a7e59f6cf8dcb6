# src/llm/rate_limiter.py — v1
"""Async token-bucket rate limiter for AI calls.

Limits how fast calls are issued, independently of how many run at once.
The bucket holds ``rpm`` tokens and refills at ``rpm / 60`` tokens per
second; each call takes one token, waiting when the bucket is empty.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class AsyncTokenBucket:
    """Token bucket shared by every AI call of one orchestrator.

    ``rpm=0`` disables limiting.
    """

    def __init__(
        self,
        rpm: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if rpm < 0:
            raise ValueError(f"rpm must be >= 0, got {rpm}")
        self._rpm = rpm
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(rpm)
        self._last_update = clock()
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self._rpm > 0

    @property
    def available_tokens(self) -> float:
        return self._tokens

    async def acquire(self) -> float:
        """Take one token, waiting for a refill if needed.

        Returns:
            Seconds spent waiting.
        """
        if not self.enabled:
            return 0.0

        waited = 0.0
        wait = 0.0
        async with self._lock:
            while True:
                self._refill(min_elapsed=wait)
                if self._tokens >= 1 - 1e-9:
                    self._tokens = max(0.0, self._tokens - 1)
                    return waited
                wait = (1 - self._tokens) * 60.0 / self._rpm
                logger.debug("Rate limit reached, waiting %.2fs", wait)
                await self._sleep(wait)
                waited += wait

    def _refill(self, min_elapsed: float = 0.0) -> None:
        # A sleep of n seconds always credits at least n seconds of refill.
        now = self._clock()
        elapsed = max(min_elapsed, now - self._last_update)
        self._tokens = min(float(self._rpm), self._tokens + elapsed * (self._rpm / 60.0))
        self._last_update = now
