"""Back off when GitHub's remaining request quota runs low."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Track ``X-RateLimit-*`` headers and sleep until reset near exhaustion."""

    def __init__(self, threshold: int = 5, max_wait: float = 900.0) -> None:
        self.threshold = threshold
        self.max_wait = max_wait
        self._remaining: int | None = None
        self._reset_at: float | None = None

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            self._remaining = int(remaining)
        if reset is not None:
            self._reset_at = float(reset)

    @property
    def remaining(self) -> int | None:
        return self._remaining

    async def wait_if_needed(self) -> None:
        if self._remaining is None or self._reset_at is None:
            return
        if self._remaining > self.threshold:
            return
        wait = min(max(0.0, self._reset_at - time.time()) + 1, self.max_wait)
        logger.warning(
            "GitHub rate limit nearly exhausted (%d left), waiting %.0fs",
            self._remaining,
            wait,
        )
        await asyncio.sleep(wait)
        self._remaining = None
