"""Fixed-window request rate limiting keyed by client address."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass

from catalog_favorites.cache import CounterStore, rate_limit_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int


class RateLimiter:
    """Allows ``max_requests`` per ``window_seconds`` for each client."""

    def __init__(
        self,
        counters: CounterStore,
        *,
        max_requests: int,
        window_seconds: int,
    ) -> None:
        self._counters = counters
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def hit(self, client_id: str, *, now: float | None = None) -> RateLimitDecision:
        """Record one request for ``client_id`` and decide whether to serve it."""

        current = time.time() if now is None else now
        window_index = int(current // self.window_seconds)
        count = await self._counters.increment(
            rate_limit_key(client_id, window_index), self.window_seconds
        )
        window_end = (window_index + 1) * self.window_seconds
        retry_after = max(1, math.ceil(window_end - current))

        if count > self.max_requests:
            logger.warning("Rate limit exceeded for client %s", client_id)
            return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

        return RateLimitDecision(
            allowed=True,
            remaining=self.max_requests - count,
            retry_after=retry_after,
        )


__all__ = ["RateLimitDecision", "RateLimiter"]
