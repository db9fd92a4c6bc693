"""Counter storage for request rate limiting.

Counters live in Redis when ``REDIS_URL`` points at a reachable server.  When
Redis is not configured, or the first connection attempt fails, the process
falls back to an in-memory store so limits still apply per worker.
"""

from __future__ import annotations

import asyncio
import logging
import time

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

logger = logging.getLogger(__name__)

_RATE_LIMIT_PREFIX = "ratelimit"

_local_counters: dict[str, tuple[float, int]] = {}
_local_counters_lock = asyncio.Lock()


def rate_limit_key(client_id: str, window_index: int) -> str:
    return f"{_RATE_LIMIT_PREFIX}:{client_id}:{window_index}"


async def local_counter_increment(key: str, ttl: int) -> int:
    """Increment an in-process counter that expires ``ttl`` seconds after creation."""

    now = time.time()
    async with _local_counters_lock:
        expires_at, value = _local_counters.get(key, (0.0, 0))
        if expires_at < now:
            expires_at, value = now + ttl, 0
        value += 1
        _local_counters[key] = (expires_at, value)

        # Opportunistically drop expired windows so the dict stays bounded.
        expired = [k for k, (deadline, _) in _local_counters.items() if deadline < now]
        for expired_key in expired:
            _local_counters.pop(expired_key, None)
        return value


async def local_counters_clear_all() -> None:
    """Remove every in-process counter (used for test isolation)."""

    async with _local_counters_lock:
        _local_counters.clear()


class CounterStore:
    """Increment-with-expiry counters backed by Redis or process memory."""

    def __init__(self, redis_url: str | None) -> None:
        self._redis_url = redis_url
        self._redis: Redis | None = None
        self._redis_disabled = redis_url is None
        self._client_lock = asyncio.Lock()

    async def _get_redis(self) -> Redis | None:
        """Get Redis client, returning None if connection fails."""

        if self._redis_disabled:
            return None

        async with self._client_lock:
            if self._redis is not None:
                return self._redis
            if self._redis_disabled:
                return None

            client = Redis.from_url(self._redis_url, decode_responses=True, encoding="utf-8")
            try:
                await client.ping()
            except (RedisConnectionError, RedisTimeoutError, OSError) as exc:
                logger.warning(
                    "Redis connection failed: %s. Rate limit counters will use process memory.",
                    exc,
                )
                self._redis_disabled = True
                await client.aclose()
                return None

            logger.info("Redis connection established successfully")
            self._redis = client
            return client

    async def increment(self, key: str, ttl: int) -> int:
        """Increment ``key`` and return its new value, starting a ``ttl`` window on first hit."""

        redis = await self._get_redis()
        if redis is None:
            return await local_counter_increment(key, ttl)

        try:
            async with redis.pipeline(transaction=True) as pipe:
                pipe.set(key, 0, ex=ttl, nx=True)
                pipe.incr(key)
                _, value = await pipe.execute()
            return int(value)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            logger.debug("Redis increment failed for key %s: %s", key, exc)
            return await local_counter_increment(key, ttl)

    async def close(self) -> None:
        """Close the Redis connection gracefully."""

        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


__all__ = [
    "CounterStore",
    "local_counter_increment",
    "local_counters_clear_all",
    "rate_limit_key",
]
