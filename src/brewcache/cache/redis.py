"""Redis cache store.

Provides async Redis operations for the cache-aside layer.
Uses redis-py async client for connection pooling.

Plain values are written with PSETEX. Member sets are sorted sets scored
by each member's absolute deadline (epoch milliseconds) so that one id can
expire out of a shared set while other members stay live.
"""

from __future__ import annotations

import math
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, cast

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from brewcache.cache.base import CacheStore
from brewcache.config import settings
from brewcache.errors import BackendUnavailable

if TYPE_CHECKING:
    from redis.asyncio import Redis

# Module-level connection pool
_redis_client: Redis | None = None


async def get_redis(url: str | None = None) -> Redis:
    """Get or create the Redis client.

    Uses connection pooling for efficient connection management.
    ``url`` only applies when the client is first created.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(  # type: ignore[no-untyped-call]
            url or settings.redis_url,
            decode_responses=False,  # We're storing bytes
            socket_timeout=settings.redis_socket_timeout,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


def _to_ms(seconds: float) -> int:
    return max(1, math.ceil(seconds * 1000))


@asynccontextmanager
async def _backend_call(operation: str) -> AsyncIterator[None]:
    """Translate connectivity failures into ``BackendUnavailable``."""
    try:
        yield
    except (RedisConnectionError, RedisTimeoutError) as exc:
        raise BackendUnavailable("cache", f"redis {operation} failed: {exc}") from exc


class RedisCacheStore(CacheStore):
    """Cache store backed by a Redis server."""

    def __init__(self, client: Redis, clock: Callable[[], float] = time.time):
        self.client = client
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # -------------------------------------------------------------------------
    # Plain values
    # -------------------------------------------------------------------------

    async def put_with_ttl(self, key: str, value: bytes, ttl: float) -> None:
        self.check_ttl(ttl)
        async with _backend_call("put"):
            await self.client.psetex(key, _to_ms(ttl), value)

    async def get(self, key: str) -> bytes | None:
        async with _backend_call("get"):
            return cast(bytes | None, await self.client.get(key))

    async def delete(self, key: str) -> bool:
        async with _backend_call("delete"):
            return cast(int, await self.client.delete(key)) > 0

    async def exists(self, key: str) -> bool:
        async with _backend_call("exists"):
            return cast(int, await self.client.exists(key)) > 0

    # -------------------------------------------------------------------------
    # Member sets
    # -------------------------------------------------------------------------

    async def add_member(self, key: str, member: str, ttl: float) -> None:
        self.check_ttl(ttl)
        now = self._now_ms()
        ttl_ms = _to_ms(ttl)
        async with _backend_call("add_member"):
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.zremrangebyscore(key, "-inf", now)
                pipe.zadd(key, {member: now + ttl_ms})
                pipe.pexpire(key, ttl_ms)
                await pipe.execute()

    async def members(self, key: str) -> set[str]:
        async with _backend_call("members"):
            raw = await self.client.zrangebyscore(key, f"({self._now_ms()}", "+inf")
        return {m.decode("utf-8") if isinstance(m, bytes) else m for m in raw}

    async def remove_member(self, key: str, member: str) -> bool:
        async with _backend_call("remove_member"):
            return cast(int, await self.client.zrem(key, member)) > 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        try:
            await cast(Awaitable[bool], self.client.ping())
            return True
        except Exception:
            return False
