"""Redis cache backend for rowcache.

Provides async Redis operations for cached record snapshots.
Uses the redis-py asyncio client; the caller owns the client and closes it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

import redis.asyncio as redis
from redis.exceptions import RedisError

from rowcache.cache.backend import CacheBackend
from rowcache.cache.jitter import ttl_to_millis
from rowcache.config import settings
from rowcache.errors import CacheBackendError

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# Keys deleted per DEL call during pattern invalidation
SCAN_BATCH_SIZE = 500


def create_redis_client(url: str | None = None) -> Redis:
    """Create a Redis client with a connection pool.

    Values are stored as bytes, so responses are not decoded.
    """
    return redis.from_url(  # type: ignore[no-untyped-call]
        url or settings.redis_url,
        decode_responses=False,
    )


class RedisCacheBackend(CacheBackend):
    """Cache backend over a shared Redis database.

    TTLs are applied with millisecond precision (``SET ... PX``). Redis
    failures are raised as CacheBackendError.
    """

    def __init__(self, client: Redis):
        self.client = client

    async def get(self, key: str) -> bytes | None:
        try:
            return cast(bytes | None, await self.client.get(key))
        except RedisError as e:
            raise CacheBackendError(f"Redis GET {key} failed: {e}") from e

    async def set(self, key: str, value: bytes, ttl: float) -> None:
        try:
            await self.client.set(key, value, px=ttl_to_millis(ttl))
        except RedisError as e:
            raise CacheBackendError(f"Redis SET {key} failed: {e}") from e

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return cast(int, await self.client.delete(*keys))
        except RedisError as e:
            raise CacheBackendError(f"Redis DEL {', '.join(keys)} failed: {e}") from e

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching ``pattern``.

        Uses SCAN to avoid blocking on large keyspaces.
        """
        deleted = 0
        batch: list[bytes] = []
        try:
            async for key in self.client.scan_iter(match=pattern, count=SCAN_BATCH_SIZE):
                batch.append(key)
                if len(batch) >= SCAN_BATCH_SIZE:
                    deleted += cast(int, await self.client.delete(*batch))
                    batch = []
            if batch:
                deleted += cast(int, await self.client.delete(*batch))
        except RedisError as e:
            raise CacheBackendError(f"Redis pattern delete {pattern} failed: {e}") from e

        logger.debug("Deleted %d keys matching %s", deleted, pattern)
        return deleted
