"""Integration test fixtures.

Connect to the Redis at REDIS_URL (default ``redis://localhost:6379/0``).
Tests are skipped when it is not reachable. The database is flushed before
and after each test, so point REDIS_URL at a scratch database.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from redis.asyncio import Redis
from redis.exceptions import RedisError

from rowcache.cache.redis import RedisCacheBackend, create_redis_client
from rowcache.config import settings


@pytest_asyncio.fixture
async def redis_client() -> AsyncIterator[Redis]:
    """Create a Redis client or skip if Redis is unavailable."""
    client = create_redis_client(settings.redis_url)
    try:
        await client.ping()
    except (RedisError, OSError) as exc:
        await client.aclose()
        pytest.skip(f"Redis not available: {exc}")

    await client.flushdb()
    yield client
    await client.flushdb()  # Clean up after each test
    await client.aclose()


@pytest.fixture
def redis_cache(redis_client: Redis) -> RedisCacheBackend:
    return RedisCacheBackend(redis_client)
