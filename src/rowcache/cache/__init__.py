"""Cache layer for rowcache.

Provides the pieces the cache wrapper composes:
- Namespaced cache keys for primary-key and unique-field lookups
- Jittered TTLs so entries written together do not expire together
- orjson snapshot encoding for cached records
- Redis and in-memory backends behind one interface
"""

from rowcache.cache.backend import CacheBackend, MemoryCacheBackend
from rowcache.cache.codec import decode_snapshot, encode_snapshot
from rowcache.cache.jitter import (
    DEFAULT_EXPIRY_DEVIATION,
    compute_ttl,
    normalize_expiry_deviation,
)
from rowcache.cache.keys import CacheKeys
from rowcache.cache.redis import RedisCacheBackend, create_redis_client

__all__ = [
    # Keys and TTLs
    "CacheKeys",
    "DEFAULT_EXPIRY_DEVIATION",
    "compute_ttl",
    "normalize_expiry_deviation",
    # Snapshots
    "encode_snapshot",
    "decode_snapshot",
    # Backends
    "CacheBackend",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "create_redis_client",
]
