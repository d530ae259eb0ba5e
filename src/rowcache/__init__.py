"""rowcache: read-through, write-invalidated caching for record stores.

Lookups by primary key or by a configured unique field are served from the
cache when possible. Updates and deletes go to the store and then remove
every cache entry of the affected record.
"""

from rowcache.cache import (
    CacheBackend,
    CacheKeys,
    MemoryCacheBackend,
    RedisCacheBackend,
    compute_ttl,
    create_redis_client,
    normalize_expiry_deviation,
)
from rowcache.descriptor import EntityDescriptor
from rowcache.errors import (
    CacheBackendError,
    ConfigurationError,
    InvalidPrimaryKeyError,
    MissingPrimaryKeyError,
    RowCacheError,
    UnknownFieldError,
    UnknownUniqueFieldError,
)
from rowcache.options import CacheOptions
from rowcache.persistence import RecordStore, SqlAlchemyRecordStore
from rowcache.wrapper import CacheWrapper

__version__ = "0.1.0"

__all__ = [
    # Core
    "CacheWrapper",
    "CacheOptions",
    "EntityDescriptor",
    # Cache
    "CacheBackend",
    "CacheKeys",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "compute_ttl",
    "create_redis_client",
    "normalize_expiry_deviation",
    # Persistence
    "RecordStore",
    "SqlAlchemyRecordStore",
    # Errors
    "RowCacheError",
    "ConfigurationError",
    "InvalidPrimaryKeyError",
    "UnknownFieldError",
    "UnknownUniqueFieldError",
    "MissingPrimaryKeyError",
    "CacheBackendError",
]
