"""Read-through, write-invalidated cache over a record store.

Reads consult the cache first and fall back to the store on a miss, writing
the fetched snapshot back with a jittered TTL. Absence is never cached.

Writes go to the store first, then delete every cache entry of the affected
record: the primary-key entry and one entry per configured unique field.
Entries are never updated in place. Between the store write and the delete a
concurrent reader can still see the old entry; the window is bounded by the
latency of the delete.

When a unique field changes value, the entry under the old value is not
deleted (invalidation keys come from the post-update record). It is no longer
reachable by lookups with the new value and expires with its TTL.

The wrapper holds only immutable configuration and is safe to share between
concurrent tasks. There is no single-flight: concurrent misses on a cold key
each query the store.
"""

from __future__ import annotations

import logging
from typing import Any, Generic

from rowcache.cache.backend import CacheBackend
from rowcache.cache.codec import decode_snapshot, encode_snapshot
from rowcache.cache.jitter import compute_ttl
from rowcache.cache.keys import CacheKeys
from rowcache.config import settings
from rowcache.descriptor import EntityDescriptor
from rowcache.errors import CacheBackendError, MissingPrimaryKeyError, UnknownUniqueFieldError
from rowcache.observability.metrics import get_metrics
from rowcache.options import CacheOptions
from rowcache.persistence.base import RecordStore, RecordT

logger = logging.getLogger(__name__)

PK_LOOKUP = "pk"


class CacheWrapper(Generic[RecordT]):
    """Cache wrapper for one record type.

    Example:
        store = SqlAlchemyRecordStore(Student, session_factory)
        cache = RedisCacheBackend(create_redis_client())
        students = CacheWrapper(
            store, cache, CacheOptions(expire=60, unique_fields={"card_id"})
        )

        student = await students.find_by_pk(1)
        student = await students.find_by_unique("card_id", "card-1")

    Raises:
        InvalidPrimaryKeyError: the record type does not have exactly one
            primary-key field.
        UnknownFieldError: a configured unique field does not exist.
    """

    def __init__(
        self,
        store: RecordStore[RecordT],
        cache: CacheBackend,
        options: CacheOptions,
        keys: CacheKeys | None = None,
    ):
        self.store = store
        self.cache = cache
        self.options = options
        self.keys = keys or CacheKeys(settings.key_prefix)
        self.descriptor = EntityDescriptor.from_store(
            store, options.unique_fields, entity_name=options.entity_name
        )
        self._metrics = get_metrics()

    @property
    def entity(self) -> str:
        return self.descriptor.entity_name

    @property
    def disabled(self) -> bool:
        return self.options.disable

    # -------------------------------------------------------------------------
    # Keys
    # -------------------------------------------------------------------------

    def primary_cache_key(self, pk_value: Any) -> str:
        return self.keys.primary(self.entity, pk_value)

    def unique_cache_key(self, field: str, value: Any) -> str:
        return self.keys.unique(self.entity, field, value)

    def cache_keys_for(self, record: RecordT) -> list[str]:
        """Primary-key entry plus one entry per configured unique field."""
        keys = [self.primary_cache_key(self.descriptor.primary_key_of(record))]
        for field, value in self.descriptor.unique_values_of(record).items():
            keys.append(self.unique_cache_key(field, value))
        return keys

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def find_by_pk(self, pk_value: Any) -> RecordT | None:
        """Get a record by primary key, or None if it does not exist."""
        pk_value = self.store.coerce_field(self.descriptor.primary_key_field, pk_value)
        if self.disabled:
            return await self.store.find_by_pk(pk_value)

        key = self.primary_cache_key(pk_value)
        cached = await self._read(key, PK_LOOKUP)
        if cached is not None:
            return cached

        record = await self.store.find_by_pk(pk_value)
        if record is not None:
            await self._write_back(key, record)
        return record

    async def find_by_unique(self, field: str, value: Any) -> RecordT | None:
        """Get a record by a configured unique field, or None.

        Raises:
            UnknownUniqueFieldError: ``field`` is not a configured unique
                field, whether or not caching is disabled.
        """
        if field not in self.descriptor.unique_fields:
            raise UnknownUniqueFieldError(self.entity, field, self.descriptor.unique_fields)

        value = self.store.coerce_field(field, value)
        if self.disabled:
            return await self.store.find_by_unique(field, value)

        key = self.unique_cache_key(field, value)
        cached = await self._read(key, field)
        if cached is not None:
            return cached

        record = await self.store.find_by_unique(field, value)
        if record is not None:
            await self._write_back(key, record)
        return record

    async def _read(self, key: str, lookup: str) -> RecordT | None:
        data = await self.cache.get(key)
        if data is None:
            self._metrics.cache_misses_total.labels(entity=self.entity, lookup=lookup).inc()
            logger.debug(f"Cache miss {key}")
            return None

        self._metrics.cache_hits_total.labels(entity=self.entity, lookup=lookup).inc()
        logger.debug(f"Cache hit {key}")
        return self.store.from_snapshot(decode_snapshot(data))

    async def _write_back(self, key: str, record: RecordT) -> None:
        """Populate the cache after a store hit.

        The store is the source of truth, so a failed write is logged and the
        caller still gets the record. That includes records holding values
        the codec cannot encode.
        """
        ttl = compute_ttl(self.options.expire, self.options.expiry_deviation)
        try:
            data = encode_snapshot(self.store.to_snapshot(record))
            await self.cache.set(key, data, ttl)
        except (CacheBackendError, TypeError) as e:
            self._metrics.cache_errors_total.labels(entity=self.entity, operation="set").inc()
            logger.warning(f"Cache write failed for {key}: {e}", extra={"entity": self.entity})

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def update_by_pk(self, record: RecordT) -> bool:
        """Persist a record, then invalidate all of its cache entries.

        Returns:
            True if the store updated a record.

        Raises:
            MissingPrimaryKeyError: the record has no primary-key value.
        """
        if self.descriptor.primary_key_of(record) is None:
            raise MissingPrimaryKeyError(self.entity, self.descriptor.primary_key_field)

        updated = await self.store.update(record)
        if not self.disabled:
            await self._invalidate(self.cache_keys_for(record), "update")
        return updated

    async def delete_by_pk(self, pk_value: Any) -> bool:
        """Delete a record and its cache entries.

        Deleting a record that does not exist is not an error; its
        primary-key entry is still removed.

        Returns:
            True if the store deleted a record.
        """
        pk_value = self.store.coerce_field(self.descriptor.primary_key_field, pk_value)
        if self.disabled:
            return await self.store.delete_by_pk(pk_value)

        record = await self.store.find_by_pk(pk_value)
        deleted = await self.store.delete_by_pk(pk_value)

        if record is None:
            keys = [self.primary_cache_key(pk_value)]
        else:
            keys = self.cache_keys_for(record)
        await self._invalidate(keys, "delete")
        return deleted

    async def delete_cache(self, record: RecordT) -> None:
        """Evict a known record's cache entries without touching the store."""
        if self.disabled:
            return
        await self._invalidate(self.cache_keys_for(record), "evict")

    async def clear(self) -> int:
        """Delete every cache entry of this entity.

        For use after writes that bypassed the wrapper, such as bulk imports.
        """
        if self.disabled:
            return 0
        deleted = await self.cache.delete_pattern(self.keys.entity_pattern(self.entity))
        self._metrics.cache_invalidations_total.labels(
            entity=self.entity, operation="clear"
        ).inc(deleted)
        logger.info(f"Cleared {deleted} cache entries for {self.entity}")
        return deleted

    async def _invalidate(self, keys: list[str], operation: str) -> None:
        """Delete cache entries after a store mutation.

        A failure leaves stale entries until their TTL expires; it is logged
        rather than raised because the store write already happened.
        """
        try:
            await self.cache.delete(*keys)
        except CacheBackendError as e:
            self._metrics.cache_errors_total.labels(entity=self.entity, operation=operation).inc()
            logger.error(
                f"Cache invalidation failed for {self.entity}, stale until expiry: {e}",
                extra={"entity": self.entity, "keys": keys},
            )
            return

        self._metrics.cache_invalidations_total.labels(
            entity=self.entity, operation=operation
        ).inc(len(keys))
        logger.debug(f"Invalidated {keys}")
