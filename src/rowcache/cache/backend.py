"""Cache backend interface for rowcache.

Provides:
- CacheBackend: abstract get / set-with-ttl / delete interface
- MemoryCacheBackend: process-local backend for single-instance use and tests

For a shared cache across processes, use RedisCacheBackend instead.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from fnmatch import fnmatchcase

DEFAULT_PURGE_INTERVAL = 1000


class CacheBackend(ABC):
    """Abstract key-value cache interface.

    Values are opaque bytes. TTLs are in seconds and may be fractional.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Get a cached value, or None if absent or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: float) -> None:
        """Store a value that expires after ``ttl`` seconds."""
        pass

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete keys. Returns the number of keys that existed."""
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob-style pattern."""
        pass


class MemoryCacheBackend(CacheBackend):
    """In-memory cache backed by a dict.

    Expired entries are dropped lazily on access, and swept from the whole
    map every ``purge_interval`` writes. Not shared between processes and
    not safe across event loop threads.
    """

    def __init__(self, purge_interval: int = DEFAULT_PURGE_INTERVAL) -> None:
        self._entries: dict[str, tuple[bytes, float]] = {}
        self._purge_interval = max(1, purge_interval)
        self._writes_since_purge = 0

    def _purge(self) -> None:
        now = time.monotonic()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= time.monotonic():
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: bytes, ttl: float) -> None:
        self._writes_since_purge += 1
        if self._writes_since_purge >= self._purge_interval:
            self._writes_since_purge = 0
            self._purge()
        self._entries[key] = (value, time.monotonic() + ttl)

    async def delete(self, *keys: str) -> int:
        self._purge()
        deleted = 0
        for key in keys:
            if self._entries.pop(key, None) is not None:
                deleted += 1
        return deleted

    async def delete_pattern(self, pattern: str) -> int:
        self._purge()
        matched = [key for key in self._entries if fnmatchcase(key, pattern)]
        for key in matched:
            del self._entries[key]
        return len(matched)

    async def ttl(self, key: str) -> float | None:
        """Remaining lifetime of a key in seconds, or None if absent."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        remaining = entry[1] - time.monotonic()
        return remaining if remaining > 0 else None

    @property
    def size(self) -> int:
        """Number of live entries."""
        self._purge()
        return len(self._entries)

    def keys(self) -> list[str]:
        """Live keys, sorted."""
        self._purge()
        return sorted(self._entries)
