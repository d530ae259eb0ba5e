"""Record store interface consumed by the cache wrapper.

A record store is bound to one record type. Besides lookups and writes it
describes the type: which fields are primary keys, which are declared
unique, and how to read a field off a record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from operator import attrgetter
from typing import Any, Generic, TypeVar

RecordT = TypeVar("RecordT")


class RecordStore(ABC, Generic[RecordT]):
    """Abstract store for one record type."""

    @property
    @abstractmethod
    def entity_name(self) -> str:
        """Name of the record type, used to namespace cache keys."""
        pass

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    @abstractmethod
    def primary_key_fields(self) -> list[str]:
        """Names of the fields making up the primary key."""
        pass

    @abstractmethod
    def declared_unique_fields(self) -> set[str]:
        """Names of single fields the store guarantees to be unique."""
        pass

    @abstractmethod
    def field_names(self) -> set[str]:
        """Names of all persisted fields."""
        pass

    def field_getter(self, name: str) -> Callable[[RecordT], Any]:
        """Return a callable reading ``name`` off a record."""
        return attrgetter(name)

    def coerce_field(self, name: str, value: Any) -> Any:
        """Convert a lookup value to the type ``name`` holds on a record.

        Cache keys are built from coerced values so that a lookup with ``"1"``
        and a record holding ``1`` share an entry. The default is identity.
        """
        return value

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @abstractmethod
    def to_snapshot(self, record: RecordT) -> dict[str, Any]:
        """Full field-value mapping of a record."""
        pass

    @abstractmethod
    def from_snapshot(self, snapshot: dict[str, Any]) -> RecordT:
        """Rebuild a record from a (possibly JSON-decoded) snapshot."""
        pass

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def find_by_pk(self, value: Any) -> RecordT | None:
        """Get a record by primary key, or None if not found."""
        pass

    @abstractmethod
    async def find_by_unique(self, field: str, value: Any) -> RecordT | None:
        """Get a record by a unique field value, or None if not found."""
        pass

    @abstractmethod
    async def update(self, record: RecordT) -> bool:
        """Persist every field of an existing record.

        Returns:
            True if a record was updated, False if none matched.
        """
        pass

    @abstractmethod
    async def delete_by_pk(self, value: Any) -> bool:
        """Delete a record by primary key.

        Returns:
            True if deleted, False if not found.
        """
        pass
