"""Entity descriptor: the per-record-type facts the cache wrapper relies on.

Built once when a wrapper is constructed. Validation happens here so that a
misconfigured record type fails before any request is served.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from rowcache.errors import InvalidPrimaryKeyError, UnknownFieldError
from rowcache.persistence.base import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityDescriptor:
    """Primary key, cached unique fields and their accessors for one type."""

    entity_name: str
    primary_key_field: str
    unique_fields: frozenset[str]
    getters: Mapping[str, Callable[[Any], Any]] = field(repr=False, compare=False)

    @classmethod
    def from_store(
        cls,
        store: RecordStore[Any],
        unique_fields: Iterable[str] = (),
        entity_name: str | None = None,
    ) -> "EntityDescriptor":
        """Derive the descriptor from a store's metadata.

        Raises:
            InvalidPrimaryKeyError: the type has zero or several primary keys.
            UnknownFieldError: a unique field is not an attribute of the type.
        """
        name = entity_name or store.entity_name
        pk_fields = store.primary_key_fields()
        if len(pk_fields) != 1:
            raise InvalidPrimaryKeyError(name, pk_fields)

        unique = frozenset(unique_fields)
        known = store.field_names()
        for unique_field in sorted(unique):
            if unique_field not in known:
                raise UnknownFieldError(name, unique_field)

        undeclared = unique - store.declared_unique_fields()
        if undeclared:
            logger.warning(
                f"Caching {name} by fields not declared unique in the store: "
                f"{sorted(undeclared)}"
            )

        primary_key_field = pk_fields[0]
        getters = {
            f: store.field_getter(f) for f in (primary_key_field, *sorted(unique))
        }
        return cls(
            entity_name=name,
            primary_key_field=primary_key_field,
            unique_fields=unique,
            getters=MappingProxyType(getters),
        )

    def primary_key_of(self, record: Any) -> Any:
        """Primary-key value of a record."""
        return self.getters[self.primary_key_field](record)

    def unique_values_of(self, record: Any) -> dict[str, Any]:
        """Values of every cached unique field of a record."""
        return {f: self.getters[f](record) for f in sorted(self.unique_fields)}
