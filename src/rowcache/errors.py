"""Exception hierarchy for rowcache.

Not-found is never an exception: lookups return ``None``. Record store
failures (``sqlalchemy.exc.SQLAlchemyError``) are not wrapped and reach the
caller unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable


class RowCacheError(Exception):
    """Base class for all rowcache errors."""


class ConfigurationError(RowCacheError):
    """The wrapper was configured or called in a way it cannot serve."""


class InvalidPrimaryKeyError(ConfigurationError):
    """Record type does not declare exactly one primary-key field."""

    def __init__(self, entity_name: str, primary_key_fields: Iterable[str]):
        self.entity_name = entity_name
        self.primary_key_fields = list(primary_key_fields)
        super().__init__(
            f"{entity_name} must declare exactly one primary-key field, "
            f"found {len(self.primary_key_fields)}: {self.primary_key_fields}"
        )


class UnknownFieldError(ConfigurationError):
    """A configured unique field is not an attribute of the record type."""

    def __init__(self, entity_name: str, field: str):
        self.entity_name = entity_name
        self.field = field
        super().__init__(f"{entity_name} has no field named {field!r}")


class UnknownUniqueFieldError(ConfigurationError):
    """Lookup by a field that is not configured as a cached unique field."""

    def __init__(self, entity_name: str, field: str, configured: Iterable[str]):
        self.entity_name = entity_name
        self.field = field
        self.configured = sorted(configured)
        super().__init__(
            f"{field!r} is not a cached unique field of {entity_name} "
            f"(configured: {self.configured})"
        )


class MissingPrimaryKeyError(RowCacheError, ValueError):
    """Record passed to an update carries no primary-key value."""

    def __init__(self, entity_name: str, field: str):
        self.entity_name = entity_name
        self.field = field
        super().__init__(f"{entity_name} record has no value for primary key {field!r}")


class CacheBackendError(RowCacheError):
    """The cache backend failed to serve a get, set or delete."""
