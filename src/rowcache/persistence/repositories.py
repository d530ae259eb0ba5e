"""SQLAlchemy record store.

Binds the RecordStore interface to one ORM-mapped class. Metadata comes from
the mapper: primary-key columns, and single-column uniqueness declared via
``unique=True``, a UniqueConstraint or a unique Index.

Each operation runs in its own short-lived session from the caller's
session factory. Reads never commit, so returned records stay loaded even
when the factory expires objects on commit.
"""

from __future__ import annotations

import base64
import enum
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Generic, TypeVar

from sqlalchemy import Column, UniqueConstraint, delete, inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rowcache.errors import InvalidPrimaryKeyError
from rowcache.persistence.base import RecordStore

ModelT = TypeVar("ModelT")


def _coerce(column: Column[Any], value: Any) -> Any:
    """Restore a JSON-decoded value to the column's Python type."""
    if value is None:
        return None
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is int and isinstance(value, bool):
        return int(value)
    if isinstance(value, python_type):
        return value

    if python_type is datetime and isinstance(value, str):
        return datetime.fromisoformat(value)
    if python_type is date and isinstance(value, str):
        return date.fromisoformat(value)
    if python_type is time and isinstance(value, str):
        return time.fromisoformat(value)
    if python_type is uuid.UUID and isinstance(value, str):
        return uuid.UUID(value)
    if python_type is Decimal:
        return Decimal(str(value))
    if python_type is bytes and isinstance(value, str):
        return base64.b64decode(value)
    if python_type is float and isinstance(value, (int, str)):
        return float(value)
    if python_type is int and isinstance(value, str):
        return int(value)
    if python_type is str and isinstance(value, (int, float, uuid.UUID)):
        return str(value)
    if isinstance(python_type, type) and issubclass(python_type, enum.Enum):
        return python_type(value)
    return value


class SqlAlchemyRecordStore(RecordStore[ModelT], Generic[ModelT]):
    """Record store over an ORM-mapped class."""

    def __init__(self, model: type[ModelT], session_factory: async_sessionmaker[AsyncSession]):
        self.model = model
        self.session_factory = session_factory
        self._mapper = inspect(model)
        self._table = self._mapper.local_table
        # attribute key -> column, for every column-mapped attribute
        self._columns: dict[str, Column[Any]] = {
            attr.key: attr.columns[0] for attr in self._mapper.column_attrs
        }
        pk_fields = self.primary_key_fields()
        # None for composite or missing keys; primary-key operations then raise
        self._pk_field: str | None = pk_fields[0] if len(pk_fields) == 1 else None

    @property
    def entity_name(self) -> str:
        return str(self._table.name)

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def primary_key_fields(self) -> list[str]:
        return [self._mapper.get_property_by_column(c).key for c in self._mapper.primary_key]

    def declared_unique_fields(self) -> set[str]:
        unique_names = {c.name for c in self._table.columns if c.unique}
        for constraint in self._table.constraints:
            if isinstance(constraint, UniqueConstraint) and len(constraint.columns) == 1:
                unique_names.update(c.name for c in constraint.columns)
        for index in self._table.indexes:
            if index.unique and len(index.columns) == 1:
                unique_names.update(c.name for c in index.columns)
        return {key for key, column in self._columns.items() if column.name in unique_names}

    def field_names(self) -> set[str]:
        return set(self._columns)

    def _primary_key_field(self) -> str:
        if self._pk_field is None:
            raise InvalidPrimaryKeyError(self.entity_name, self.primary_key_fields())
        return self._pk_field

    def coerce_field(self, name: str, value: Any) -> Any:
        """Convert a lookup value to the column's Python type.

        Values that do not convert are returned unchanged and simply match
        no row.
        """
        try:
            return _coerce(self._columns[name], value)
        except (TypeError, ValueError, ArithmeticError):
            return value

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def to_snapshot(self, record: ModelT) -> dict[str, Any]:
        return {key: getattr(record, key) for key in self._columns}

    def from_snapshot(self, snapshot: dict[str, Any]) -> ModelT:
        # Keys of dropped columns in old cached snapshots are ignored
        values = {
            key: _coerce(self._columns[key], value)
            for key, value in snapshot.items()
            if key in self._columns
        }
        return self.model(**values)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """Provide a transactional scope around a write."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # -------------------------------------------------------------------------
    # Read operations
    # -------------------------------------------------------------------------

    async def find_by_pk(self, value: Any) -> ModelT | None:
        column = self._columns[self._primary_key_field()]
        stmt = select(self.model).where(column == value)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    async def find_by_unique(self, field: str, value: Any) -> ModelT | None:
        stmt = select(self.model).where(self._columns[field] == value)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    # -------------------------------------------------------------------------
    # Write operations
    # -------------------------------------------------------------------------

    async def update(self, record: ModelT) -> bool:
        pk_field = self._primary_key_field()
        column = self._columns[pk_field]
        values = self.to_snapshot(record)
        pk_value = values.pop(pk_field)

        stmt = (
            update(self._table)
            .where(column == pk_value)
            .values({self._columns[key]: value for key, value in values.items()})
        )
        async with self._transaction() as session:
            result = await session.execute(stmt)
            return bool(result.rowcount)

    async def delete_by_pk(self, value: Any) -> bool:
        column = self._columns[self._primary_key_field()]
        stmt = delete(self._table).where(column == value)
        async with self._transaction() as session:
            result = await session.execute(stmt)
            return bool(result.rowcount)
