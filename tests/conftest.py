"""Shared fixtures.

Provides a SQLite-backed record store (aiosqlite, one database file per test)
and an in-memory cache backend.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rowcache.cache.backend import MemoryCacheBackend
from rowcache.persistence import SqlAlchemyRecordStore, create_engine, create_session_factory
from tests.models import Base, Student


@pytest_asyncio.fixture
async def db_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Create an engine over a fresh SQLite file with all tables."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'rowcache-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(db_engine)


@pytest.fixture
def student_store(
    session_factory: async_sessionmaker[AsyncSession],
) -> SqlAlchemyRecordStore[Student]:
    return SqlAlchemyRecordStore(Student, session_factory)


@pytest.fixture
def memory_cache() -> MemoryCacheBackend:
    return MemoryCacheBackend()


@pytest_asyncio.fixture
async def student(session_factory: async_sessionmaker[AsyncSession]) -> Student:
    """Insert one student and return it."""
    row = Student(
        card_id=f"card-{uuid4().hex[:12]}",
        first_name="firstName",
        last_name="lastName",
        age=18,
        enrolled_at=datetime(2024, 9, 1, 8, 30, 15, 250000),
    )
    async with session_factory() as session:
        session.add(row)
        await session.commit()
    return row
