"""Async database engine and session factory helpers.

Uses the SQLAlchemy 2.0 asyncio extension. Unlike a service, a library does
not hold module-level engines: the caller creates the engine, owns it and
disposes it on shutdown.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rowcache.config import settings


def create_engine(url: str | None = None, **kwargs: Any) -> AsyncEngine:
    """Create an async engine, defaulting to the configured database URL."""
    kwargs.setdefault("pool_pre_ping", True)  # Verify connection health
    return create_async_engine(url or settings.database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory whose objects stay usable after commit.

    Records returned by a store outlive their session, so attributes must
    not be expired on commit.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
