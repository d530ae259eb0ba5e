"""Persistence layer for rowcache.

This module provides:
- The RecordStore interface the cache wrapper reads through and writes to
- A SQLAlchemy 2.0 asyncio implementation bound to one ORM-mapped class
- Engine and session factory helpers
"""

from rowcache.persistence.base import RecordStore
from rowcache.persistence.db import create_engine, create_session_factory
from rowcache.persistence.repositories import SqlAlchemyRecordStore

__all__ = [
    # DB
    "create_engine",
    "create_session_factory",
    # Stores
    "RecordStore",
    "SqlAlchemyRecordStore",
]
