"""
Centralized database layer for cgplayer.

This package provides a unified location for all database entities and repositories,
organized by business domain and table relationships.

Structure:
- entities/: Database entity models organized by table/business logic
- repositories/: Data access layer organized by table/business logic
- session.py: Database handle and the request-scoped session dependency
- utils.py: Database utility functions (engine, session factory, DDL helpers)
"""

from .base import Base, new_id, utc_now
from .session import Database, get_session
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    drop_all,
)

__all__ = [
    "Base",
    "Database",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "drop_all",
    "get_session",
    "new_id",
    "utc_now",
]
