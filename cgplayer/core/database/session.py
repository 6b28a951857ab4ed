"""
Database handle and session dependency.

The application owns exactly one ``Database`` per process lifecycle. It is
built by ``create_app`` and stored on ``app.state.database``; request handlers
obtain sessions through the ``get_session`` dependency, which reads the handle
from the incoming request.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .utils import create_all, create_engine, create_sessionmaker


class Database:
    """Engine plus session factory for one application instance."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_maker: async_sessionmaker[AsyncSession] = create_sessionmaker(engine)

    @classmethod
    def from_url(cls, db_url: str, echo: bool = False) -> "Database":
        """Build a handle for a connection URL."""
        return cls(create_engine(db_url, echo=echo))

    def session(self) -> AsyncSession:
        """Open a new session (use as an async context manager)."""
        return self.session_maker()

    async def create_all(self) -> None:
        """Create every table known to the ORM metadata."""
        await create_all(self.engine)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session bound to the
        application's ``Database``.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
