"""Test configuration for database unit tests.

This module provides a fresh in-memory SQLite database per test and a few
row factories for the repository tests.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from cgplayer.core.database import Database
from cgplayer.core.database.entities.songs import CONTAINER_MIME_TYPE, Song
from cgplayer.core.database.entities.users import User


@pytest_asyncio.fixture
async def in_memory_session() -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    database = Database.from_url("sqlite+aiosqlite:///:memory:")
    await database.create_all()
    try:
        async with database.session() as session:
            yield session
    finally:
        await database.dispose()


@pytest.fixture
def user_row():
    def _make(username: str = "singer", **fields) -> User:
        return User(
            email=fields.pop("email", f"{username}@example.com"),
            username=username,
            first_name=fields.pop("first_name", username.capitalize()),
            last_name=fields.pop("last_name", "Tester"),
            password_hash="x",
            **fields,
        )

    return _make


@pytest.fixture
def song_row():
    def _make(uploaded_by: str, title: str = "Himno", **fields) -> Song:
        container = fields.pop("container", False)
        return Song(
            title=title,
            file_name=fields.pop("file_name", "himno.mp3"),
            file_path=fields.pop("file_path", "songs/himno_1/himno.mp3"),
            file_size=fields.pop("file_size", 10),
            mime_type=CONTAINER_MIME_TYPE if container else fields.pop("mime_type", "audio/mpeg"),
            uploaded_by=uploaded_by,
            **fields,
        )

    return _make
