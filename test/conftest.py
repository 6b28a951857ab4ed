from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator, Dict, Iterable, Optional, Sequence, Tuple

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from cgplayer.core.database import Database, new_id
from cgplayer.core.database.entities.locations import Location
from cgplayer.core.database.entities.songs import CONTAINER_MIME_TYPE, Song
from cgplayer.core.database.entities.users import User
from cgplayer.core.models.domain.enums import LocationType, UserRole, VoiceType
from cgplayer.core.security import create_access_token, hash_password
from cgplayer.server.core.config import Settings
from cgplayer.server.main import create_app
from cgplayer.server.services.seeding import create_account
from cgplayer.server.services.uploads import UploadStorage, generate_file_name, normalize_file_name


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    """Fail any test that tries to reach a real host; ASGI test clients stay allowed."""
    allowed_prefixes: Iterable[str] = (
        "http://test",
        "http://localhost",
        "http://127.0.0.1",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


# ---------------------------------------------------------------------------
# Application fixtures shared by the unit and e2e suites
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret"
TEST_PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment: temp upload dir, no rate limit, cheap bcrypt."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        db_create_all=False,
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
        rate_limit_enabled=False,
        bootstrap_default_data=False,
    )


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """A fresh in-memory database with every table created."""
    db = Database.from_url(TEST_DATABASE_URL)
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    return create_app(settings, database)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def storage(app: FastAPI) -> UploadStorage:
    return app.state.storage


def bearer(user: User, settings: Settings, roles: Sequence[UserRole] = ()) -> Dict[str, str]:
    token = create_access_token(user.id, user.email, [role.value for role in roles], secret=settings.jwt.secret)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(database: Database, settings: Settings):
    """Factory creating a committed user; returns the user and its auth headers."""

    async def _make(
        username: str = "singer",
        roles: Sequence[UserRole] = (UserRole.CANTANTE,),
        voice_types: Sequence[VoiceType] = (),
        location_id: Optional[str] = None,
        is_active: bool = True,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        password: str = TEST_PASSWORD,
    ) -> Tuple[User, Dict[str, str]]:
        async with database.session() as session:
            user = await create_account(
                session,
                email=email or f"{username}@example.com",
                username=username,
                first_name=first_name or username.capitalize(),
                last_name="Tester",
                password_hash=hash_password(password, rounds=4),
                roles=roles,
                voice_types=voice_types,
                location_id=location_id,
                is_active=is_active,
            )
            await session.commit()
        return user, bearer(user, settings, roles)

    return _make


@pytest.fixture
def make_location(database: Database):
    async def _make(name: str = "Sede Centro", city: str = "Santiago", **fields) -> Location:
        async with database.session() as session:
            location = Location(name=name, city=city, type=fields.pop("type", LocationType.SANTIAGO.value), **fields)
            session.add(location)
            await session.commit()
        return location

    return _make


@pytest.fixture
def make_song(database: Database, settings: Settings):
    """Factory creating a committed song row, with its audio file on disk unless ``with_file`` is False."""

    async def _make(
        uploaded_by: str,
        title: str = "Cancion de Prueba",
        voice_type: Optional[str] = None,
        parent: Optional[Song] = None,
        container: bool = False,
        with_file: bool = True,
        duration: Optional[int] = None,
        content: bytes = b"0123456789",
    ) -> Song:
        songs_root = Path(settings.uploads.upload_dir) / "songs"
        folder_name = parent.folder_name if parent else f"{normalize_file_name(title)}_{new_id()[:8]}"
        folder = songs_root / folder_name
        if container:
            file_name, file_path, mime_type = folder_name, f"songs/{folder_name}", CONTAINER_MIME_TYPE
        else:
            file_name = generate_file_name(title, voice_type, ".mp3")
            file_path, mime_type = f"songs/{folder_name}/{file_name}", "audio/mpeg"
        if with_file:
            folder.mkdir(parents=True, exist_ok=True)
            if not container:
                (folder / file_name).write_bytes(content)

        song = Song(
            title=f"{title} ({voice_type})" if voice_type else title,
            file_name=file_name,
            file_path=file_path,
            file_size=0 if container else len(content),
            mime_type=mime_type,
            folder_name=folder_name,
            voice_type=voice_type,
            parent_song_id=parent.id if parent else None,
            duration=duration,
            uploaded_by=uploaded_by,
        )
        async with database.session() as session:
            session.add(song)
            await session.commit()
        return song

    return _make
