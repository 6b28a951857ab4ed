"""
Song repository.

Data access for songs, song containers and their voice variants.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.songs import CONTAINER_MIME_TYPE, Song
from .base import AsyncBaseRepository


class SongRepository(AsyncBaseRepository[Song]):
    """Repository for songs using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Song)

    async def get_active(self, song_id: str) -> Optional[Song]:
        stmt = select(Song).where(Song.id == song_id, Song.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_many(self, song_ids: Iterable[str]) -> Dict[str, Song]:
        ids = {song_id for song_id in song_ids if song_id}
        if not ids:
            return {}
        result = await self.session.execute(select(Song).where(Song.id.in_(ids)))
        return {song.id: song for song in result.scalars().all()}

    async def list_active(self, include_versions: bool = True) -> List[Song]:
        """Active songs, newest first.

        Args:
            include_versions: When False only top-level songs (no parent) are returned
        """
        stmt = select(Song).where(Song.is_active == True)  # noqa: E712
        if not include_versions:
            stmt = stmt.where(Song.parent_song_id == None)  # noqa: E711
        result = await self.session.execute(stmt.order_by(Song.created_at.desc()))
        return list(result.scalars().all())

    async def active_children_of(self, parent_ids: Iterable[str]) -> Dict[str, List[Song]]:
        ids = set(parent_ids)
        children: Dict[str, List[Song]] = defaultdict(list)
        if not ids:
            return children
        stmt = (
            select(Song)
            .where(Song.parent_song_id.in_(ids), Song.is_active == True)  # noqa: E712
            .order_by(Song.voice_type, Song.created_at)
        )
        result = await self.session.execute(stmt)
        for song in result.scalars().all():
            children[song.parent_song_id].append(song)
        return children

    async def list_variants(
        self, allowed_voice_types: Optional[Sequence[str]] = None, search: Optional[str] = None
    ) -> List[Song]:
        """Active voice variants (songs carrying a voice type), by title.

        Args:
            allowed_voice_types: Restrict to these voice types; None means all
            search: Case-insensitive match on title or artist
        """
        stmt = select(Song).where(
            Song.is_active == True,  # noqa: E712
            Song.voice_type != None,  # noqa: E711
            Song.mime_type != CONTAINER_MIME_TYPE,
        )
        if allowed_voice_types is not None:
            stmt = stmt.where(Song.voice_type.in_(list(allowed_voice_types)))
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(or_(func.lower(Song.title).like(pattern), func.lower(Song.artist).like(pattern)))
        result = await self.session.execute(stmt.order_by(Song.title))
        return list(result.scalars().all())

    async def deactivate(self, song: Song) -> int:
        """Soft delete a song and, for a container, its variants (not committed).

        Returns:
            Number of rows deactivated
        """
        song.is_active = False
        self.session.add(song)
        result = await self.session.execute(
            update(Song)
            .where(Song.parent_song_id == song.id, Song.is_active == True)  # noqa: E712
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return 1 + (result.rowcount or 0)

    async def list_active_files(self) -> List[Song]:
        """Active rows that should have a file on disk (not containers)."""
        stmt = select(Song).where(
            Song.is_active == True,  # noqa: E712
            Song.mime_type != CONTAINER_MIME_TYPE,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_containers(self) -> List[Song]:
        stmt = select(Song).where(
            Song.is_active == True,  # noqa: E712
            Song.mime_type == CONTAINER_MIME_TYPE,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_top_level(self) -> int:
        stmt = select(func.count()).select_from(Song).where(
            Song.is_active == True,  # noqa: E712
            Song.parent_song_id == None,  # noqa: E711
        )
        return int((await self.session.execute(stmt)).scalar_one())
