"""
Lyric repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.lyrics import Lyric
from .base import AsyncBaseRepository


class LyricRepository(AsyncBaseRepository[Lyric]):
    """Repository for lyric blocks using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Lyric)

    async def get_active(self, lyric_id: str) -> Optional[Lyric]:
        stmt = select(Lyric).where(Lyric.id == lyric_id, Lyric.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_song(self, song_id: str, voice_type: Optional[str] = None) -> List[Lyric]:
        """Active lyric blocks of a song ordered by timestamp.

        Args:
            song_id: Song identifier
            voice_type: When given, that part's blocks plus the general ones
        """
        stmt = select(Lyric).where(Lyric.song_id == song_id, Lyric.is_active == True)  # noqa: E712
        if voice_type:
            stmt = stmt.where(or_(Lyric.voice_type == voice_type, Lyric.voice_type == None))  # noqa: E711
        result = await self.session.execute(stmt.order_by(Lyric.timestamp, Lyric.created_at))
        return list(result.scalars().all())
