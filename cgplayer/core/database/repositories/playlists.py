"""
Playlist repository.

Data access for playlists and their ordered items. Every write to the items
of a playlist leaves their ``order`` values as the dense sequence 1..n.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.playlists import Playlist, PlaylistItem
from ..entities.users import User
from .base import AsyncBaseRepository


class PlaylistRepository(AsyncBaseRepository[Playlist]):
    """Repository for playlists using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Playlist)

    async def list_visible(self, user_id: str) -> List[Playlist]:
        """The user's own playlists plus every public one, newest first."""
        stmt = (
            select(Playlist)
            .where(or_(Playlist.user_id == user_id, Playlist.is_public == True))  # noqa: E712
            .order_by(Playlist.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_visible(self, playlist_id: str, user_id: str) -> Optional[Playlist]:
        stmt = select(Playlist).where(
            Playlist.id == playlist_id,
            or_(Playlist.user_id == user_id, Playlist.is_public == True),  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_owned(self, playlist_id: str, user_id: str) -> Optional[Playlist]:
        stmt = select(Playlist).where(Playlist.id == playlist_id, Playlist.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def search(self, user_id: str, query: Optional[str] = None, creator: Optional[str] = None) -> List[Playlist]:
        """Visible playlists matching a name/description text and a creator name."""
        stmt = select(Playlist).join(User, User.id == Playlist.user_id).where(
            or_(Playlist.user_id == user_id, Playlist.is_public == True)  # noqa: E712
        )
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(func.lower(Playlist.name).like(pattern), func.lower(Playlist.description).like(pattern))
            )
        if creator:
            pattern = f"%{creator.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                    func.lower(User.username).like(pattern),
                )
            )
        result = await self.session.execute(stmt.order_by(Playlist.created_at.desc()))
        return list(result.scalars().all())

    async def items_for(self, playlist_ids: Iterable[str]) -> Dict[str, List[PlaylistItem]]:
        ids = set(playlist_ids)
        items: Dict[str, List[PlaylistItem]] = defaultdict(list)
        if not ids:
            return items
        stmt = select(PlaylistItem).where(PlaylistItem.playlist_id.in_(ids)).order_by(PlaylistItem.order)
        result = await self.session.execute(stmt)
        for item in result.scalars().all():
            items[item.playlist_id].append(item)
        return items

    async def _items(self, playlist_id: str) -> List[PlaylistItem]:
        return (await self.items_for([playlist_id]))[playlist_id]

    @staticmethod
    def _renumber(items: List[PlaylistItem]) -> None:
        for position, item in enumerate(items, start=1):
            item.order = position

    async def add_song(self, playlist_id: str, song_id: str) -> PlaylistItem:
        """Append a song at the end of the playlist (not committed)."""
        items = await self._items(playlist_id)
        self._renumber(items)
        item = PlaylistItem(playlist_id=playlist_id, song_id=song_id, order=len(items) + 1)
        self.session.add_all([*items, item])
        await self.session.flush()
        return item

    async def remove_song(self, playlist_id: str, song_id: str) -> bool:
        """Remove every item of a song and close the gaps (not committed)."""
        items = await self._items(playlist_id)
        removed = [item for item in items if item.song_id == song_id]
        if not removed:
            return False
        for item in removed:
            await self.session.delete(item)
        remaining = [item for item in items if item.song_id != song_id]
        self._renumber(remaining)
        self.session.add_all(remaining)
        await self.session.flush()
        return True

    async def delete_with_items(self, playlist: Playlist) -> None:
        """Remove a playlist and its items (not committed)."""
        await self.session.execute(delete(PlaylistItem).where(PlaylistItem.playlist_id == playlist.id))
        await self.session.delete(playlist)
        await self.session.flush()
