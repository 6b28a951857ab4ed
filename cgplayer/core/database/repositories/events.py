"""
Event repository.

Data access for events, their song program and their soloists. Program and
soloist lists are replaced as a whole.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.events import Event, EventSong, Soloist
from .base import AsyncBaseRepository


class EventRepository(AsyncBaseRepository[Event]):
    """Repository for events using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Event)

    async def get_active(self, event_id: str) -> Optional[Event]:
        stmt = select(Event).where(Event.id == event_id, Event.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def search(
        self,
        *,
        location_id: Optional[str] = None,
        category: Optional[str] = None,
        upcoming_from: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Event]:
        """Active events; upcoming ones ascending by date, otherwise descending."""
        stmt = select(Event).where(Event.is_active == True)  # noqa: E712
        if location_id:
            stmt = stmt.where(Event.location_id == location_id)
        if category:
            stmt = stmt.where(Event.category == category)
        if upcoming_from is not None:
            stmt = stmt.where(Event.date >= upcoming_from).order_by(Event.date.asc())
        else:
            stmt = stmt.order_by(Event.date.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def songs_for(self, event_ids: Iterable[str]) -> Dict[str, List[EventSong]]:
        ids = set(event_ids)
        program: Dict[str, List[EventSong]] = defaultdict(list)
        if not ids:
            return program
        stmt = select(EventSong).where(EventSong.event_id.in_(ids)).order_by(EventSong.order)
        for entry in (await self.session.execute(stmt)).scalars().all():
            program[entry.event_id].append(entry)
        return program

    async def soloists_for(self, event_ids: Iterable[str]) -> Dict[str, List[Soloist]]:
        ids = set(event_ids)
        soloists: Dict[str, List[Soloist]] = defaultdict(list)
        if not ids:
            return soloists
        stmt = select(Soloist).where(Soloist.event_id.in_(ids))
        for entry in (await self.session.execute(stmt)).scalars().all():
            soloists[entry.event_id].append(entry)
        return soloists

    async def replace_songs(self, event_id: str, songs: Sequence[Dict[str, Any]]) -> List[EventSong]:
        """Replace the song program of an event (not committed)."""
        await self.session.execute(delete(EventSong).where(EventSong.event_id == event_id))
        entries = [EventSong(event_id=event_id, **song) for song in songs]
        self.session.add_all(entries)
        await self.session.flush()
        return entries

    async def replace_soloists(self, event_id: str, soloists: Sequence[Dict[str, Any]]) -> List[Soloist]:
        """Replace the soloists of an event (not committed)."""
        await self.session.execute(delete(Soloist).where(Soloist.event_id == event_id))
        entries = [Soloist(event_id=event_id, **soloist) for soloist in soloists]
        self.session.add_all(entries)
        await self.session.flush()
        return entries

    async def count_active(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> int:
        stmt = select(func.count(Event.id)).where(Event.is_active == True)  # noqa: E712
        if since is not None:
            stmt = stmt.where(Event.date >= since)
        if until is not None:
            stmt = stmt.where(Event.date < until)
        return int((await self.session.execute(stmt)).scalar_one())

    async def count_by_category(self) -> Dict[Optional[str], int]:
        stmt = (
            select(Event.category, func.count(Event.id))
            .where(Event.is_active == True)  # noqa: E712
            .group_by(Event.category)
        )
        result = await self.session.execute(stmt)
        return {category: int(count) for category, count in result.all()}
