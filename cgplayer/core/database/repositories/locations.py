"""
Location repository.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.events import Event
from ..entities.locations import Location
from ..entities.users import User
from .base import AsyncBaseRepository


class LocationRepository(AsyncBaseRepository[Location]):
    """Repository for locations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Location)

    async def list_active(self) -> List[Location]:
        stmt = select(Location).where(Location.is_active == True).order_by(Location.name)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def user_counts(self) -> Dict[str, int]:
        stmt = select(User.location_id, func.count(User.id)).where(User.location_id != None)  # noqa: E711
        result = await self.session.execute(stmt.group_by(User.location_id))
        return {location_id: int(count) for location_id, count in result.all()}

    async def event_counts(self) -> Dict[str, int]:
        stmt = select(Event.location_id, func.count(Event.id)).where(Event.location_id != None)  # noqa: E711
        result = await self.session.execute(stmt.group_by(Event.location_id))
        return {location_id: int(count) for location_id, count in result.all()}

    async def reference_counts(self, location_id: str) -> Tuple[int, int]:
        """Number of users and events pointing at a location."""
        users = await self.session.execute(select(func.count(User.id)).where(User.location_id == location_id))
        events = await self.session.execute(select(func.count(Event.id)).where(Event.location_id == location_id))
        return int(users.scalar_one()), int(events.scalar_one())

    async def recent_events(self, location_id: str, limit: int = 5) -> List[Event]:
        stmt = select(Event).where(Event.location_id == location_id).order_by(Event.date.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
