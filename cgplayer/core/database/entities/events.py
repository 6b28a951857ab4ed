"""
Event entity models.

An event is a dated occasion, optionally at a location, with an ordered song
program (``event_songs``) and assigned soloists (``event_soloists``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class EventBase(Base):
    """Base fields for events."""

    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    date: datetime = Field(sa_type=DateTime, index=True)
    location_id: Optional[str] = Field(default=None, foreign_key="locations.id", index=True)
    category: Optional[str] = Field(default=None, max_length=100, index=True)
    is_active: bool = Field(default=True, index=True)


class Event(EventBase, table=True):
    """Persistent event.

    Table: events
    """

    __tablename__ = "events"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(
        sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"Event(id={self.id}, title={self.title}, date={self.date})"


class EventSong(Base, table=True):
    """A song in an event's program.

    Table: event_songs
    """

    __tablename__ = "event_songs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    event_id: str = Field(foreign_key="events.id", index=True)
    song_id: str = Field(foreign_key="songs.id", index=True)
    order: int = Field(default=0)
    notes: Optional[str] = Field(default=None)


class Soloist(Base, table=True):
    """A singer assigned a solo at an event.

    Table: event_soloists
    """

    __tablename__ = "event_soloists"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    event_id: str = Field(foreign_key="events.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    song_id: Optional[str] = Field(default=None, foreign_key="songs.id")
    soloist_type: str = Field(max_length=8, description="SoloistType value")
    notes: Optional[str] = Field(default=None)
