"""
Event I/O models.

Event responses are wrapped in a ``{success, data}`` envelope.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.enums import SoloistType
from .common import LocationSummary, PartialUpdate, SongSummary, UserSummary


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    date: datetime
    description: Optional[str] = None
    location_id: Optional[str] = None
    category: Optional[str] = None


class EventUpdate(PartialUpdate):
    not_nullable = ("title", "date", "is_active")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[datetime] = None
    description: Optional[str] = None
    location_id: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None


class EventSongEntry(BaseModel):
    song_id: str
    order: int = 0
    notes: Optional[str] = None


class EventSongsReplace(BaseModel):
    songs: List[EventSongEntry]


class SoloistEntry(BaseModel):
    user_id: str
    song_id: Optional[str] = None
    soloist_type: SoloistType
    notes: Optional[str] = None


class SoloistsReplace(BaseModel):
    soloists: List[SoloistEntry]


class EventSongRead(BaseModel):
    id: str
    order: int
    notes: Optional[str] = None
    song: Optional[SongSummary] = None


class SoloistRead(BaseModel):
    id: str
    soloist_type: SoloistType
    notes: Optional[str] = None
    user: Optional[UserSummary] = None
    song: Optional[SongSummary] = None


class EventRead(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    date: datetime
    category: Optional[str] = None
    location_id: Optional[str] = None
    is_active: bool
    location: Optional[LocationSummary] = None
    event_songs: List[EventSongRead] = Field(default_factory=list)
    soloists: List[SoloistRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EventEnvelope(BaseModel):
    success: bool = True
    data: EventRead


class EventListEnvelope(BaseModel):
    success: bool = True
    data: List[EventRead]


class EventSummary(BaseModel):
    total_events: int
    upcoming_events: int
    this_month_events: int
    category_stats: Dict[str, int]


class EventSummaryEnvelope(BaseModel):
    success: bool = True
    data: EventSummary


class EventMessage(BaseModel):
    success: bool = True
    message: str
