"""
Playlist I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import PartialUpdate, SongSummary, UserSummary


class PlaylistItemRead(BaseModel):
    id: str
    order: int
    added_at: datetime
    song: Optional[SongSummary] = None

    class Config:
        from_attributes = True


class PlaylistRead(BaseModel):
    """Schema for reading a playlist with its ordered items."""

    id: str
    name: str
    description: Optional[str] = None
    is_public: bool
    image_url: Optional[str] = None
    user_id: str
    owner: Optional[UserSummary] = None
    items: List[PlaylistItemRead] = Field(default_factory=list)
    total_songs: int = 0
    total_duration: int = Field(default=0, description="Sum of item durations in seconds")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PlaylistUpdate(PartialUpdate):
    not_nullable = ("name", "is_public")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    is_public: Optional[bool] = None


class PlaylistSongAdd(BaseModel):
    song_id: str = Field(min_length=1)


class PlaylistResponse(BaseModel):
    playlist: PlaylistRead


class PlaylistListResponse(BaseModel):
    playlists: List[PlaylistRead]
