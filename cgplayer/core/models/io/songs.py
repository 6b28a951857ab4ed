"""
Song I/O models for API requests and responses.

Uploads arrive as multipart forms, so only the JSON shapes live here: song
reads with their uploader, parent and variants, metadata updates and the
upload responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import PartialUpdate, SongSummary, UserSummary


class SongRead(BaseModel):
    """Schema for reading a song from the API."""

    id: str
    title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    duration: Optional[int] = None
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    folder_name: Optional[str] = None
    voice_type: Optional[str] = None
    parent_song_id: Optional[str] = None
    cover_color: Optional[str] = None
    uploaded_by: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    uploader: Optional[UserSummary] = None
    parent_song: Optional[SongSummary] = None
    child_versions: List[SongSummary] = Field(default_factory=list)

    class Config:
        from_attributes = True


class SongUpdate(PartialUpdate):
    """Editable song metadata. File and voice assignment are fixed at upload."""

    not_nullable = ("title",)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    cover_color: Optional[str] = None


class SongListResponse(BaseModel):
    songs: List[SongRead]


class SongResponse(BaseModel):
    song: SongRead


class SongVersionsResponse(BaseModel):
    versions: List[SongSummary]


class SongUploadResponse(BaseModel):
    message: str
    song: SongRead


class MultiUploadResponse(BaseModel):
    message: str
    parent_song: SongRead
    songs: List[SongRead]


class ServerInfo(BaseModel):
    host: str
    port: int
    audio_base_url: str
