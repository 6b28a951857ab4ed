"""
Song entity models.

Songs form a two-level tree: a *container* row (mime type
``multitrack/folder``) groups voice variant rows through ``parent_song_id``.
A standalone upload is a single row without parent or children.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now

CONTAINER_MIME_TYPE = "multitrack/folder"


class SongBase(Base):
    """Base fields for songs."""

    title: str = Field(max_length=255, index=True)
    artist: Optional[str] = Field(default=None, max_length=255)
    album: Optional[str] = Field(default=None, max_length=255)
    genre: Optional[str] = Field(default=None, max_length=100)
    duration: Optional[int] = Field(default=None, description="Length in seconds")
    file_name: str = Field(max_length=255, description="Stored file name (or folder name for containers)")
    file_path: str = Field(max_length=512, description="Path relative to the upload root")
    file_size: int = Field(default=0, description="Bytes on disk (sum of children for containers)")
    mime_type: str = Field(max_length=100)
    folder_name: Optional[str] = Field(default=None, max_length=255, index=True)
    voice_type: Optional[str] = Field(default=None, max_length=16, index=True, description="VoiceType value")
    parent_song_id: Optional[str] = Field(default=None, foreign_key="songs.id", index=True)
    cover_color: Optional[str] = Field(default=None, max_length=16)
    is_active: bool = Field(default=True, index=True)


class Song(SongBase, table=True):
    """Persistent song or song container.

    Table: songs
    """

    __tablename__ = "songs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    uploaded_by: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(
        sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )

    @property
    def is_container(self) -> bool:
        return self.mime_type == CONTAINER_MIME_TYPE

    def __repr__(self) -> str:
        return f"Song(id={self.id}, title={self.title}, voice_type={self.voice_type})"
