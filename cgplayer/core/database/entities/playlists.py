"""
Playlist entity models.

A playlist belongs to one user and holds ordered song references. Item
``order`` values are kept as the dense sequence 1..n.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class PlaylistBase(Base):
    """Base fields for playlists."""

    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    is_public: bool = Field(default=False, index=True)
    image_url: Optional[str] = Field(default=None, max_length=512)


class Playlist(PlaylistBase, table=True):
    """Persistent playlist.

    Table: playlists
    """

    __tablename__ = "playlists"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now, index=True)
    updated_at: datetime = Field(
        sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"Playlist(id={self.id}, name={self.name}, public={self.is_public})"


class PlaylistItem(Base, table=True):
    """A song placed at a position in a playlist.

    Table: playlist_items
    """

    __tablename__ = "playlist_items"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    playlist_id: str = Field(foreign_key="playlists.id", index=True)
    song_id: str = Field(foreign_key="songs.id", index=True)
    order: int = Field(description="1-based position")
    added_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
