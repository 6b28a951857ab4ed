"""
Lyric entity models.

Lyric blocks belong to a song. A block with ``voice_type`` set is only shown
to that part; a block without it is general and shown to everybody.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class LyricBase(Base):
    """Base fields for lyric blocks."""

    content: str = Field(description="Lyric text")
    timestamp: Optional[float] = Field(default=None, description="Offset in seconds where the block starts")
    voice_type: Optional[str] = Field(default=None, max_length=16, description="VoiceType value or general")
    is_active: bool = Field(default=True, index=True)


class Lyric(LyricBase, table=True):
    """Persistent lyric block.

    Table: lyrics
    """

    __tablename__ = "lyrics"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    song_id: str = Field(foreign_key="songs.id", index=True)
    created_by: str = Field(foreign_key="users.id")
    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(
        sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )
