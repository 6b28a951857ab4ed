"""
Shared I/O summaries.

Compact read models embedded in other responses (the uploader of a song, the
owner of a playlist, the location of an event, ...).
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, Field, model_validator


class UserSummary(BaseModel):
    """Public identity of a user."""

    id: str
    username: str
    first_name: str
    last_name: str
    email: str

    class Config:
        from_attributes = True


class LocationSummary(BaseModel):
    """Compact location reference."""

    id: str
    name: str
    city: str
    color: Optional[str] = None

    class Config:
        from_attributes = True


class SongSummary(BaseModel):
    """Compact song reference used for parents, variants and playlist items."""

    id: str
    title: str
    artist: Optional[str] = None
    duration: Optional[int] = None
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    folder_name: Optional[str] = None
    voice_type: Optional[str] = None
    parent_song_id: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(description="Human-readable result")


class PartialUpdate(BaseModel):
    """Body of an update where only the fields sent are changed.

    ``not_nullable`` names fields backed by NOT NULL columns: they may be
    left out, but an explicit ``null`` is rejected.
    """

    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "PartialUpdate":
        nulls = [name for name in self.not_nullable if name in self.model_fields_set and getattr(self, name) is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self
