"""
Lyric I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..domain.enums import VoiceType
from .common import PartialUpdate


class LyricCreate(BaseModel):
    song_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    timestamp: Optional[float] = Field(default=None, ge=0)
    voice_type: Optional[VoiceType] = None


class LyricUpdate(PartialUpdate):
    not_nullable = ("content",)

    content: Optional[str] = Field(default=None, min_length=1)
    timestamp: Optional[float] = Field(default=None, ge=0)
    voice_type: Optional[VoiceType] = None


class LyricRead(BaseModel):
    id: str
    song_id: str
    content: str
    timestamp: Optional[float] = None
    voice_type: Optional[str] = None
    created_by: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LyricResponse(BaseModel):
    lyric: LyricRead


class LyricListResponse(BaseModel):
    lyrics: List[LyricRead]
