"""
Location I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.enums import LocationType
from .common import PartialUpdate


class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: LocationType
    city: str = Field(min_length=1, max_length=100)
    address: Optional[str] = None
    region: Optional[str] = None
    country: str = "Chile"
    color: Optional[str] = None
    phone: Optional[str] = None


class LocationUpdate(PartialUpdate):
    not_nullable = ("name", "type", "city", "country", "is_active")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[LocationType] = None
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    address: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    color: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class LocationRead(BaseModel):
    id: str
    name: str
    type: str
    address: Optional[str] = None
    city: str
    region: Optional[str] = None
    country: str
    color: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    user_count: int = 0
    event_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecentEvent(BaseModel):
    id: str
    title: str
    date: datetime
    category: Optional[str] = None

    class Config:
        from_attributes = True


class LocationStats(BaseModel):
    total_users: int
    users_by_role: Dict[str, int]
    users_by_voice: Dict[str, int]
    recent_events: List[RecentEvent]


class LocationResponse(BaseModel):
    location: LocationRead


class LocationListResponse(BaseModel):
    locations: List[LocationRead]


class LocationDeleteResponse(BaseModel):
    message: str
    soft_deleted: bool
