"""
Admin and dashboard I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


class ResetResult(BaseModel):
    success: bool = True
    message: str
    deleted: Dict[str, int]


class SeedStats(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    locations: int
    events: int


class SeedResult(BaseModel):
    success: bool = True
    message: str
    stats: SeedStats
    timestamp: datetime


class OrphanCleanupResult(BaseModel):
    success: bool = True
    missing_files: int
    empty_containers: int
    deactivated_ids: List[str]


class VoiceMember(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    is_active: bool


class VoiceGroup(BaseModel):
    voice_type: str
    count: int
    users: List[VoiceMember]


class DirectorInfo(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class LocationDashboard(BaseModel):
    location_id: str
    location_name: str
    city: str
    address: str
    color: str
    phone: Optional[str] = None
    total_users: int
    active_users: int
    director: Optional[DirectorInfo] = None
    voice_distribution: List[VoiceGroup]


class GlobalVoiceCount(BaseModel):
    voice_type: str
    count: int
    active_count: int


class DashboardEvent(BaseModel):
    id: str
    title: str
    category: Optional[str] = None
    date: datetime
    location_name: Optional[str] = None


class DashboardStats(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    total_songs: int
    total_events: int
    locations: List[LocationDashboard]
    global_voice_distribution: List[GlobalVoiceCount]
    recent_events: List[DashboardEvent]


class DashboardResponse(BaseModel):
    success: bool = True
    data: DashboardStats
