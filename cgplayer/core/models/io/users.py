"""
User I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for account management
endpoints, including role and voice profile assignment.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from ..domain.enums import UserRole, VoiceType
from .common import LocationSummary, PartialUpdate


class VoiceProfileRead(BaseModel):
    """A voice type assigned to a user."""

    id: str
    voice_type: VoiceType
    assigned_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserRead(BaseModel):
    """Schema for reading a user from the API. Never carries the password hash."""

    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    is_active: bool
    location_id: Optional[str] = None
    location: Optional[LocationSummary] = None
    roles: List[UserRole] = Field(default_factory=list)
    voice_profiles: List[VoiceProfileRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserUpdate(PartialUpdate):
    """Schema for updating a user via API."""

    not_nullable = ("email", "username", "first_name", "last_name", "is_active")

    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3, max_length=20)
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = None
    location_id: Optional[str] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(default=None, min_length=6)


class VoiceTypesUpdate(BaseModel):
    """Replace the voice types of a user."""

    voice_types: List[VoiceType]


class RolesUpdate(BaseModel):
    """Replace the role set of a user."""

    roles: List[UserRole] = Field(min_length=1)


class VoiceProfileCreate(BaseModel):
    """Add one voice type to a user."""

    voice_type: VoiceType


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UserListResponse(BaseModel):
    users: List[UserRead]
    pagination: Pagination


class UserResponse(BaseModel):
    user: UserRead


class UserStats(BaseModel):
    """Aggregated account statistics."""

    total_users: int
    active_users: int
    inactive_users: int
    by_location: Dict[str, int]
    by_voice_type: Dict[str, int]
    by_role: Dict[str, int]


class CityListResponse(BaseModel):
    locations: List[str]
