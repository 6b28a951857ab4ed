"""
User entity models.

This module contains the account tables: users, their role assignments and
their voice profiles. Roles live only in ``user_roles``; a user holds one or
more of them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserBase(Base):
    """Base fields for user accounts."""

    email: str = Field(max_length=255, unique=True, index=True, description="Login email")
    username: str = Field(max_length=64, unique=True, index=True, description="Login username")
    first_name: str = Field(max_length=100, description="Given name")
    last_name: str = Field(max_length=100, description="Family name")
    phone: Optional[str] = Field(default=None, max_length=32, description="Contact phone")
    is_active: bool = Field(default=True, index=True, description="Inactive users cannot log in")
    location_id: Optional[str] = Field(
        default=None, foreign_key="locations.id", index=True, description="Choir location the user belongs to"
    )


class User(UserBase, table=True):
    """Persistent user account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    password_hash: str = Field(description="bcrypt hash of the password")

    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(
        sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, active={self.is_active})"


class UserRoleAssignment(Base, table=True):
    """One role held by one user.

    Table: user_roles
    """

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"), {"extend_existing": True})

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True)
    role: str = Field(max_length=16, description="UserRole value")
    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)

    def __repr__(self) -> str:
        return f"UserRoleAssignment(user_id={self.user_id}, role={self.role})"


class VoiceProfile(Base, table=True):
    """A vocal part assigned to a user.

    Table: user_voice_profiles
    """

    __tablename__ = "user_voice_profiles"
    __table_args__ = (
        UniqueConstraint("user_id", "voice_type", name="uq_voice_profiles_user_voice"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True)
    voice_type: str = Field(max_length=16, description="VoiceType value")
    assigned_by: Optional[str] = Field(default=None, foreign_key="users.id", description="User who assigned it")
    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)

    def __repr__(self) -> str:
        return f"VoiceProfile(user_id={self.user_id}, voice_type={self.voice_type})"
