"""
Location entity models.

A location is a choir group's venue. Users and events point at it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class LocationBase(Base):
    """Base fields for locations."""

    name: str = Field(max_length=200, description="Venue name")
    type: str = Field(max_length=32, description="LocationType value")
    address: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(max_length=100, index=True)
    region: Optional[str] = Field(default=None, max_length=100)
    country: str = Field(default="Chile", max_length=100)
    color: Optional[str] = Field(default=None, max_length=16, description="Display color (hex)")
    phone: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = Field(default=True, index=True)


class Location(LocationBase, table=True):
    """Persistent location.

    Table: locations
    """

    __tablename__ = "locations"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    created_at: datetime = Field(sa_type=DateTime, default_factory=utc_now)
    updated_at: datetime = Field(
        sa_type=DateTime, default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"Location(id={self.id}, name={self.name}, city={self.city})"
