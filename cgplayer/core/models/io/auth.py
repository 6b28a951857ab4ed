"""
Authentication I/O models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .users import UserRead


class RegisterRequest(BaseModel):
    """Self-service account registration."""

    email: EmailStr
    username: str = Field(min_length=3, max_length=20)
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = None
    location_id: Optional[str] = None


class LoginRequest(BaseModel):
    """Login with email or username."""

    login: str = Field(min_length=1, description="Email or username")
    password: str = Field(min_length=1)


class AuthResponse(BaseModel):
    message: str
    user: UserRead
    token: str


class VerifyResponse(BaseModel):
    user: UserRead
