"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class RegisterRequest(BaseModel):
    """Register request schema."""

    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class LoginRequest(BaseModel):
    """Login request schema."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class GoogleLoginRequest(BaseModel):
    """Google id_token issued to the frontend."""

    token: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """User response schema (never includes the password hash)."""

    id: UUID
    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    google_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class AuthResponse(BaseModel):
    """User plus the bearer credential issued for it."""

    user: UserResponse
    token: str


# Rebuild models to resolve forward references
AuthResponse.model_rebuild()
