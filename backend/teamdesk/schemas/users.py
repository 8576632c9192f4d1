"""User profile schemas for read, self-service, and admin operations."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field
from sqlmodel import SQLModel

RUNTIME_ANNOTATION_TYPES = (datetime,)
MIN_PASSWORD_LENGTH = 6


class UserRead(SQLModel):
    """Team member profile returned by API responses."""

    id: str = Field(examples=["7"])
    auth_id: str | None = None
    name: str = Field(examples=["Alex Chen"])
    email: str | None = Field(default=None, examples=["alex@example.com"])
    role: str | None = Field(default=None, examples=["Responsable Technique"])
    department: str | None = Field(default=None, examples=["Tech"])
    avatar: str | None = None
    created_at: datetime | None = None


class ProfileUpdate(SQLModel):
    """Self-service profile edit; `password` is changed only when given."""

    name: str = Field(min_length=1)
    role: str | None = None
    department: str | None = None
    avatar: str | None = None
    password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)


class UserCreate(SQLModel):
    """Admin payload creating both the account and its profile row."""

    email: str = Field(min_length=3, examples=["new.hire@example.com"])
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    department: str = Field(min_length=1)
    avatar: str | None = None


class UserAdminUpdate(SQLModel):
    """Admin edit of another member's profile."""

    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    department: str = Field(min_length=1)
    avatar: str | None = None
    password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)
