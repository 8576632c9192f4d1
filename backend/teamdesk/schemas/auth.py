"""Sign-in request and session response schemas."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel

from teamdesk.schemas.users import UserRead


class SignInRequest(SQLModel):
    """Email/password credentials."""

    email: str = Field(min_length=3, examples=["alex@example.com"])
    password: str = Field(min_length=1)


class SessionRead(SQLModel):
    """Session issued at sign-in, or the current caller's session."""

    access_token: str | None = Field(
        default=None,
        description="Bearer token for later requests; only returned by sign-in.",
    )
    token_type: str = "bearer"
    user: UserRead
    is_admin: bool = False
    profile_is_fallback: bool = Field(
        default=False,
        description="True when the account has no profile row yet.",
    )
