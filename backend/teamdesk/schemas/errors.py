"""Structured error payload schemas used by API responses."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel


class ErrorDetail(SQLModel):
    """Machine-readable code plus the message shown to the user."""

    code: str = Field(examples=["permission_denied", "write_not_applied"])
    message: str


class ErrorResponse(SQLModel):
    """Error envelope written by the global exception handlers."""

    detail: str | ErrorDetail | dict[str, object] | list[object] = Field(
        description=(
            "Error payload. Clients should rely on `code` when present and fall "
            "back to `message` for display."
        ),
        examples=[
            "Invalid email or password",
            {"code": "write_not_applied", "message": "You do not have permission..."},
        ],
    )
    request_id: str | None = Field(
        default=None,
        description="Request correlation identifier injected by middleware.",
    )
