"""Identity (team member) record read from the `users` collection."""

from __future__ import annotations

from datetime import datetime

from pydantic import field_validator

from teamdesk.models.base import RecordModel, coerce_id

RUNTIME_ANNOTATION_TYPES = (datetime,)


class Identity(RecordModel):
    """Team member profile with role and department labels."""

    auth_id: str | None = None
    name: str = ""
    email: str | None = None
    role: str | None = None
    department: str | None = None
    avatar: str | None = None

    @field_validator("auth_id", mode="before")
    @classmethod
    def _canonical_auth_id(cls, value: object) -> object:
        return coerce_id(value)

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_blank(cls, value: object) -> object:
        return "" if value is None else value
