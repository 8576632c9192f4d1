"""Project record read from the `projects` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ValidationInfo, field_validator, model_validator
from sqlmodel import Field

from teamdesk.models.base import RecordModel, coerce_id, split_date
from teamdesk.services.members import decode_members

RUNTIME_ANNOTATION_TYPES = (datetime,)

PROJECT_STATUSES = ("planning", "active", "completed", "on-hold")

# Older rows store the member set under a lowercase column name.
_LEGACY_MEMBERS_KEY = "teammembers"


class Project(RecordModel):
    """Project with a team-member set, progress, and an immutable creator."""

    name: str = ""
    description: str = ""
    status: str = "planning"
    # Stored progress is not range-checked on read.
    progress: int = 0
    start_date: str | None = None
    end_date: str | None = None
    team_members: list[str] = Field(default_factory=list)
    team_members_format_error: bool = False
    created_by: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _decode_members(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "team_members_format_error" in data:
            return data
        raw = data.get("team_members")
        if raw is None:
            raw = data.get(_LEGACY_MEMBERS_KEY)
        decoded = decode_members(raw)
        return {
            **data,
            "team_members": decoded.ids,
            "team_members_format_error": decoded.format_error,
        }

    @field_validator("created_by", mode="before")
    @classmethod
    def _canonical_creator(cls, value: object) -> object:
        value = coerce_id(value)
        return value or None

    @field_validator("name", "description", "status", mode="before")
    @classmethod
    def _blank_to_default(cls, value: object, info: ValidationInfo) -> object:
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("progress", mode="before")
    @classmethod
    def _progress_number(cls, value: object) -> object:
        if value is None or value == "":
            return 0
        if isinstance(value, float):
            return round(value)
        return value

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _date_only(cls, value: object) -> object:
        return split_date(value)
