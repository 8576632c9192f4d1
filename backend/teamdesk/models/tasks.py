"""Task record read from the `tasks` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ValidationInfo, field_validator, model_validator
from sqlmodel import Field

from teamdesk.models.base import RecordModel, coerce_id, split_date
from teamdesk.services.members import decode_members

RUNTIME_ANNOTATION_TYPES = (datetime,)

TASK_STATUSES = ("todo", "in-progress", "completed")
TASK_PRIORITIES = ("low", "medium", "high")


class Task(RecordModel):
    """Work item with an assignee set and an immutable creator."""

    title: str = ""
    description: str = ""
    # Stored values outside TASK_STATUSES/TASK_PRIORITIES are kept as-is.
    status: str = "todo"
    priority: str = "medium"
    assigned_to: list[str] = Field(default_factory=list)
    assigned_to_format_error: bool = False
    project_id: str | None = None
    due_date: str | None = None
    created_by: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _decode_assignees(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "assigned_to_format_error" in data:
            return data
        decoded = decode_members(data.get("assigned_to"))
        return {
            **data,
            "assigned_to": decoded.ids,
            "assigned_to_format_error": decoded.format_error,
        }

    @field_validator("project_id", "created_by", mode="before")
    @classmethod
    def _canonical_refs(cls, value: object) -> object:
        value = coerce_id(value)
        return value or None

    @field_validator("title", "description", "status", "priority", mode="before")
    @classmethod
    def _blank_to_default(cls, value: object, info: ValidationInfo) -> object:
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def _date_only(cls, value: object) -> object:
        return split_date(value)
