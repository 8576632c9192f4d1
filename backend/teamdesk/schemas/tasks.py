"""Task API schemas for create, update, and read operations."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Self

from pydantic import Field, field_validator, model_validator
from sqlmodel import SQLModel

from teamdesk.models.base import coerce_id
from teamdesk.schemas.permissions import PermissionSnapshot
from teamdesk.schemas.reports import StatusBreakdown
from teamdesk.services.members import parse_member_input

RUNTIME_ANNOTATION_TYPES = (date, datetime)
TaskStatus = Literal["todo", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]
# Columns a patch may clear; assigned_to clears to an empty list.
NULLABLE_UPDATE_FIELDS = frozenset({"project_id", "due_date", "assigned_to"})
_ERR_NULL_FIELD = "{field} cannot be null"


class _TaskFieldsBase(SQLModel):
    @field_validator("assigned_to", mode="before", check_fields=False)
    @classmethod
    def _canonical_assignees(cls, value: object) -> object:
        return parse_member_input(value, field_name="assigned_to")

    @field_validator("project_id", mode="before", check_fields=False)
    @classmethod
    def _blank_project(cls, value: object) -> object:
        value = coerce_id(value)
        return value or None


class TaskCreate(_TaskFieldsBase):
    """Payload used to create a task; the caller becomes its creator."""

    title: str = Field(min_length=1, examples=["Prepare client demo"])
    description: str = ""
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    assigned_to: list[str] = Field(
        default_factory=list,
        description="Identity ids; arrays, JSON strings, and comma lists are accepted.",
        examples=[["3", "7"]],
    )
    project_id: str | None = None
    due_date: date = Field(examples=["2025-03-31"])


class TaskUpdate(_TaskFieldsBase):
    """Partial task update.

    Assignees who did not create the task may only change `status` and
    `priority`; other fields they send are ignored.
    """

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to: list[str] | None = None
    project_id: str | None = None
    due_date: date | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> Self:
        """Reject explicit nulls for columns the task row requires."""
        for name in sorted(self.model_fields_set - NULLABLE_UPDATE_FIELDS):
            if getattr(self, name) is None:
                raise ValueError(_ERR_NULL_FIELD.format(field=name))
        return self


class TaskRead(SQLModel):
    """Task payload with resolved assignee names and caller capabilities."""

    id: str
    title: str
    description: str
    status: str
    priority: str
    assigned_to: list[str]
    assignee_names: str = Field(
        description="Display names joined by commas; unknown ids render as `ID: <id>`.",
        examples=["Alex Chen, ID: 42"],
    )
    project_id: str | None = None
    due_date: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    permissions: PermissionSnapshot


class TaskListRead(SQLModel):
    """Filtered task list plus counts over every task."""

    items: list[TaskRead] = Field(default_factory=list)
    stats: StatusBreakdown
