"""Project API schemas for create, update, and read operations."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Self

from pydantic import Field, field_validator, model_validator
from sqlmodel import SQLModel

from teamdesk.schemas.permissions import PermissionSnapshot
from teamdesk.schemas.reports import ProjectStatusBreakdown
from teamdesk.services.members import parse_member_input

RUNTIME_ANNOTATION_TYPES = (date, datetime)
ProjectStatus = Literal["planning", "active", "completed", "on-hold"]
# Columns a patch may clear; team_members clears to an empty list.
NULLABLE_UPDATE_FIELDS = frozenset({"start_date", "end_date", "team_members"})
_ERR_NULL_FIELD = "{field} cannot be null"


class _ProjectFieldsBase(SQLModel):
    @field_validator("team_members", mode="before", check_fields=False)
    @classmethod
    def _canonical_members(cls, value: object) -> object:
        return parse_member_input(value, field_name="team_members")


class ProjectCreate(_ProjectFieldsBase):
    """Payload used to create a project; the caller becomes its creator."""

    name: str = Field(min_length=1, examples=["Website redesign"])
    description: str = ""
    status: ProjectStatus = "planning"
    progress: int = Field(default=0, ge=0, le=100)
    start_date: date | None = None
    end_date: date | None = None
    team_members: list[str] = Field(default_factory=list, examples=[["3", "7"]])


class ProjectUpdate(_ProjectFieldsBase):
    """Partial project update.

    Team members who did not create the project may only change `status` and
    `progress`; other fields they send are ignored.
    """

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: ProjectStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    start_date: date | None = None
    end_date: date | None = None
    team_members: list[str] | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> Self:
        """Reject explicit nulls for columns the project row requires."""
        for name in sorted(self.model_fields_set - NULLABLE_UPDATE_FIELDS):
            if getattr(self, name) is None:
                raise ValueError(_ERR_NULL_FIELD.format(field=name))
        return self


class ProjectRead(SQLModel):
    """Project payload with resolved member names and caller capabilities."""

    id: str
    name: str
    description: str
    status: str
    progress: int
    start_date: str | None = None
    end_date: str | None = None
    team_members: list[str]
    member_names: str
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    permissions: PermissionSnapshot


class ProjectListRead(SQLModel):
    """Project list with status counts and mean progress."""

    items: list[ProjectRead] = Field(default_factory=list)
    summary: ProjectStatusBreakdown
