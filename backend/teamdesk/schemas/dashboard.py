"""Dashboard and team overview payloads."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel

from teamdesk.schemas.projects import ProjectRead
from teamdesk.schemas.reports import DepartmentComposition
from teamdesk.schemas.tasks import TaskRead
from teamdesk.schemas.users import UserRead


class DashboardRead(SQLModel):
    """Landing-page counters, task highlights, and project overview."""

    member_count: int
    completed_tasks: int
    active_projects: int
    completion_rate: int
    recent_tasks: list[TaskRead] = Field(default_factory=list)
    urgent_tasks: list[TaskRead] = Field(default_factory=list)
    projects: list[ProjectRead] = Field(default_factory=list)


class TeamRead(SQLModel):
    """Team directory grouped by department."""

    member_count: int
    department_count: int
    departments: list[DepartmentComposition] = Field(default_factory=list)
    members: list[UserRead] = Field(default_factory=list)
