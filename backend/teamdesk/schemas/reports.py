"""Aggregate statistics payloads for reports, team, and dashboard views."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel


class StatusBreakdown(SQLModel):
    """Task counts per known status; `total` also counts unknown statuses."""

    todo: int = 0
    in_progress: int = 0
    completed: int = 0
    total: int = 0


class ProjectStatusBreakdown(SQLModel):
    """Project counts per known status plus the mean progress."""

    planning: int = 0
    active: int = 0
    completed: int = 0
    on_hold: int = 0
    total: int = 0
    average_progress: int = Field(
        default=0,
        description="Mean stored progress, rounded; 0 with no projects.",
    )


class MemberProductivity(SQLModel):
    """Assigned/completed task counts for one identity."""

    identity_id: str
    name: str
    total: int
    completed: int
    rate: int


class DepartmentStats(SQLModel):
    """Task rollup for one department; tasks are counted once per department."""

    name: str
    members: int
    tasks: int
    completed: int
    rate: int


class DepartmentComposition(SQLModel):
    """Head-count breakdown for one department."""

    name: str
    members: int
    managers: int
    interns: int


class ReportRead(SQLModel):
    """Full reports page payload."""

    tasks: StatusBreakdown
    projects: ProjectStatusBreakdown
    completion_rate: int
    member_productivity: list[MemberProductivity] = Field(default_factory=list)
    departments: list[DepartmentStats] = Field(default_factory=list)
