"""Read-only views assembled from full task, project, and profile lists."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from teamdesk.schemas.dashboard import DashboardRead, TeamRead
from teamdesk.schemas.reports import ReportRead
from teamdesk.services import projects as project_service
from teamdesk.services import tasks as task_service
from teamdesk.services import users as user_service
from teamdesk.services.reports import (
    COMPLETED,
    completion_rate,
    department_rollup,
    member_productivity,
    project_breakdown,
    status_breakdown,
    team_composition,
    urgent_tasks,
)

if TYPE_CHECKING:
    from teamdesk.db.record_client import RecordClient
    from teamdesk.services.session_store import SessionContext

RECENT_TASK_LIMIT = 5
ACTIVE = "active"


async def build_dashboard(records: RecordClient, ctx: SessionContext) -> DashboardRead:
    """Counters, recent and urgent tasks, and the project overview."""
    identities, tasks, projects = await asyncio.gather(
        user_service.list_identities(records),
        task_service.list_tasks(records),
        project_service.list_projects(records),
    )
    completed = sum(1 for task in tasks if task.status == COMPLETED)
    return DashboardRead(
        member_count=len(identities),
        completed_tasks=completed,
        active_projects=sum(1 for project in projects if project.status == ACTIVE),
        completion_rate=completion_rate(len(tasks), completed),
        recent_tasks=[
            task_service.to_read(task, ctx, identities) for task in tasks[:RECENT_TASK_LIMIT]
        ],
        urgent_tasks=[task_service.to_read(task, ctx, identities) for task in urgent_tasks(tasks)],
        projects=[project_service.to_read(project, ctx, identities) for project in projects],
    )


async def build_report(records: RecordClient) -> ReportRead:
    """Task/project breakdowns with per-member and per-department rollups."""
    identities, tasks, projects = await asyncio.gather(
        user_service.list_identities(records),
        task_service.list_tasks(records),
        project_service.list_projects(records),
    )
    breakdown = status_breakdown(tasks)
    return ReportRead(
        tasks=breakdown,
        projects=project_breakdown(projects),
        completion_rate=completion_rate(breakdown.total, breakdown.completed),
        member_productivity=member_productivity(identities, tasks),
        departments=department_rollup(identities, tasks),
    )


async def build_team(records: RecordClient) -> TeamRead:
    """Team directory with per-department composition."""
    identities = await user_service.list_identities(records)
    departments = team_composition(identities)
    return TeamRead(
        member_count=len(identities),
        department_count=len(departments),
        departments=departments,
        members=[user_service.to_read(identity) for identity in identities],
    )
