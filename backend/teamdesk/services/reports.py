"""In-memory aggregate statistics over tasks, projects, and identities.

Everything here is recomputed from full lists on each request; nothing is
stored or updated incrementally. Unknown status values never raise, they
simply fall outside the known buckets.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from teamdesk.schemas.reports import (
    DepartmentComposition,
    DepartmentStats,
    MemberProductivity,
    ProjectStatusBreakdown,
    StatusBreakdown,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from teamdesk.models.identities import Identity
    from teamdesk.models.projects import Project
    from teamdesk.models.tasks import Task

COMPLETED = "completed"
MANAGER_ROLE_MARKERS = ("Manager", "Responsable")
INTERN_ROLE_MARKERS = ("Stagiaire",)


def completion_rate(total: int, completed: int) -> int:
    """Percentage of completed items, rounded half up; 0 when `total` is 0."""
    if total <= 0:
        return 0
    return math.floor(100 * completed / total + 0.5)


def status_breakdown(tasks: Iterable[Task]) -> StatusBreakdown:
    counts = StatusBreakdown()
    for task in tasks:
        counts.total += 1
        if task.status == "todo":
            counts.todo += 1
        elif task.status == "in-progress":
            counts.in_progress += 1
        elif task.status == COMPLETED:
            counts.completed += 1
    return counts


def project_breakdown(projects: Sequence[Project]) -> ProjectStatusBreakdown:
    counts = ProjectStatusBreakdown(total=len(projects))
    for project in projects:
        if project.status == "planning":
            counts.planning += 1
        elif project.status == "active":
            counts.active += 1
        elif project.status == COMPLETED:
            counts.completed += 1
        elif project.status == "on-hold":
            counts.on_hold += 1
    if projects:
        mean = sum(project.progress for project in projects) / len(projects)
        counts.average_progress = math.floor(mean + 0.5)
    return counts


def _assigned_to(task: Task, identity_ids: set[str]) -> bool:
    return any(member_id in identity_ids for member_id in task.assigned_to)


def member_productivity(
    identities: Iterable[Identity],
    tasks: Sequence[Task],
) -> list[MemberProductivity]:
    """Per-identity task totals, completed counts, and completion rate."""
    rows: list[MemberProductivity] = []
    for identity in identities:
        member_tasks = [task for task in tasks if _assigned_to(task, {identity.id})]
        completed = sum(1 for task in member_tasks if task.status == COMPLETED)
        rows.append(
            MemberProductivity(
                identity_id=identity.id,
                name=identity.name,
                total=len(member_tasks),
                completed=completed,
                rate=completion_rate(len(member_tasks), completed),
            ),
        )
    return rows


def group_by_department(identities: Iterable[Identity]) -> dict[str, list[Identity]]:
    """Group identities by department label in first-seen order.

    Identities without a department are left out of every group.
    """
    groups: dict[str, list[Identity]] = {}
    for identity in identities:
        department = (identity.department or "").strip()
        if not department:
            continue
        groups.setdefault(department, []).append(identity)
    return groups


def department_rollup(
    identities: Iterable[Identity],
    tasks: Sequence[Task],
) -> list[DepartmentStats]:
    """Per-department member count and task completion.

    A task assigned to several members of one department counts once.
    """
    rows: list[DepartmentStats] = []
    for department, members in group_by_department(identities).items():
        member_ids = {member.id for member in members}
        department_tasks: dict[str, Task] = {}
        for task in tasks:
            if _assigned_to(task, member_ids):
                department_tasks.setdefault(task.id, task)
        completed = sum(1 for task in department_tasks.values() if task.status == COMPLETED)
        rows.append(
            DepartmentStats(
                name=department,
                members=len(members),
                tasks=len(department_tasks),
                completed=completed,
                rate=completion_rate(len(department_tasks), completed),
            ),
        )
    return rows


def _has_marker(role: str | None, markers: Iterable[str]) -> bool:
    return bool(role) and any(marker in role for marker in markers)


def team_composition(identities: Iterable[Identity]) -> list[DepartmentComposition]:
    """Per-department head count with managers and interns, by role label."""
    return [
        DepartmentComposition(
            name=department,
            members=len(members),
            managers=sum(1 for m in members if _has_marker(m.role, MANAGER_ROLE_MARKERS)),
            interns=sum(1 for m in members if _has_marker(m.role, INTERN_ROLE_MARKERS)),
        )
        for department, members in group_by_department(identities).items()
    ]


def urgent_tasks(tasks: Iterable[Task]) -> list[Task]:
    """High-priority tasks that are not completed yet."""
    return [task for task in tasks if task.priority == "high" and task.status != COMPLETED]
