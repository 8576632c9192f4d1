"""Task listing, filtering, and permission-gated writes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from teamdesk.db.collections import Collection
from teamdesk.models.tasks import Task
from teamdesk.schemas.tasks import TaskRead
from teamdesk.services.editing import (
    EditableCollection,
    create_record,
    delete_record,
    fetch_all,
    update_record,
)
from teamdesk.services.members import FORMAT_ERROR_LABEL, format_member_names
from teamdesk.services.permissions import LIMITED_TASK_FIELDS, evaluate_task_permissions

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from teamdesk.db.record_client import RecordClient
    from teamdesk.models.identities import Identity
    from teamdesk.schemas.tasks import TaskCreate, TaskUpdate
    from teamdesk.services.session_store import SessionContext

ALL = "all"
TASKS = EditableCollection(
    collection=Collection.TASKS,
    model=Task,
    label="task",
    limited_fields=LIMITED_TASK_FIELDS,
    evaluate=evaluate_task_permissions,
)


async def list_tasks(records: RecordClient) -> list[Task]:
    """All tasks, newest first."""
    return await fetch_all(records, Collection.TASKS, Task)


def _matches(value: str | None, wanted: str | None) -> bool:
    return not wanted or wanted == ALL or value == wanted


def filter_tasks(
    tasks: Iterable[Task],
    *,
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
) -> list[Task]:
    """Apply the list view's status, priority, and free-text filters.

    `search` matches title or description case-insensitively; `"all"` or an
    empty value disables a filter.
    """
    needle = (search or "").strip().lower()
    return [
        task
        for task in tasks
        if _matches(task.status, status)
        and _matches(task.priority, priority)
        and (not needle or needle in task.title.lower() or needle in task.description.lower())
    ]


def assignee_names(task: Task, identities: Iterable[Identity]) -> str:
    """Display string for a task's assignees."""
    if task.assigned_to_format_error:
        return FORMAT_ERROR_LABEL
    return format_member_names(task.assigned_to, identities)


def to_read(task: Task, ctx: SessionContext, identities: Sequence[Identity]) -> TaskRead:
    """Build the API payload for one task as seen by the caller."""
    return TaskRead(
        **task.model_dump(exclude={"assigned_to_format_error"}),
        assignee_names=assignee_names(task, identities),
        permissions=evaluate_task_permissions(ctx.identity_id, task),
    )


async def create_task(records: RecordClient, ctx: SessionContext, payload: TaskCreate) -> Task:
    return await create_record(records, ctx, TASKS, payload.model_dump(mode="json"))


async def update_task(
    records: RecordClient,
    ctx: SessionContext,
    task_id: str,
    payload: TaskUpdate,
) -> Task:
    """Update a task; assignees only get their status/priority changes applied."""
    values = payload.model_dump(mode="json", exclude_unset=True)
    return await update_record(records, ctx, TASKS, task_id, values)


async def delete_task(records: RecordClient, ctx: SessionContext, task_id: str) -> None:
    await delete_record(records, ctx, TASKS, task_id)
