"""Task list and permission-gated task edit endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from teamdesk.api.deps import CALLER_RECORDS_DEP, SESSION_CONTEXT_DEP
from teamdesk.db.record_client import RecordClient
from teamdesk.schemas.common import OkResponse
from teamdesk.schemas.errors import ErrorResponse
from teamdesk.schemas.tasks import TaskCreate, TaskListRead, TaskRead, TaskUpdate
from teamdesk.services import tasks as task_service
from teamdesk.services.reports import status_breakdown
from teamdesk.services.session_store import SessionContext
from teamdesk.services.users import list_identities

router = APIRouter(prefix="/tasks", tags=["tasks"])
STATUS_QUERY = Query(default=None, alias="status", description="Task status, or `all`.")
PRIORITY_QUERY = Query(default=None, description="Task priority, or `all`.")
SEARCH_QUERY = Query(default=None, description="Case-insensitive title/description match.")
WRITE_ERRORS = {
    status.HTTP_403_FORBIDDEN: {
        "model": ErrorResponse,
        "description": "Caller may not change this task, or the store refused the write.",
    },
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Task not found."},
}


@router.get("", response_model=TaskListRead)
async def list_tasks(
    status_filter: str | None = STATUS_QUERY,
    priority: str | None = PRIORITY_QUERY,
    search: str | None = SEARCH_QUERY,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> TaskListRead:
    """List tasks newest first, with counts over every task."""
    tasks = await task_service.list_tasks(records)
    identities = await list_identities(records)
    visible = task_service.filter_tasks(
        tasks,
        status=status_filter,
        priority=priority,
        search=search,
    )
    return TaskListRead(
        items=[task_service.to_read(task, ctx, identities) for task in visible],
        stats=status_breakdown(tasks),
    )


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
)
async def create_task(
    payload: TaskCreate,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> TaskRead:
    """Create a task owned by the caller."""
    task = await task_service.create_task(records, ctx, payload)
    return task_service.to_read(task, ctx, await list_identities(records))


@router.patch("/{task_id}", response_model=TaskRead, responses=WRITE_ERRORS)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> TaskRead:
    """Update a task within the caller's capabilities."""
    task = await task_service.update_task(records, ctx, task_id, payload)
    return task_service.to_read(task, ctx, await list_identities(records))


@router.delete("/{task_id}", response_model=OkResponse, responses=WRITE_ERRORS)
async def delete_task(
    task_id: str,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> OkResponse:
    """Delete a task created by the caller."""
    await task_service.delete_task(records, ctx, task_id)
    return OkResponse()
