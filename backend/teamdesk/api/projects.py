"""Project list and permission-gated project edit endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from teamdesk.api.deps import CALLER_RECORDS_DEP, SESSION_CONTEXT_DEP
from teamdesk.db.record_client import RecordClient
from teamdesk.schemas.common import OkResponse
from teamdesk.schemas.errors import ErrorResponse
from teamdesk.schemas.projects import ProjectCreate, ProjectListRead, ProjectRead, ProjectUpdate
from teamdesk.services import projects as project_service
from teamdesk.services.reports import project_breakdown
from teamdesk.services.session_store import SessionContext
from teamdesk.services.users import list_identities

router = APIRouter(prefix="/projects", tags=["projects"])
WRITE_ERRORS = {
    status.HTTP_403_FORBIDDEN: {
        "model": ErrorResponse,
        "description": "Caller may not change this project, or the store refused the write.",
    },
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Project not found."},
}


@router.get("", response_model=ProjectListRead)
async def list_projects(
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> ProjectListRead:
    """List projects newest first with status counts and mean progress."""
    projects = await project_service.list_projects(records)
    identities = await list_identities(records)
    return ProjectListRead(
        items=[project_service.to_read(project, ctx, identities) for project in projects],
        summary=project_breakdown(projects),
    )


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
)
async def create_project(
    payload: ProjectCreate,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> ProjectRead:
    """Create a project owned by the caller."""
    project = await project_service.create_project(records, ctx, payload)
    return project_service.to_read(project, ctx, await list_identities(records))


@router.patch("/{project_id}", response_model=ProjectRead, responses=WRITE_ERRORS)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> ProjectRead:
    """Update a project within the caller's capabilities."""
    project = await project_service.update_project(records, ctx, project_id, payload)
    return project_service.to_read(project, ctx, await list_identities(records))


@router.delete("/{project_id}", response_model=OkResponse, responses=WRITE_ERRORS)
async def delete_project(
    project_id: str,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> OkResponse:
    """Delete a project created by the caller."""
    await project_service.delete_project(records, ctx, project_id)
    return OkResponse()
