"""Project listing and permission-gated writes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from teamdesk.db.collections import Collection
from teamdesk.models.projects import Project
from teamdesk.schemas.projects import ProjectRead
from teamdesk.services.editing import (
    EditableCollection,
    create_record,
    delete_record,
    fetch_all,
    update_record,
)
from teamdesk.services.members import FORMAT_ERROR_LABEL, format_member_names
from teamdesk.services.permissions import LIMITED_PROJECT_FIELDS, evaluate_project_permissions

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from teamdesk.db.record_client import RecordClient
    from teamdesk.models.identities import Identity
    from teamdesk.schemas.projects import ProjectCreate, ProjectUpdate
    from teamdesk.services.session_store import SessionContext

PROJECTS = EditableCollection(
    collection=Collection.PROJECTS,
    model=Project,
    label="project",
    limited_fields=LIMITED_PROJECT_FIELDS,
    evaluate=evaluate_project_permissions,
)


async def list_projects(records: RecordClient) -> list[Project]:
    """All projects, newest first."""
    return await fetch_all(records, Collection.PROJECTS, Project)


def member_names(project: Project, identities: Iterable[Identity]) -> str:
    if project.team_members_format_error:
        return FORMAT_ERROR_LABEL
    return format_member_names(project.team_members, identities)


def to_read(
    project: Project,
    ctx: SessionContext,
    identities: Sequence[Identity],
) -> ProjectRead:
    """Build the API payload for one project as seen by the caller."""
    return ProjectRead(
        **project.model_dump(exclude={"team_members_format_error"}),
        member_names=member_names(project, identities),
        permissions=evaluate_project_permissions(ctx.identity_id, project),
    )


async def create_project(
    records: RecordClient,
    ctx: SessionContext,
    payload: ProjectCreate,
) -> Project:
    return await create_record(records, ctx, PROJECTS, payload.model_dump(mode="json"))


async def update_project(
    records: RecordClient,
    ctx: SessionContext,
    project_id: str,
    payload: ProjectUpdate,
) -> Project:
    """Update a project; team members only get status/progress changes applied."""
    values = payload.model_dump(mode="json", exclude_unset=True)
    return await update_record(records, ctx, PROJECTS, project_id, values)


async def delete_project(records: RecordClient, ctx: SessionContext, project_id: str) -> None:
    await delete_record(records, ctx, PROJECTS, project_id)
