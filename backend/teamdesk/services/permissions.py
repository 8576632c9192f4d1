"""Owner/assignee capability evaluation for tasks and projects.

Both entity types share one rule set:

* the creator may edit every field and delete the record,
* members of the assignee/team set may only change a small set of status
  fields,
* anyone may fill in the form for a record that does not exist yet.

This is UX gating only; the record store's row-level policies stay the real
enforcement point.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from teamdesk.core.time import utcnow_iso
from teamdesk.schemas.permissions import PermissionSnapshot
from teamdesk.services.members import contains_member

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from teamdesk.models.projects import Project
    from teamdesk.models.tasks import Task

LIMITED_TASK_FIELDS = ("status", "priority")
LIMITED_PROJECT_FIELDS = ("status", "progress")


def _same_id(left: object, right: object) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def evaluate_capabilities(
    current_id: object,
    *,
    exists: bool,
    created_by: object = None,
    members: object = None,
) -> PermissionSnapshot:
    """Derive edit/delete capabilities from creator and member set."""
    is_creator = exists and _same_id(current_id, created_by)
    return PermissionSnapshot(
        can_fully_edit=(not exists) or is_creator,
        can_update_limited_fields=exists and contains_member(members, current_id),
        can_delete=is_creator,
    )


def evaluate_task_permissions(current_id: object, task: Task | None) -> PermissionSnapshot:
    """Capabilities on a task; `None` means creation mode."""
    if task is None:
        return evaluate_capabilities(current_id, exists=False)
    return evaluate_capabilities(
        current_id,
        exists=True,
        created_by=task.created_by,
        members=task.assigned_to,
    )


def evaluate_project_permissions(
    current_id: object,
    project: Project | None,
) -> PermissionSnapshot:
    """Capabilities on a project; `None` means creation mode."""
    if project is None:
        return evaluate_capabilities(current_id, exists=False)
    return evaluate_capabilities(
        current_id,
        exists=True,
        created_by=project.created_by,
        members=project.team_members,
    )


def build_update_payload(
    snapshot: PermissionSnapshot,
    values: Mapping[str, object],
    *,
    limited_fields: Iterable[str],
) -> dict[str, object]:
    """Scope an update payload to the fields the snapshot allows.

    Limited-only actors get just `limited_fields`; every other submitted key is
    dropped so stale form values cannot overwrite fields they may not change.
    Raises `PermissionError` when no write is allowed at all.
    """
    if not snapshot.can_submit:
        msg = "No write access to this record"
        raise PermissionError(msg)
    if snapshot.limited_only:
        allowed = set(limited_fields)
        payload = {key: value for key, value in values.items() if key in allowed}
    else:
        payload = dict(values)
    payload["updated_at"] = utcnow_iso()
    return payload
