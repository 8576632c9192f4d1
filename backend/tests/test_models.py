# ruff: noqa: INP001
"""Row decoding for identities, tasks, and projects."""

from __future__ import annotations

from teamdesk.models.identities import Identity
from teamdesk.models.projects import Project
from teamdesk.models.tasks import Task
from teamdesk.services.editing import decode_rows


def test_task_row_ids_are_canonical_strings() -> None:
    task = Task.from_row(
        {
            "id": 5,
            "created_by": 9.0,
            "project_id": "",
            "assigned_to": "[1, 2]",
            "due_date": "2025-03-31T00:00:00+00:00",
        },
    )
    assert task.id == "5"
    assert task.created_by == "9"
    assert task.project_id is None
    assert task.assigned_to == ["1", "2"]
    assert task.due_date == "2025-03-31"


def test_task_blank_fields_fall_back_to_defaults() -> None:
    task = Task.from_row({"id": "1", "title": None, "status": "", "priority": None})
    assert task.title == ""
    assert task.status == "todo"
    assert task.priority == "medium"


def test_task_malformed_assignees_are_flagged() -> None:
    task = Task.from_row({"id": "1", "assigned_to": "[broken"})
    assert task.assigned_to == ["[broken"]
    flagged = Task.from_row({"id": "1", "assigned_to": "[broken]"})
    assert flagged.assigned_to == []
    assert flagged.assigned_to_format_error is True


def test_task_unknown_status_is_kept() -> None:
    assert Task.from_row({"id": "1", "status": "done"}).status == "done"


def test_project_reads_legacy_member_column() -> None:
    project = Project.from_row({"id": "1", "teammembers": '["4","5"]'})
    assert project.team_members == ["4", "5"]


def test_project_prefers_current_member_column() -> None:
    project = Project.from_row({"id": "1", "team_members": ["1"], "teammembers": ["2"]})
    assert project.team_members == ["1"]


def test_project_progress_is_not_range_checked_on_read() -> None:
    assert Project.from_row({"id": "1", "progress": 140}).progress == 140
    assert Project.from_row({"id": "1", "progress": 33.6}).progress == 34
    assert Project.from_row({"id": "1", "progress": None}).progress == 0


def test_identity_missing_name_is_blank() -> None:
    identity = Identity.from_row({"id": 3, "auth_id": "abc", "name": None})
    assert identity.id == "3"
    assert identity.name == ""


def test_decode_rows_skips_invalid_rows() -> None:
    tasks = decode_rows(Task, [{"id": "1"}, {"title": "no id"}, {"id": "2", "progress": "x"}])
    assert [task.id for task in tasks] == ["1", "2"]
