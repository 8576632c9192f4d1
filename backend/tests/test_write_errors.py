# ruff: noqa: INP001
"""User-facing messages and HTTP mapping for failed writes."""

from __future__ import annotations

import pytest

from teamdesk.db.record_client import EmptyWriteResult, RecordStoreError, RecordStoreUnavailable
from teamdesk.services.write_errors import (
    describe_write_error,
    is_permission_error,
    write_error_to_http,
)


@pytest.mark.parametrize(
    "error",
    [
        RecordStoreError("boom", code="PGRST116"),
        RecordStoreError("new row violates row-level security policy"),
        RecordStoreError("Permission denied for table tasks"),
        RecordStoreError("nope", status_code=403),
        EmptyWriteResult("No row was updated"),
    ],
)
def test_permission_like_errors(error: RecordStoreError) -> None:
    assert is_permission_error(error) is True


def test_plain_rejection_is_not_permission_related() -> None:
    error = RecordStoreError("duplicate key", status_code=409, code="23505")
    assert is_permission_error(error) is False
    assert describe_write_error(error, entity="task") == "Error while saving the task: duplicate key"


def test_message_falls_back_to_details_then_hint() -> None:
    assert describe_write_error(RecordStoreError(details="bad date"), entity="task").endswith(
        ": bad date",
    )
    assert describe_write_error(RecordStoreError(hint="try again"), entity="task").endswith(
        ": try again",
    )
    assert describe_write_error(RecordStoreError(), entity="task").endswith(": Unknown error")


def test_permission_hint_is_appended() -> None:
    message = describe_write_error(RecordStoreError("x", code="PGRST116"), entity="project")
    assert "permissions problem" in message
    assert "member of this project" in message


def test_http_mapping() -> None:
    empty = write_error_to_http(EmptyWriteResult("No row was updated"), entity="task")
    assert empty.status_code == 403
    assert empty.detail["code"] == "write_not_applied"

    denied = write_error_to_http(RecordStoreError("policy"), entity="task")
    assert (denied.status_code, denied.detail["code"]) == (403, "permission_denied")

    down = write_error_to_http(RecordStoreUnavailable("timeout"), entity="task")
    assert (down.status_code, down.detail["code"]) == (503, "record_store_unavailable")

    rejected = write_error_to_http(RecordStoreError("bad", status_code=400), entity="task")
    assert (rejected.status_code, rejected.detail["code"]) == (502, "write_rejected")
