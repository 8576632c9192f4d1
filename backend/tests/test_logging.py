# ruff: noqa: INP001
"""Text and JSON log formatting of dotted events with extra fields."""

from __future__ import annotations

import json
import logging

from teamdesk.core.logging import JsonFormatter, TextFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="teamdesk.services.tasks",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="records.update_failed id=%s",
        args=("t1",),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_text_formatter_appends_sorted_extras() -> None:
    line = TextFormatter("%(levelname)s %(message)s").format(_record(status=403, code="x"))
    assert line == "WARNING records.update_failed id=t1 code=x status=403"


def test_text_formatter_without_extras_is_plain() -> None:
    assert TextFormatter("%(message)s").format(_record()) == "records.update_failed id=t1"


def test_json_formatter_emits_one_object() -> None:
    payload = json.loads(JsonFormatter(use_utc=True).format(_record(request_id="abc")))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "teamdesk.services.tasks"
    assert payload["message"] == "records.update_failed id=t1"
    assert payload["request_id"] == "abc"
    assert payload["timestamp"].endswith("+00:00")
