# ruff: noqa

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from starlette.requests import Request

from teamdesk.core import error_handling
from teamdesk.core.error_handling import (
    REQUEST_ID_HEADER,
    _error_payload,
    _get_request_id,
    _http_exception_exception_handler,
    _request_validation_exception_handler,
    _response_validation_exception_handler,
    install_error_handling,
)
from teamdesk.schemas.errors import ErrorResponse


class Payload(BaseModel):
    content: str


class Out(BaseModel):
    name: str = Field(min_length=1)


def _client() -> TestClient:
    app = FastAPI()
    install_error_handling(app)

    @app.get("/needs-int")
    def needs_int(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.put("/needs-object")
    def needs_object(payload: Payload) -> dict[str, str]:
        return {"content": payload.content}

    @app.get("/forbidden")
    def forbidden() -> None:
        raise HTTPException(
            status_code=403,
            detail={"code": "permission_denied", "message": "Not yours."},
        )

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("boom")

    @app.get("/bad", response_model=Out)
    def bad() -> dict[str, str]:
        return {"name": ""}

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return TestClient(app, raise_server_exceptions=False)


def _assert_request_id(resp) -> dict[str, object]:
    body = resp.json()
    assert isinstance(body.get("request_id"), str) and body["request_id"]
    assert resp.headers.get(REQUEST_ID_HEADER) == body["request_id"]
    return body


def test_request_validation_error_includes_request_id():
    resp = _client().get("/needs-int?limit=abc")

    assert resp.status_code == 422
    assert isinstance(_assert_request_id(resp)["detail"], list)


def test_request_validation_error_handles_bytes_input_without_500():
    resp = _client().put(
        "/needs-object",
        content=b"plain-text-body",
        headers={"content-type": "text/plain"},
    )

    assert resp.status_code == 422
    assert isinstance(_assert_request_id(resp)["detail"], list)


def test_structured_http_detail_is_kept():
    resp = _client().get("/forbidden")

    assert resp.status_code == 403
    body = _assert_request_id(resp)
    assert body["detail"]["code"] == "permission_denied"
    assert ErrorResponse.model_validate(body).request_id == body["request_id"]


def test_unhandled_exception_returns_500_with_request_id():
    resp = _client().get("/boom")

    assert resp.status_code == 500
    assert _assert_request_id(resp)["detail"] == "Internal Server Error"


def test_response_validation_error_returns_500_with_request_id():
    resp = _client().get("/bad")

    assert resp.status_code == 500
    assert _assert_request_id(resp)["detail"] == "Internal Server Error"


def test_client_provided_request_id_is_preserved():
    resp = _client().get("/needs-int?limit=abc", headers={REQUEST_ID_HEADER: "  req-123  "})

    assert resp.json()["request_id"] == "req-123"
    assert resp.headers.get(REQUEST_ID_HEADER) == "req-123"


def test_slow_request_emits_slow_log(monkeypatch: pytest.MonkeyPatch) -> None:
    warnings: list[tuple[str, dict[str, object]]] = []

    def _fake_warning(message: str, *args: object, **kwargs: object) -> None:
        extra = kwargs.get("extra")
        warnings.append((message, extra if isinstance(extra, dict) else {}))

    perf_ticks = iter((100.0, 100.2))
    monkeypatch.setattr(error_handling.settings, "request_log_slow_ms", 1)
    monkeypatch.setattr(error_handling, "perf_counter", lambda: next(perf_ticks))
    monkeypatch.setattr(error_handling.logger, "warning", _fake_warning)

    resp = _client().get("/needs-int?limit=1")

    assert resp.status_code == 200
    assert any(
        message == "http.request.slow" and extra.get("slow_threshold_ms") == 1
        for message, extra in warnings
    )


def test_health_route_skips_request_logs_when_disabled(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setattr(error_handling.settings, "request_log_include_health", False)

    with caplog.at_level(logging.INFO, logger=error_handling.logger.name):
        resp = _client().get("/healthz")

    assert resp.status_code == 200
    assert isinstance(resp.headers.get(REQUEST_ID_HEADER), str)
    assert not [r for r in caplog.records if r.getMessage().startswith("http.request")]


def test_get_request_id_returns_none_for_missing_or_invalid_state() -> None:
    for state in ({}, {"request_id": 123}, {"request_id": ""}):
        req = Request({"type": "http", "headers": [], "state": state})
        assert _get_request_id(req) is None


def test_error_payload_omits_request_id_when_none() -> None:
    assert _error_payload(detail="x", request_id=None) == {"detail": "x"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("handler", "expected"),
    [
        (_request_validation_exception_handler, "Expected RequestValidationError"),
        (_response_validation_exception_handler, "Expected ResponseValidationError"),
        (_http_exception_exception_handler, "Expected StarletteHTTPException"),
    ],
)
async def test_handlers_reject_wrong_exception_type(handler, expected: str) -> None:
    req = Request({"type": "http", "headers": [], "state": {}})
    with pytest.raises(TypeError, match=expected):
        await handler(req, Exception("x"))


def test_json_safe_covers_bytes_nested_and_fallback_str() -> None:
    assert error_handling._json_safe(b"\xff") == "\ufffd"
    assert error_handling._json_safe(bytearray(b"\xff")) == "\ufffd"
    assert error_handling._json_safe(memoryview(b"\xff")) == "\ufffd"
    assert error_handling._json_safe({"k": (b"a", 1)}) == {"k": ["a", 1]}

    class Weird:
        def __str__(self) -> str:
            return "weird"

    assert error_handling._json_safe(Weird()) == "weird"
