# ruff: noqa: INP001
"""Application wiring: probes and versioned routes."""

from __future__ import annotations

from fastapi.testclient import TestClient

from teamdesk.core.error_handling import REQUEST_ID_HEADER
from teamdesk.main import app


def test_probes_report_ok() -> None:
    client = TestClient(app)
    for path in ("/health", "/healthz", "/readyz"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert response.headers.get(REQUEST_ID_HEADER)


def test_api_routes_are_versioned() -> None:
    paths = {route.path for route in app.routes}
    assert {
        "/api/v1/auth/sign-in",
        "/api/v1/tasks",
        "/api/v1/tasks/{task_id}",
        "/api/v1/projects/{project_id}",
        "/api/v1/users/me",
        "/api/v1/dashboard",
        "/api/v1/reports",
        "/api/v1/team",
    } <= paths


def test_openapi_schema_builds() -> None:
    schema = TestClient(app).get("/openapi.json").json()
    assert schema["info"]["title"] == "Team Desk API"
    assert "TaskRead" in schema["components"]["schemas"]
