# ruff: noqa: INP001
"""Task endpoints: listing, filters, and creator/assignee-gated writes."""

from __future__ import annotations

import json

import pytest

from fakes import api_client, bearer, seeded_backend


@pytest.mark.asyncio
async def test_list_requires_bearer_token() -> None:
    async with api_client(seeded_backend()) as client:
        response = await client.get("/api/v1/tasks")
    assert response.status_code == 401
    assert response.json()["request_id"]


@pytest.mark.asyncio
async def test_list_resolves_names_and_permissions() -> None:
    async with api_client(seeded_backend()) as client:
        response = await client.get("/api/v1/tasks", headers=bearer("tok-member"))

    assert response.status_code == 200
    body = response.json()
    assert body["stats"] == {"todo": 1, "in_progress": 0, "completed": 1, "total": 2}
    first, second = body["items"]
    assert first["id"] == "t1"
    assert first["assignee_names"] == "Member"
    assert first["permissions"] == {
        "can_fully_edit": False,
        "can_update_limited_fields": True,
        "can_delete": False,
    }
    assert second["assignee_names"] == "Member, Outsider"


@pytest.mark.asyncio
async def test_list_filters_apply_to_items_not_stats() -> None:
    async with api_client(seeded_backend()) as client:
        response = await client.get(
            "/api/v1/tasks",
            params={"status": "all", "priority": "high", "search": "RELEASE"},
            headers=bearer("tok-owner"),
        )

    body = response.json()
    assert [item["id"] for item in body["items"]] == ["t1"]
    assert body["stats"]["total"] == 2


@pytest.mark.asyncio
async def test_create_sets_creator_and_normalizes_assignees() -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        response = await client.post(
            "/api/v1/tasks",
            json={
                "title": "Plan sprint",
                "priority": "low",
                "assigned_to": "2,3",
                "project_id": "",
                "due_date": "2025-03-01",
            },
            headers=bearer("tok-member"),
        )

    assert response.status_code == 201
    body = response.json()
    assert body["created_by"] == "2"
    assert body["assigned_to"] == ["2", "3"]
    assert body["project_id"] is None
    assert body["permissions"]["can_delete"] is True
    stored = backend.rows["tasks"][-1]
    assert stored["title"] == "Plan sprint"
    assert stored["due_date"] == "2025-03-01"


@pytest.mark.asyncio
async def test_create_rejects_unknown_status() -> None:
    async with api_client(seeded_backend()) as client:
        response = await client.post(
            "/api/v1/tasks",
            json={"title": "x", "status": "done", "due_date": "2025-03-01"},
            headers=bearer("tok-owner"),
        )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_assignee_update_only_sends_limited_fields() -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        response = await client.patch(
            "/api/v1/tasks/t1",
            json={"title": "Hijacked", "status": "in-progress", "priority": "low"},
            headers=bearer("tok-member"),
        )

    assert response.status_code == 200
    assert response.json()["title"] == "Write release notes"
    patch = next(r for r in backend.requests if r.method == "PATCH")
    assert set(json.loads(patch.content)) == {"status", "priority", "updated_at"}
    assert backend.rows["tasks"][0]["status"] == "in-progress"


@pytest.mark.asyncio
async def test_creator_update_sends_every_field() -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        response = await client.patch(
            "/api/v1/tasks/t1",
            json={"title": "Release notes v2", "assigned_to": ["3"]},
            headers=bearer("tok-owner"),
        )

    assert response.status_code == 200
    assert response.json()["assignee_names"] == "Outsider"
    assert backend.rows["tasks"][0]["title"] == "Release notes v2"


@pytest.mark.asyncio
async def test_outsider_update_is_refused_before_writing() -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        response = await client.patch(
            "/api/v1/tasks/t1",
            json={"status": "completed"},
            headers=bearer("tok-outsider"),
        )

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "permission_denied"
    assert not any(r.method == "PATCH" for r in backend.requests)


@pytest.mark.asyncio
async def test_write_filtered_by_store_policy_is_403() -> None:
    backend = seeded_backend()
    backend.deny_writes_for.add("tok-member")
    async with api_client(backend) as client:
        response = await client.patch(
            "/api/v1/tasks/t1",
            json={"status": "completed"},
            headers=bearer("tok-member"),
        )

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "write_not_applied"


@pytest.mark.asyncio
async def test_missing_task_is_404() -> None:
    async with api_client(seeded_backend()) as client:
        response = await client.patch(
            "/api/v1/tasks/nope",
            json={"status": "completed"},
            headers=bearer("tok-owner"),
        )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_only_creator_can_delete() -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        refused = await client.delete("/api/v1/tasks/t1", headers=bearer("tok-member"))
        deleted = await client.delete("/api/v1/tasks/t1", headers=bearer("tok-owner"))

    assert refused.status_code == 403
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True}
    assert [row["id"] for row in backend.rows["tasks"]] == ["t2"]


@pytest.mark.asyncio
async def test_read_failure_yields_empty_list() -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        backend.fail_reads = True
        response = await client.get("/api/v1/tasks", headers=bearer("tok-owner"))

    assert response.status_code == 200
    assert response.json()["items"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("assigned_to", ["[1,,2]", {"id": "2"}])
async def test_malformed_assignees_are_rejected_without_writing(assigned_to: object) -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        response = await client.patch(
            "/api/v1/tasks/t1",
            json={"assigned_to": assigned_to},
            headers=bearer("tok-owner"),
        )

    assert response.status_code == 422
    assert not any(r.method == "PATCH" for r in backend.requests)
    assert backend.rows["tasks"][0]["assigned_to"] == '["2"]'


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "status", "priority", "description"])
async def test_explicit_null_for_required_column_is_rejected(field: str) -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        response = await client.patch(
            "/api/v1/tasks/t1",
            json={field: None},
            headers=bearer("tok-owner"),
        )

    assert response.status_code == 422
    assert not any(r.method == "PATCH" for r in backend.requests)


@pytest.mark.asyncio
async def test_null_project_and_assignees_clear_the_task() -> None:
    backend = seeded_backend()
    async with api_client(backend) as client:
        response = await client.patch(
            "/api/v1/tasks/t1",
            json={"project_id": None, "assigned_to": None},
            headers=bearer("tok-owner"),
        )

    assert response.status_code == 200
    assert response.json()["assigned_to"] == []
    assert response.json()["assignee_names"] == "Unassigned"
