# ruff: noqa: INP001
"""Auth provider client requests and error handling."""

from __future__ import annotations

import json

import httpx
import pytest

from teamdesk.db.http import build_http_client
from teamdesk.services.auth_provider import AuthProviderClient, AuthProviderError, AuthUser


def _provider(handler, *, service_key: str | None = None) -> tuple[AuthProviderClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = build_http_client(transport=httpx.MockTransport(_record))
    return AuthProviderClient(http, service_key=service_key), seen


@pytest.mark.asyncio
async def test_sign_in_posts_password_grant() -> None:
    payload = {
        "access_token": "tok",
        "refresh_token": "ref",
        "expires_in": 3600,
        "user": {"id": "a1", "email": "a@example.com", "user_metadata": {"name": "A"}},
    }
    provider, seen = _provider(lambda _: httpx.Response(200, json=payload))

    tokens = await provider.sign_in("a@example.com", "pw")

    assert tokens.access_token == "tok"
    assert tokens.user == AuthUser(id="a1", email="a@example.com", user_metadata={"name": "A"})
    assert tokens.expires_in == 3600
    assert seen[0].url.path == "/auth/v1/token"
    assert seen[0].url.params["grant_type"] == "password"
    assert json.loads(seen[0].content) == {"email": "a@example.com", "password": "pw"}


@pytest.mark.asyncio
async def test_sign_in_rejection_uses_provider_message() -> None:
    provider, _ = _provider(
        lambda _: httpx.Response(400, json={"error_description": "Invalid login credentials"}),
    )
    with pytest.raises(AuthProviderError) as exc_info:
        await provider.sign_in("a@example.com", "bad")
    assert exc_info.value.message == "Invalid login credentials"
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_get_user_sends_bearer() -> None:
    provider, seen = _provider(lambda _: httpx.Response(200, json={"id": "a1", "email": ""}))
    user = await provider.get_user("tok")
    assert user.id == "a1"
    assert user.email is None
    assert seen[0].headers["Authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_admin_calls_require_service_key() -> None:
    provider, seen = _provider(lambda _: httpx.Response(200, json={}), service_key="")
    with pytest.raises(AuthProviderError, match="RECORD_STORE_SERVICE_KEY"):
        await provider.admin_delete_user("a1")
    assert seen == []


@pytest.mark.asyncio
async def test_admin_create_user_confirms_email() -> None:
    provider, seen = _provider(
        lambda _: httpx.Response(200, json={"id": "new", "email": "n@example.com"}),
        service_key="svc",
    )
    user = await provider.admin_create_user(email="n@example.com", password="secret1")
    assert user.id == "new"
    body = json.loads(seen[0].content)
    assert body["email_confirm"] is True
    assert seen[0].headers["Authorization"] == "Bearer svc"
    assert seen[0].url.path == "/auth/v1/admin/users"


@pytest.mark.asyncio
async def test_transport_failure_has_no_status() -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    provider, _ = _provider(_fail)
    with pytest.raises(AuthProviderError) as exc_info:
        await provider.sign_out("tok")
    assert exc_info.value.status_code is None
