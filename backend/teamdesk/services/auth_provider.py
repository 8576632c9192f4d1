"""Client for the record store's password authentication API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from teamdesk.core.config import settings
from teamdesk.core.logging import get_logger

logger = get_logger(__name__)
AUTH_PATH = "/auth/v1"


class AuthProviderError(Exception):
    """The authentication provider rejected a request or was unreachable."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class AuthUser:
    """Auth-provider account (distinct from the `users` profile row)."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AuthUser:
        metadata = payload.get("user_metadata")
        email = payload.get("email")
        return cls(
            id=str(payload.get("id", "")),
            email=email if isinstance(email, str) and email else None,
            user_metadata=metadata if isinstance(metadata, dict) else {},
        )


@dataclass(frozen=True)
class AuthTokens:
    """Tokens issued by a successful password sign-in."""

    access_token: str
    user: AuthUser
    refresh_token: str | None = None
    expires_in: int | None = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return f"HTTP {response.status_code}"


class AuthProviderClient:
    """Sign-in, sign-out, and admin account operations."""

    def __init__(self, http: httpx.AsyncClient, *, service_key: str | None = None) -> None:
        self._http = http
        self._service_key = (
            service_key if service_key is not None else settings.record_store_service_key
        ).strip()

    async def _call(
        self,
        method: str,
        path: str,
        *,
        bearer: str | None = None,
        json: object = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        headers: dict[str, str] = {}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        try:
            response = await self._http.request(
                method,
                f"{AUTH_PATH}{path}",
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "auth_provider.transport_failed path=%s error_type=%s",
                path,
                exc.__class__.__name__,
            )
            raise AuthProviderError("Authentication service unavailable") from exc
        if response.status_code >= 400:
            raise AuthProviderError(_error_message(response), status_code=response.status_code)
        if not response.content:
            return {}
        body = response.json()
        return body if isinstance(body, dict) else {}

    def _require_service_key(self) -> str:
        if not self._service_key:
            msg = "RECORD_STORE_SERVICE_KEY is required for user administration"
            raise AuthProviderError(msg)
        return self._service_key

    async def sign_in(self, email: str, password: str) -> AuthTokens:
        """Exchange email and password for an access token."""
        body = await self._call(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        token = body.get("access_token")
        user = body.get("user")
        if not isinstance(token, str) or not token or not isinstance(user, dict):
            raise AuthProviderError("Sign-in response did not include a session")
        expires_in = body.get("expires_in")
        refresh_token = body.get("refresh_token")
        return AuthTokens(
            access_token=token,
            user=AuthUser.from_payload(user),
            refresh_token=refresh_token if isinstance(refresh_token, str) else None,
            expires_in=expires_in if isinstance(expires_in, int) else None,
        )

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        await self._call("POST", "/logout", bearer=access_token)

    async def get_user(self, access_token: str) -> AuthUser:
        """Resolve the account owning an access token."""
        body = await self._call("GET", "/user", bearer=access_token)
        if not body.get("id"):
            raise AuthProviderError("Session is not valid", status_code=401)
        return AuthUser.from_payload(body)

    async def update_password(self, access_token: str, password: str) -> None:
        """Self-service password change for the token's owner."""
        await self._call("PUT", "/user", bearer=access_token, json={"password": password})

    async def admin_create_user(
        self,
        *,
        email: str,
        password: str,
        user_metadata: dict[str, Any] | None = None,
    ) -> AuthUser:
        """Create a confirmed account with the service key."""
        body = await self._call(
            "POST",
            "/admin/users",
            bearer=self._require_service_key(),
            json={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": user_metadata or {},
            },
        )
        if not body.get("id"):
            raise AuthProviderError("Account creation did not return a user id")
        return AuthUser.from_payload(body)

    async def admin_update_password(self, auth_id: str, password: str) -> None:
        """Set another account's password with the service key."""
        await self._call(
            "PUT",
            f"/admin/users/{auth_id}",
            bearer=self._require_service_key(),
            json={"password": password},
        )

    async def admin_delete_user(self, auth_id: str) -> None:
        """Delete an account with the service key."""
        await self._call(
            "DELETE",
            f"/admin/users/{auth_id}",
            bearer=self._require_service_key(),
        )
