"""Reusable FastAPI dependencies for caller sessions and outbound clients.

Every route that acts on behalf of a caller composes from `SESSION_CONTEXT_DEP`
(or `ADMIN_CONTEXT_DEP`) and `CALLER_RECORDS_DEP`, so record-store requests run
under the caller's own access token and the store's row policies apply.
"""

from __future__ import annotations

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from teamdesk.core.config import settings
from teamdesk.db.http import get_http_client
from teamdesk.db.record_client import RecordClient
from teamdesk.services.auth_provider import AuthProviderClient
from teamdesk.services.session_store import SessionContext, SessionStore

security = HTTPBearer(auto_error=False)
SECURITY_DEP = Depends(security)
HTTP_CLIENT_DEP = Depends(get_http_client)


def get_record_client(http: httpx.AsyncClient = HTTP_CLIENT_DEP) -> RecordClient:
    """Anonymous record-store client; callers attach a token per request."""
    return RecordClient(http)


def get_auth_provider(http: httpx.AsyncClient = HTTP_CLIENT_DEP) -> AuthProviderClient:
    return AuthProviderClient(http)


RECORDS_DEP = Depends(get_record_client)
AUTH_PROVIDER_DEP = Depends(get_auth_provider)


def get_session_store(
    auth: AuthProviderClient = AUTH_PROVIDER_DEP,
    records: RecordClient = RECORDS_DEP,
) -> SessionStore:
    return SessionStore(auth=auth, records=records)


SESSION_STORE_DEP = Depends(get_session_store)


async def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = SECURITY_DEP,
    store: SessionStore = SESSION_STORE_DEP,
) -> SessionContext:
    """Resolve the bearer token into the caller's session, or 401."""
    if credentials is None or not credentials.credentials.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return await store.resolve(credentials.credentials.strip())


SESSION_CONTEXT_DEP = Depends(get_session_context)


def require_admin(ctx: SessionContext = SESSION_CONTEXT_DEP) -> SessionContext:
    """Require a caller whose profile role is an admin role."""
    if not ctx.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return ctx


ADMIN_CONTEXT_DEP = Depends(require_admin)


def get_caller_records(
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = RECORDS_DEP,
) -> RecordClient:
    """Record-store client running under the caller's access token."""
    return records.with_access_token(ctx.access_token)


def get_admin_records(
    _: SessionContext = ADMIN_CONTEXT_DEP,
    records: RecordClient = RECORDS_DEP,
) -> RecordClient:
    """Record-store client running under the service key, for admins only."""
    service_key = settings.record_store_service_key.strip()
    if not service_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "code": "service_key_missing",
                "message": "User administration is not configured.",
            },
        )
    return records.with_access_token(service_key)


CALLER_RECORDS_DEP = Depends(get_caller_records)
ADMIN_RECORDS_DEP = Depends(get_admin_records)
