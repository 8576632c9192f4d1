"""Team directory, self-service profile, and admin user management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from teamdesk.api.deps import (
    ADMIN_CONTEXT_DEP,
    ADMIN_RECORDS_DEP,
    AUTH_PROVIDER_DEP,
    CALLER_RECORDS_DEP,
    SESSION_CONTEXT_DEP,
)
from teamdesk.db.record_client import RecordClient
from teamdesk.schemas.common import OkResponse
from teamdesk.schemas.users import ProfileUpdate, UserAdminUpdate, UserCreate, UserRead
from teamdesk.services import users as user_service
from teamdesk.services.auth_provider import AuthProviderClient
from teamdesk.services.session_store import SessionContext

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(
    _: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> list[UserRead]:
    """List every profile, newest first."""
    identities = await user_service.list_identities(records)
    return [user_service.to_read(identity) for identity in identities]


@router.patch("/me", response_model=UserRead)
async def update_me(
    payload: ProfileUpdate,
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
    auth: AuthProviderClient = AUTH_PROVIDER_DEP,
) -> UserRead:
    """Edit the caller's own profile."""
    identity = await user_service.update_own_profile(records, auth, ctx, payload)
    return user_service.to_read(identity)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    records: RecordClient = ADMIN_RECORDS_DEP,
    auth: AuthProviderClient = AUTH_PROVIDER_DEP,
) -> UserRead:
    """Create an account and profile (admins only)."""
    identity = await user_service.create_user(records, auth, payload)
    return user_service.to_read(identity)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    payload: UserAdminUpdate,
    records: RecordClient = ADMIN_RECORDS_DEP,
    auth: AuthProviderClient = AUTH_PROVIDER_DEP,
) -> UserRead:
    """Edit another member's profile (admins only)."""
    identity = await user_service.update_user(records, auth, user_id, payload)
    return user_service.to_read(identity)


@router.delete("/{user_id}", response_model=OkResponse)
async def delete_user(
    user_id: str,
    ctx: SessionContext = ADMIN_CONTEXT_DEP,
    records: RecordClient = ADMIN_RECORDS_DEP,
    auth: AuthProviderClient = AUTH_PROVIDER_DEP,
) -> OkResponse:
    """Delete a member's profile and account (admins only)."""
    await user_service.delete_user(records, auth, ctx, user_id)
    return OkResponse()
