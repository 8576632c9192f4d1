"""Team member profiles: listing, self-service edits, and admin management.

Admin operations touch two systems: the auth provider account (created,
re-keyed, or deleted with the service key) and the matching `users` profile
row. The account is handled first so a failed account call never leaves an
orphan profile behind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from pydantic import ValidationError

from teamdesk.core.logging import get_logger
from teamdesk.core.time import utcnow_iso
from teamdesk.db.collections import Collection
from teamdesk.db.record_client import RecordStoreError
from teamdesk.models.identities import Identity
from teamdesk.schemas.users import UserRead
from teamdesk.services.auth_provider import AuthProviderError
from teamdesk.services.editing import fetch_all, settle
from teamdesk.services.write_errors import write_error_to_http

if TYPE_CHECKING:
    from teamdesk.db.record_client import RecordClient
    from teamdesk.schemas.users import ProfileUpdate, UserAdminUpdate, UserCreate
    from teamdesk.services.auth_provider import AuthProviderClient
    from teamdesk.services.session_store import SessionContext

logger = get_logger(__name__)
ENTITY = "profile"


async def list_identities(records: RecordClient) -> list[Identity]:
    """All profiles, newest first."""
    return await fetch_all(records, Collection.USERS, Identity)


def to_read(identity: Identity) -> UserRead:
    return UserRead.model_validate(identity, from_attributes=True)


def _auth_error_to_http(error: AuthProviderError) -> HTTPException:
    if error.status_code is None:
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "auth_provider_unavailable", "message": error.message},
        )
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": "auth_provider_rejected", "message": error.message},
    )


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _decode(row: dict[str, object]) -> Identity:
    try:
        return Identity.from_row(row)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": "invalid_profile_row", "message": "Stored profile is invalid"},
        ) from exc


async def update_own_profile(
    records: RecordClient,
    auth: AuthProviderClient,
    ctx: SessionContext,
    payload: ProfileUpdate,
) -> Identity:
    """Edit the caller's own profile and optionally change their password.

    Callers still on a fallback profile get a `users` row created for them.
    """
    values: dict[str, object] = {
        "name": payload.name.strip(),
        "role": _clean(payload.role),
        "department": _clean(payload.department),
        "avatar": _clean(payload.avatar),
        "updated_at": utcnow_iso(),
    }
    try:
        if ctx.profile_is_fallback:
            row = await records.insert(
                Collection.USERS,
                {
                    **values,
                    "auth_id": ctx.auth_user.id,
                    "email": ctx.auth_user.email,
                    "created_at": values["updated_at"],
                },
            )
        else:
            row = await records.update(Collection.USERS, ctx.identity_id, values)
    except RecordStoreError as exc:
        raise write_error_to_http(exc, entity=ENTITY) from exc

    if payload.password:
        try:
            await auth.update_password(ctx.access_token, payload.password)
        except AuthProviderError as exc:
            logger.warning(
                "users.password_update_failed identity_id=%s status=%s",
                ctx.identity_id,
                exc.status_code,
            )
            raise _auth_error_to_http(exc) from exc
    await settle()
    logger.info(
        "users.profile.updated identity_id=%s created=%s password_changed=%s",
        ctx.identity_id,
        ctx.profile_is_fallback,
        bool(payload.password),
    )
    return _decode(row)


async def create_user(
    admin_records: RecordClient,
    auth: AuthProviderClient,
    payload: UserCreate,
) -> Identity:
    """Create an auth account and its profile row."""
    email = payload.email.strip()
    name = payload.name.strip()
    if not email or not name:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT)
    avatar = _clean(payload.avatar)
    try:
        auth_user = await auth.admin_create_user(
            email=email,
            password=payload.password,
            user_metadata={
                "name": name,
                "role": payload.role.strip(),
                "department": payload.department.strip(),
                "avatar": avatar,
            },
        )
    except AuthProviderError as exc:
        logger.warning("users.admin_create.account_failed status=%s", exc.status_code)
        raise _auth_error_to_http(exc) from exc

    now = utcnow_iso()
    try:
        row = await admin_records.insert(
            Collection.USERS,
            {
                "auth_id": auth_user.id,
                "name": name,
                "email": email,
                "role": payload.role.strip(),
                "department": payload.department.strip(),
                "avatar": avatar,
                "created_at": now,
                "updated_at": now,
            },
        )
    except RecordStoreError as exc:
        logger.warning("users.admin_create.profile_failed auth_id=%s", auth_user.id[-6:])
        raise write_error_to_http(exc, entity=ENTITY) from exc
    await settle()
    identity = _decode(row)
    logger.info("users.admin_create.ok identity_id=%s", identity.id)
    return identity


async def _load_identity(records: RecordClient, user_id: str) -> Identity:
    try:
        row = await records.get(Collection.USERS, user_id)
    except RecordStoreError as exc:
        raise write_error_to_http(exc, entity=ENTITY) from exc
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _decode(row)


async def update_user(
    admin_records: RecordClient,
    auth: AuthProviderClient,
    user_id: str,
    payload: UserAdminUpdate,
) -> Identity:
    """Admin edit of a profile; the password changes only for linked accounts."""
    existing = await _load_identity(admin_records, user_id)
    try:
        row = await admin_records.update(
            Collection.USERS,
            user_id,
            {
                "name": payload.name.strip(),
                "role": payload.role.strip(),
                "department": payload.department.strip(),
                "avatar": _clean(payload.avatar),
                "updated_at": utcnow_iso(),
            },
        )
    except RecordStoreError as exc:
        raise write_error_to_http(exc, entity=ENTITY) from exc

    if payload.password and existing.auth_id:
        try:
            await auth.admin_update_password(existing.auth_id, payload.password)
        except AuthProviderError as exc:
            logger.warning(
                "users.admin_update.password_failed identity_id=%s status=%s",
                user_id,
                exc.status_code,
            )
            raise _auth_error_to_http(exc) from exc
    await settle()
    logger.info("users.admin_update.ok identity_id=%s", user_id)
    return _decode(row)


async def delete_user(
    admin_records: RecordClient,
    auth: AuthProviderClient,
    ctx: SessionContext,
    user_id: str,
) -> None:
    """Delete a profile row and, when linked, its auth account."""
    existing = await _load_identity(admin_records, user_id)
    if existing.auth_id:
        try:
            await auth.admin_delete_user(existing.auth_id)
        except AuthProviderError as exc:
            logger.warning(
                "users.admin_delete.account_failed identity_id=%s status=%s",
                user_id,
                exc.status_code,
            )
            raise _auth_error_to_http(exc) from exc
    try:
        await admin_records.delete(Collection.USERS, user_id)
    except RecordStoreError as exc:
        raise write_error_to_http(exc, entity=ENTITY) from exc
    await settle()
    logger.info(
        "users.admin_delete.ok identity_id=%s by=%s",
        user_id,
        ctx.identity_id,
    )
