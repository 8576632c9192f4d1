"""Sign-in lifecycle and the explicit per-caller session context.

A `SessionContext` is created on sign-in (or resolved again from the access
token on later requests) and handed to every service call that needs to know
who is acting. Nothing about the current caller is kept in module state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from pydantic import ValidationError

from teamdesk.core.config import settings
from teamdesk.core.logging import get_logger
from teamdesk.db.collections import Collection
from teamdesk.db.record_client import RecordStoreError
from teamdesk.models.identities import Identity
from teamdesk.services.auth_provider import AuthProviderError, AuthUser

if TYPE_CHECKING:
    from teamdesk.db.record_client import RecordClient
    from teamdesk.services.auth_provider import AuthProviderClient

logger = get_logger(__name__)
INVALID_CREDENTIALS = "Invalid email or password"
FALLBACK_NAME = "User"


@dataclass(frozen=True)
class SessionContext:
    """Authenticated caller: access token, auth account, and profile row."""

    access_token: str
    auth_user: AuthUser
    profile: Identity
    profile_is_fallback: bool = False
    admin_roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def identity_id(self) -> str:
        """Id compared against `created_by` and member sets."""
        return self.profile.id

    @property
    def is_admin(self) -> bool:
        return bool(self.profile.role) and self.profile.role in self.admin_roles


def fallback_profile(auth_user: AuthUser) -> Identity:
    """Profile used when the account has no `users` row yet."""
    metadata_name = auth_user.user_metadata.get("name")
    if isinstance(metadata_name, str) and metadata_name.strip():
        name = metadata_name.strip()
    elif auth_user.email:
        name = auth_user.email.split("@", maxsplit=1)[0]
    else:
        name = FALLBACK_NAME
    return Identity(
        id=auth_user.id,
        auth_id=auth_user.id,
        name=name,
        email=auth_user.email,
        role=settings.default_profile_role,
        department="",
        avatar=None,
    )


class SessionStore:
    """Creates, resolves, and ends caller sessions."""

    def __init__(self, *, auth: AuthProviderClient, records: RecordClient) -> None:
        self._auth = auth
        self._records = records

    async def _load_profile(self, auth_user: AuthUser, access_token: str) -> tuple[Identity, bool]:
        records = self._records.with_access_token(access_token)
        try:
            row = await records.get_by(Collection.USERS, "auth_id", auth_user.id)
        except RecordStoreError:
            logger.exception("session.profile.fetch_failed auth_id=%s", auth_user.id[-6:])
            row = None
        if row is not None:
            try:
                return Identity.from_row(row), False
            except ValidationError:
                logger.warning("session.profile.invalid_row auth_id=%s", auth_user.id[-6:])
        logger.info("session.profile.fallback auth_id=%s", auth_user.id[-6:])
        return fallback_profile(auth_user), True

    def _context(
        self,
        *,
        access_token: str,
        auth_user: AuthUser,
        profile: Identity,
        is_fallback: bool,
    ) -> SessionContext:
        return SessionContext(
            access_token=access_token,
            auth_user=auth_user,
            profile=profile,
            profile_is_fallback=is_fallback,
            admin_roles=settings.admin_role_set,
        )

    async def sign_in(self, email: str, password: str) -> SessionContext:
        """Authenticate with email/password and load the caller's profile."""
        try:
            tokens = await self._auth.sign_in(email.strip(), password)
        except AuthProviderError as exc:
            logger.info("session.sign_in.rejected status=%s", exc.status_code)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=INVALID_CREDENTIALS,
            ) from exc
        profile, is_fallback = await self._load_profile(tokens.user, tokens.access_token)
        logger.info("session.sign_in.ok identity_id=%s", profile.id)
        return self._context(
            access_token=tokens.access_token,
            auth_user=tokens.user,
            profile=profile,
            is_fallback=is_fallback,
        )

    async def resolve(self, access_token: str) -> SessionContext:
        """Rebuild the session context for an access token."""
        try:
            auth_user = await self._auth.get_user(access_token)
        except AuthProviderError as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc
        profile, is_fallback = await self._load_profile(auth_user, access_token)
        return self._context(
            access_token=access_token,
            auth_user=auth_user,
            profile=profile,
            is_fallback=is_fallback,
        )

    async def sign_out(self, context: SessionContext) -> None:
        """End the session; provider failures are logged, not raised."""
        try:
            await self._auth.sign_out(context.access_token)
        except AuthProviderError as exc:
            logger.warning(
                "session.sign_out.provider_failed identity_id=%s status=%s",
                context.identity_id,
                exc.status_code,
            )
        else:
            logger.info("session.sign_out.ok identity_id=%s", context.identity_id)
