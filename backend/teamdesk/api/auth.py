"""Sign-in, sign-out, and current-session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from teamdesk.api.deps import SESSION_CONTEXT_DEP, SESSION_STORE_DEP
from teamdesk.schemas.auth import SessionRead, SignInRequest
from teamdesk.schemas.common import OkResponse
from teamdesk.schemas.errors import ErrorResponse
from teamdesk.services.session_store import SessionContext, SessionStore
from teamdesk.services.users import to_read

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_read(ctx: SessionContext, *, include_token: bool) -> SessionRead:
    return SessionRead(
        access_token=ctx.access_token if include_token else None,
        user=to_read(ctx.profile),
        is_admin=ctx.is_admin,
        profile_is_fallback=ctx.profile_is_fallback,
    )


@router.post(
    "/sign-in",
    response_model=SessionRead,
    summary="Sign In",
    description="Exchange email and password for a bearer token and the caller's profile.",
    responses={
        status.HTTP_401_UNAUTHORIZED: {
            "model": ErrorResponse,
            "description": "Email or password is wrong.",
            "content": {
                "application/json": {"example": {"detail": "Invalid email or password"}},
            },
        },
    },
)
async def sign_in(
    payload: SignInRequest,
    store: SessionStore = SESSION_STORE_DEP,
) -> SessionRead:
    """Authenticate and return the new session."""
    ctx = await store.sign_in(payload.email, payload.password)
    return _session_read(ctx, include_token=True)


@router.post("/sign-out", response_model=OkResponse)
async def sign_out(
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    store: SessionStore = SESSION_STORE_DEP,
) -> OkResponse:
    """End the caller's session."""
    await store.sign_out(ctx)
    return OkResponse()


@router.get("/me", response_model=SessionRead)
async def me(ctx: SessionContext = SESSION_CONTEXT_DEP) -> SessionRead:
    """Return the caller's profile and admin flag."""
    return _session_read(ctx, include_token=False)
