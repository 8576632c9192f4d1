"""Time helpers shared by services and schemas."""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(UTC)


def utcnow_iso() -> str:
    """Return the current UTC timestamp as an ISO-8601 string for record payloads."""
    return utcnow().isoformat()
