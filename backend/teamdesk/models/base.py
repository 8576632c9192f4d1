"""Shared base for records read from the hosted record store."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Self

from pydantic import field_validator
from sqlmodel import SQLModel

RUNTIME_ANNOTATION_TYPES = (datetime,)


def coerce_id(value: object) -> object:
    """Canonicalize numeric ids to strings; leave other values for validation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def split_date(value: object) -> object:
    """Keep only the date part of an ISO timestamp string."""
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return text.split("T", maxsplit=1)[0]
    return value


class RecordModel(SQLModel):
    """Read model for one record-store row.

    Rows come from a schemaless JSON API, so unknown columns are ignored and
    ids are canonicalized to strings at decode time.
    """

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _canonical_id(cls, value: object) -> object:
        return coerce_id(value)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Self:
        """Validate one raw row into the read model."""
        return cls.model_validate(row)
