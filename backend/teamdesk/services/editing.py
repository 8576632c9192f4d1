"""Permission-gated create/update/delete shared by tasks and projects.

Each write path runs the same steps: load the current record, evaluate the
caller's capabilities against it, scope the payload, write through the
caller's record client, then wait briefly so the next list read sees the
change.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from uuid import uuid4

from fastapi import HTTPException, status
from pydantic import ValidationError

from teamdesk.core.config import settings
from teamdesk.core.logging import get_logger
from teamdesk.core.time import utcnow_iso
from teamdesk.db.record_client import RecordStoreError
from teamdesk.models.base import RecordModel
from teamdesk.services.permissions import build_update_payload
from teamdesk.services.write_errors import write_error_to_http

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from teamdesk.db.collections import Collection
    from teamdesk.db.record_client import RecordClient
    from teamdesk.schemas.permissions import PermissionSnapshot
    from teamdesk.services.session_store import SessionContext

logger = get_logger(__name__)
RecordT = TypeVar("RecordT", bound=RecordModel)


@dataclass(frozen=True)
class EditableCollection(Generic[RecordT]):
    """How one collection is decoded, labelled, and permission-checked."""

    collection: Collection
    model: type[RecordT]
    label: str
    limited_fields: tuple[str, ...]
    evaluate: Callable[[object, RecordT | None], PermissionSnapshot]


def decode_rows(model: type[RecordT], rows: list[dict[str, Any]]) -> list[RecordT]:
    """Decode rows, skipping any the read model rejects."""
    decoded: list[RecordT] = []
    for row in rows:
        try:
            decoded.append(model.from_row(row))
        except ValidationError:
            logger.warning(
                "records.row_skipped model=%s id=%s",
                model.__name__,
                row.get("id"),
            )
    return decoded


async def fetch_all(
    records: RecordClient,
    collection: Collection,
    model: type[RecordT],
    *,
    filters: Mapping[str, object] | None = None,
    order_by: str | None = "created_at",
    descending: bool = True,
) -> list[RecordT]:
    """List a collection; a failed read yields an empty list."""
    try:
        rows = await records.list_records(
            collection,
            filters=filters,
            order_by=order_by,
            descending=descending,
        )
    except RecordStoreError:
        logger.exception("records.list_failed collection=%s", collection.value)
        return []
    return decode_rows(model, rows)


async def settle() -> None:
    """Give the record store time to make a write visible to reads."""
    if settings.write_settle_delay_seconds > 0:
        await asyncio.sleep(settings.write_settle_delay_seconds)


async def load_existing(
    records: RecordClient,
    editable: EditableCollection[RecordT],
    record_id: str,
) -> RecordT:
    """Fetch one record for a write, or raise 404."""
    try:
        row = await records.get(editable.collection, record_id)
    except RecordStoreError as exc:
        raise write_error_to_http(exc, entity=editable.label) from exc
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    try:
        return editable.model.from_row(row)
    except ValidationError as exc:
        logger.warning(
            "records.invalid_row collection=%s id=%s",
            editable.collection.value,
            record_id,
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc


def _forbidden(label: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={
            "code": "permission_denied",
            "message": f"You do not have permission to modify this {label}.",
        },
    )


async def create_record(
    records: RecordClient,
    ctx: SessionContext,
    editable: EditableCollection[RecordT],
    values: Mapping[str, object],
) -> RecordT:
    """Insert a new record owned by the caller."""
    now = utcnow_iso()
    record = {
        **values,
        "id": str(uuid4()),
        "created_by": ctx.identity_id,
        "created_at": now,
        "updated_at": now,
    }
    try:
        row = await records.insert(editable.collection, record)
    except RecordStoreError as exc:
        logger.warning(
            "records.create_failed collection=%s identity_id=%s",
            editable.collection.value,
            ctx.identity_id,
        )
        raise write_error_to_http(exc, entity=editable.label) from exc
    await settle()
    logger.info(
        "records.created collection=%s id=%s identity_id=%s",
        editable.collection.value,
        row.get("id"),
        ctx.identity_id,
    )
    return editable.model.from_row(row)


async def update_record(
    records: RecordClient,
    ctx: SessionContext,
    editable: EditableCollection[RecordT],
    record_id: str,
    values: Mapping[str, object],
) -> RecordT:
    """Apply the part of `values` the caller is allowed to change."""
    existing = await load_existing(records, editable, record_id)
    snapshot = editable.evaluate(ctx.identity_id, existing)
    try:
        payload = build_update_payload(
            snapshot,
            values,
            limited_fields=editable.limited_fields,
        )
    except PermissionError as exc:
        raise _forbidden(editable.label) from exc
    try:
        row = await records.update(editable.collection, record_id, payload)
    except RecordStoreError as exc:
        logger.warning(
            "records.update_failed collection=%s id=%s identity_id=%s limited=%s",
            editable.collection.value,
            record_id,
            ctx.identity_id,
            snapshot.limited_only,
        )
        raise write_error_to_http(exc, entity=editable.label) from exc
    await settle()
    logger.info(
        "records.updated collection=%s id=%s identity_id=%s fields=%s",
        editable.collection.value,
        record_id,
        ctx.identity_id,
        ",".join(sorted(payload)),
    )
    return editable.model.from_row(row)


async def delete_record(
    records: RecordClient,
    ctx: SessionContext,
    editable: EditableCollection[RecordT],
    record_id: str,
) -> None:
    """Delete a record; only its creator may do so."""
    existing = await load_existing(records, editable, record_id)
    if not editable.evaluate(ctx.identity_id, existing).can_delete:
        raise _forbidden(editable.label)
    try:
        await records.delete(editable.collection, record_id)
    except RecordStoreError as exc:
        raise write_error_to_http(exc, entity=editable.label) from exc
    await settle()
    logger.info(
        "records.deleted collection=%s id=%s identity_id=%s",
        editable.collection.value,
        record_id,
        ctx.identity_id,
    )
