"""CRUD facade over the hosted record store's REST interface.

The store speaks the PostgREST dialect: equality filters and ordering are
query parameters (`status=eq.todo`, `order=created_at.desc`), and writes ask
for the affected rows back with `Prefer: return=representation`. Row-level
policies run server-side under the caller's access token, so a write the
policies silently filter out comes back as an empty row list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from teamdesk.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from teamdesk.db.collections import Collection

logger = get_logger(__name__)
REST_PATH = "/rest/v1"
RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class RecordStoreError(Exception):
    """The record store rejected a request or could not be reached."""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: str | None = None,
        hint: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message or details or hint or "Record store request failed")
        self.message = message
        self.details = details
        self.hint = hint
        self.code = code
        self.status_code = status_code


class RecordStoreUnavailable(RecordStoreError):
    """Transport-level failure talking to the record store."""


class EmptyWriteResult(RecordStoreError):
    """A write was accepted but no affected row came back."""


def _text_or_none(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _error_from_response(response: httpx.Response) -> RecordStoreError:
    body: object
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return RecordStoreError(
            _text_or_none(body.get("message") or body.get("msg") or body.get("error")),
            details=_text_or_none(body.get("details")),
            hint=_text_or_none(body.get("hint")),
            code=_text_or_none(body.get("code")),
            status_code=response.status_code,
        )
    return RecordStoreError(
        _text_or_none(response.text) or f"HTTP {response.status_code}",
        status_code=response.status_code,
    )


def _eq(value: object) -> str:
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class RecordClient:
    """Generic list/get/insert/update/delete over record-store collections."""

    def __init__(self, http: httpx.AsyncClient, *, access_token: str | None = None) -> None:
        self._http = http
        self._access_token = access_token

    def with_access_token(self, access_token: str | None) -> RecordClient:
        """Return a client that runs requests under another caller's token."""
        return RecordClient(self._http, access_token=access_token)

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        collection: Collection,
        *,
        params: Mapping[str, str] | None = None,
        json: object = None,
        headers: Mapping[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        url = f"{REST_PATH}/{collection.value}"
        try:
            response = await self._http.request(
                method,
                url,
                params=dict(params or {}),
                json=json,
                headers=self._headers(headers),
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "record_store.transport_failed collection=%s method=%s error_type=%s",
                collection.value,
                method,
                exc.__class__.__name__,
            )
            raise RecordStoreUnavailable(str(exc) or exc.__class__.__name__) from exc

        if response.status_code >= 400:
            error = _error_from_response(response)
            logger.warning(
                "record_store.request_rejected collection=%s method=%s status=%s code=%s",
                collection.value,
                method,
                response.status_code,
                error.code,
            )
            raise error

        if response.status_code == 204 or not response.content:
            return []
        try:
            body = response.json()
        except ValueError as exc:
            logger.warning(
                "record_store.invalid_body collection=%s method=%s status=%s",
                collection.value,
                method,
                response.status_code,
            )
            msg = "Invalid JSON from record store"
            raise RecordStoreError(msg, status_code=response.status_code) from exc
        if isinstance(body, list):
            return [row for row in body if isinstance(row, dict)]
        if isinstance(body, dict):
            return [body]
        return []

    async def list_records(
        self,
        collection: Collection,
        *,
        filters: Mapping[str, object] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Fetch rows matching equality filters, optionally ordered by a column."""
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = _eq(value)
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        return await self._request("GET", collection, params=params)

    async def get_by(
        self,
        collection: Collection,
        column: str,
        value: object,
    ) -> dict[str, Any] | None:
        """Fetch the first row whose `column` equals `value`."""
        rows = await self._request(
            "GET",
            collection,
            params={"select": "*", column: _eq(value), "limit": "1"},
        )
        return rows[0] if rows else None

    async def get(self, collection: Collection, record_id: object) -> dict[str, Any] | None:
        """Fetch one row by id."""
        return await self.get_by(collection, "id", record_id)

    async def insert(self, collection: Collection, record: Mapping[str, object]) -> dict[str, Any]:
        """Insert a row and return it as stored."""
        rows = await self._request(
            "POST",
            collection,
            json=[dict(record)],
            headers=RETURN_REPRESENTATION,
        )
        if not rows:
            msg = "No data returned from the insert"
            raise EmptyWriteResult(msg)
        return rows[0]

    async def update(
        self,
        collection: Collection,
        record_id: object,
        values: Mapping[str, object],
    ) -> dict[str, Any]:
        """Apply a partial update and return the updated row."""
        rows = await self._request(
            "PATCH",
            collection,
            params={"id": _eq(record_id)},
            json=dict(values),
            headers=RETURN_REPRESENTATION,
        )
        if not rows:
            msg = "No row was updated"
            raise EmptyWriteResult(msg)
        return rows[0]

    async def delete(self, collection: Collection, record_id: object) -> None:
        """Delete a row by id."""
        await self._request("DELETE", collection, params={"id": _eq(record_id)})
