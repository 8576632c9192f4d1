"""HTTP client factory for the hosted record store and its auth API."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from teamdesk.core.config import settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


def build_http_client(*, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create an async client bound to the record store base URL and anon key."""
    return httpx.AsyncClient(
        base_url=settings.record_store_url,
        headers={
            "apikey": settings.record_store_anon_key,
            "Content-Type": "application/json",
        },
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Yield a request-scoped HTTP client and close it afterwards."""
    async with build_http_client() as client:
        yield client
