"""Async Miniflux REST client covering the endpoints the reader needs."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from speedreader.models import (
    ENTRY_PAGE_SIZE,
    MINIFLUX_TIMEOUT,
    MINIFLUX_USER_AGENT,
    EntryPage,
    LookupItem,
)
from speedreader.parsing import parse_entries, parse_lookup_items

logger = logging.getLogger(__name__)


class MinifluxError(Exception):
    """Base error for Miniflux requests."""


class MinifluxAuthError(MinifluxError):
    """The server rejected the API token."""


class MinifluxAPIError(MinifluxError):
    """The server answered with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Miniflux API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def normalize_base_url(url: str) -> str:
    """Return the API root (``.../v1/``) for a server URL as users type it."""
    base = url.strip().rstrip("/")
    if base.endswith("/v1"):
        base = base[: -len("/v1")]
    if not base:
        raise ValueError("Miniflux URL is empty")
    if not base.startswith(("http://", "https://")):
        raise ValueError(f"Miniflux URL must start with http:// or https://: {url}")
    return f"{base}/v1/"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "request failed"
    if isinstance(body, dict) and isinstance(body.get("error_message"), str):
        return body["error_message"]
    return response.reason_phrase or "request failed"


class MinifluxClient:
    """Thin wrapper around ``httpx.AsyncClient`` for one Miniflux account."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = MINIFLUX_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"X-Auth-Token": token, "User-Agent": MINIFLUX_USER_AGENT},
            timeout=timeout,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("Miniflux %s %s failed: %s", method, path, exc)
            raise MinifluxError(f"Could not reach Miniflux: {exc}") from exc
        if response.status_code in (401, 403):
            raise MinifluxAuthError("Miniflux rejected the API token")
        if response.status_code >= 400:
            raise MinifluxAPIError(response.status_code, _error_message(response))
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MinifluxError("Miniflux returned invalid JSON") from exc

    async def list_entries(
        self,
        *,
        search: str = "",
        category_id: int | None = None,
        feed_id: int | None = None,
        offset: int = 0,
        limit: int = ENTRY_PAGE_SIZE,
    ) -> EntryPage:
        """Fetch one page of unread entries, newest first."""
        params: dict[str, Any] = {
            "status": "unread",
            "limit": limit,
            "offset": max(0, offset),
            "order": "published_at",
            "direction": "desc",
        }
        if search:
            params["search"] = search
        if category_id is not None:
            params["category_id"] = category_id
        if feed_id is not None:
            params["feed_id"] = feed_id
        response = await self._request("GET", "entries", params=params)
        body = self._json(response)
        if not isinstance(body, dict):
            raise MinifluxError("Unexpected entries response")
        total = body.get("total", 0)
        if not isinstance(total, int) or isinstance(total, bool):
            total = 0
        entries = parse_entries(body.get("entries"))
        logger.debug("Fetched %d entries at offset %d (total %d)", len(entries), offset, total)
        return EntryPage(entries=entries, total=total)

    async def list_categories(self) -> list[LookupItem]:
        response = await self._request("GET", "categories")
        return parse_lookup_items(self._json(response))

    async def list_feeds(self) -> list[LookupItem]:
        response = await self._request("GET", "feeds")
        return parse_lookup_items(self._json(response))

    async def mark_read(self, entry_id: int) -> None:
        await self._request("PUT", "entries", json={"entry_ids": [entry_id], "status": "read"})

    async def toggle_starred(self, entry_id: int) -> None:
        await self._request("PUT", f"entries/{entry_id}/bookmark")

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = [
    "MinifluxAPIError",
    "MinifluxAuthError",
    "MinifluxClient",
    "MinifluxError",
    "normalize_base_url",
]
