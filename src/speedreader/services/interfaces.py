"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from speedreader.models import ENTRY_PAGE_SIZE, EntryPage, LookupItem
from speedreader.parsing import extract_text_from_html
from speedreader.services import credentials as _credentials
from speedreader.services.miniflux import MinifluxClient

logger = logging.getLogger(__name__)


@runtime_checkable
class FeedClient(Protocol):
    """Interface for the remote feed service."""

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
        ...

    async def list_categories(self) -> list[LookupItem]:
        """Fetch every category."""
        ...

    async def list_feeds(self) -> list[LookupItem]:
        """Fetch every subscribed feed."""
        ...

    async def mark_read(self, entry_id: int) -> None:
        """Mark one entry read."""
        ...

    async def toggle_starred(self, entry_id: int) -> None:
        """Flip the starred flag of one entry."""
        ...

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        ...


@runtime_checkable
class CredentialStore(Protocol):
    """Interface for persisted API token storage."""

    def get_token(self) -> str:
        """Return the stored token or ""."""
        ...

    def set_token(self, token: str) -> None:
        """Persist the token."""
        ...


@runtime_checkable
class ContentExtractor(Protocol):
    """Interface for HTML-to-text conversion."""

    def to_plain_text(self, markup: str) -> str:
        """Return readable text for entry HTML."""
        ...


@runtime_checkable
class BrowserLauncher(Protocol):
    """Interface for opening URLs outside the terminal."""

    def open(self, url: str) -> bool:
        """Open ``url``; return whether a browser accepted it."""
        ...


class KeyringCredentialStore:
    """Default adapter that stores the token in the system keyring."""

    def get_token(self) -> str:
        return _credentials.get_token()

    def set_token(self, token: str) -> None:
        _credentials.set_token(token)


class HtmlContentExtractor:
    """Default adapter backed by the stdlib HTML parser."""

    def to_plain_text(self, markup: str) -> str:
        return extract_text_from_html(markup)


class WebBrowserLauncher:
    """Default adapter that delegates to the ``webbrowser`` module."""

    def open(self, url: str) -> bool:
        try:
            return webbrowser.open(url)
        except webbrowser.Error as e:
            logger.warning("Failed to open browser for %s: %s", url, e)
            return False


def connect_miniflux(url: str, token: str) -> FeedClient:
    """Build a feed client for a Miniflux server."""
    return MinifluxClient(url, token)


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    credentials: CredentialStore
    content: ContentExtractor
    browser: BrowserLauncher
    connect: Callable[[str, str], FeedClient]


def build_default_app_services() -> AppServices:
    """Build default app services backed by the keyring, stdlib and httpx."""
    return AppServices(
        credentials=KeyringCredentialStore(),
        content=HtmlContentExtractor(),
        browser=WebBrowserLauncher(),
        connect=connect_miniflux,
    )


__all__ = [
    "AppServices",
    "BrowserLauncher",
    "ContentExtractor",
    "CredentialStore",
    "FeedClient",
    "HtmlContentExtractor",
    "KeyringCredentialStore",
    "WebBrowserLauncher",
    "build_default_app_services",
    "connect_miniflux",
]
