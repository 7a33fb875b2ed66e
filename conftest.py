"""Shared test fixtures for speedreader tests."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from speedreader.models import Entry, EntryPage, LookupItem, UserConfig
from speedreader.session import ReaderSession

# ── Logging isolation ────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _restore_logging_disable():
    """Undo ``logging.disable`` calls made by CLI tests.

    ``main()`` suppresses all logging when --debug is absent, which would hide
    records from ``caplog`` in every later test.
    """
    yield
    logging.disable(logging.NOTSET)


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_entry():
    """Factory fixture for creating Entry instances with sensible defaults."""

    def _make(
        entry_id: int = 1,
        title: str | None = None,
        url: str | None = None,
        published_at: datetime | None = None,
        starred: bool = False,
        content: str = "<p>The quick brown fox jumps over the lazy dog.</p>",
        feed_title: str = "Test Feed",
        author: str = "Test Author",
    ) -> Entry:
        if title is None:
            title = f"Entry {entry_id}"
        if url is None:
            url = f"https://example.com/posts/{entry_id}"
        if published_at is None:
            published_at = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
        return Entry(
            id=entry_id,
            title=title,
            url=url,
            published_at=published_at,
            starred=starred,
            content=content,
            feed_title=feed_title,
            author=author,
        )

    return _make


@pytest.fixture
def make_entries(make_entry):
    """Build ``count`` entries with consecutive ids starting at ``start``."""

    def _make(count: int, start: int = 1) -> list[Entry]:
        return [make_entry(entry_id=i) for i in range(start, start + count)]

    return _make


@pytest.fixture
def sample_config():
    """Factory fixture for creating UserConfig with optional overrides."""

    def _make(**kwargs: Any) -> UserConfig:
        return UserConfig(**kwargs)

    return _make


@pytest.fixture
def browsing_session(sample_config, make_entries):
    """A remote session sitting on the entry list with ``count`` loaded entries."""

    def _make(count: int = 5, total: int | None = None, **kwargs: Any) -> ReaderSession:
        session = ReaderSession(sample_config(), remote=True, **kwargs)
        session.start()
        session.window.merge(make_entries(count), count if total is None else total, 0)
        session.loading = False
        return session

    return _make


@pytest.fixture
def lookup_items():
    """Category-style lookup collection used by search tests."""
    return [
        LookupItem(id=1, title="Technology"),
        LookupItem(id=2, title="Science"),
        LookupItem(id=3, title="Tech News"),
    ]


@pytest.fixture
def fake_client(make_entries):
    """An AsyncMock standing in for MinifluxClient."""
    client = AsyncMock()
    client.list_entries.return_value = EntryPage(entries=make_entries(3), total=3)
    client.list_categories.return_value = [LookupItem(id=1, title="Technology")]
    client.list_feeds.return_value = [LookupItem(id=7, title="Example Blog")]
    client.mark_read.return_value = None
    client.toggle_starred.return_value = None
    client.aclose.return_value = None
    return client
