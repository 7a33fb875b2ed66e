"""Miniflux JSON parsing, HTML text extraction and date formatting."""

from __future__ import annotations

import logging
from datetime import datetime
from html.parser import HTMLParser
from typing import Any

from speedreader.models import Entry, LookupItem

logger = logging.getLogger(__name__)

# Widest date column value is "Jan 02 '06"
SHORT_DATE_WIDTH = 10


class _HTMLTextExtractor(HTMLParser):
    """Extract readable text from feed entry HTML."""

    _SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "svg", "math"})
    _BLOCK_TAGS = frozenset(
        {
            "p",
            "div",
            "br",
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            "li",
            "tr",
            "pre",
            "section",
            "article",
            "blockquote",
            "figcaption",
        }
    )

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._pieces: list[str] = []
        self._skip_depth: int = 0

    def handle_starttag(self, tag: str, _attrs: list[tuple[str, str | None]]) -> None:
        if tag in self._SKIP_TAGS:
            self._skip_depth += 1
        elif tag == "br":
            self._pieces.append("\n")

    def handle_endtag(self, tag: str) -> None:
        if tag in self._SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        if tag in self._BLOCK_TAGS:
            self._pieces.append("\n")

    def handle_data(self, data: str) -> None:
        if self._skip_depth == 0:
            self._pieces.append(data)

    def get_text(self) -> str:
        raw = "".join(self._pieces)
        # Collapse whitespace within lines, preserve paragraph breaks
        lines = raw.split("\n")
        cleaned = [" ".join(line.split()) for line in lines]
        return "\n".join(line for line in cleaned if line).strip()


def extract_text_from_html(html: str) -> str:
    """Extract readable text from an entry's HTML content."""
    parser = _HTMLTextExtractor()
    try:
        parser.feed(html)
        parser.close()
    except AssertionError as e:
        # html.parser asserts on unknown marked sections such as <![foo[
        logger.warning("Stopped parsing malformed entry HTML: %s", e)
    return parser.get_text()


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp as sent by Miniflux. Returns None if invalid."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_entry(data: Any) -> Entry | None:
    """Build an Entry from one Miniflux entry object. Returns None when malformed."""
    if not isinstance(data, dict):
        return None
    entry_id = _as_int(data.get("id"))
    if entry_id is None:
        return None
    feed = data.get("feed")
    feed_title = _as_str(feed.get("title")) if isinstance(feed, dict) else ""
    return Entry(
        id=entry_id,
        title=_as_str(data.get("title")),
        url=_as_str(data.get("url")),
        published_at=parse_timestamp(data.get("published_at")),
        starred=data.get("starred") is True,
        content=_as_str(data.get("content")),
        feed_title=feed_title,
        author=_as_str(data.get("author")),
    )


def parse_entries(items: Any) -> list[Entry]:
    """Parse a list of entry objects, skipping malformed ones."""
    if not isinstance(items, list):
        return []
    entries: list[Entry] = []
    for item in items:
        entry = parse_entry(item)
        if entry is None:
            logger.warning("Skipping malformed entry: %r", item)
            continue
        entries.append(entry)
    return entries


def parse_lookup_items(items: Any) -> list[LookupItem]:
    """Parse categories or feeds into (id, title) pairs."""
    if not isinstance(items, list):
        return []
    result: list[LookupItem] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        item_id = _as_int(item.get("id"))
        if item_id is None:
            continue
        result.append(LookupItem(id=item_id, title=_as_str(item.get("title"))))
    return result


def short_date(value: datetime | None, now: datetime | None = None) -> str:
    """Format a publish time compactly relative to ``now``.

    Today shows ``15:04``, this year ``Jan 02``, older ``Jan 02 '06``.
    """
    if value is None:
        return ""
    if now is None:
        now = datetime.now(value.tzinfo)
    elif value.tzinfo is not None and now.tzinfo is not None:
        value = value.astimezone(now.tzinfo)
    if value.year != now.year:
        return value.strftime("%b %d '%y")
    if value.timetuple().tm_yday != now.timetuple().tm_yday:
        return value.strftime("%b %d")
    return value.strftime("%H:%M")


__all__ = [
    "SHORT_DATE_WIDTH",
    "extract_text_from_html",
    "parse_entries",
    "parse_entry",
    "parse_lookup_items",
    "parse_timestamp",
    "short_date",
]
