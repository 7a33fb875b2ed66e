"""Tests for Miniflux JSON parsing, HTML extraction and date formatting."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from speedreader.models import LookupItem
from speedreader.parsing import (
    extract_text_from_html,
    parse_entries,
    parse_entry,
    parse_lookup_items,
    parse_timestamp,
    short_date,
)

ENTRY_JSON = {
    "id": 42,
    "title": "Async Rust in Practice",
    "url": "https://blog.example.com/async-rust",
    "published_at": "2024-03-05T14:30:00Z",
    "starred": True,
    "content": "<p>Hello <b>world</b></p>",
    "author": "Jane",
    "feed": {"id": 7, "title": "Example Blog"},
}


class TestExtractText:
    def test_strips_tags_and_keeps_paragraphs(self):
        text = extract_text_from_html("<p>First <em>para</em>.</p><p>Second.</p>")
        assert text == "First para.\nSecond."

    def test_skips_script_and_style(self):
        html = "<style>p{color:red}</style><p>Visible</p><script>alert(1)</script>"
        assert extract_text_from_html(html) == "Visible"

    def test_decodes_entities(self):
        assert extract_text_from_html("<p>Fish &amp; chips&nbsp;today</p>").split() == [
            "Fish",
            "&",
            "chips",
            "today",
        ]

    def test_br_breaks_lines(self):
        assert extract_text_from_html("one<br>two") == "one\ntwo"

    def test_empty(self):
        assert extract_text_from_html("") == ""

    def test_unknown_marked_section_keeps_text_so_far(self):
        text = extract_text_from_html("<p>hello</p><![foo[ bar ]]>")
        assert text.split()[0] == "hello"


class TestParseTimestamp:
    def test_zulu(self):
        assert parse_timestamp("2024-03-05T14:30:00Z") == datetime(
            2024, 3, 5, 14, 30, tzinfo=timezone.utc
        )

    def test_offset(self):
        parsed = parse_timestamp("2024-03-05T14:30:00+02:00")
        assert parsed is not None
        assert parsed.utcoffset() == timedelta(hours=2)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
    def test_invalid(self, value):
        assert parse_timestamp(value) is None


class TestParseEntry:
    def test_full_entry(self):
        entry = parse_entry(ENTRY_JSON)
        assert entry is not None
        assert entry.id == 42
        assert entry.title == "Async Rust in Practice"
        assert entry.starred
        assert entry.feed_title == "Example Blog"
        assert entry.author == "Jane"
        assert entry.published_at == datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc)

    def test_missing_optional_fields(self):
        entry = parse_entry({"id": 1})
        assert entry is not None
        assert entry.title == ""
        assert entry.url == ""
        assert entry.published_at is None
        assert not entry.starred

    @pytest.mark.parametrize("data", [None, [], {"title": "no id"}, {"id": "1"}, {"id": True}])
    def test_malformed(self, data):
        assert parse_entry(data) is None

    def test_parse_entries_skips_bad_items(self, caplog):
        with caplog.at_level(logging.WARNING, logger="speedreader.parsing"):
            entries = parse_entries([ENTRY_JSON, {"title": "broken"}, {"id": 43}])
        assert [e.id for e in entries] == [42, 43]
        assert "Skipping malformed entry" in caplog.text

    def test_parse_entries_non_list(self):
        assert parse_entries(None) == []
        assert parse_entries({"id": 1}) == []


class TestParseLookupItems:
    def test_categories(self):
        items = parse_lookup_items(
            [{"id": 1, "title": "Technology", "user_id": 1}, {"id": 2, "title": "Science"}]
        )
        assert items == [LookupItem(1, "Technology"), LookupItem(2, "Science")]

    def test_skips_malformed(self):
        assert parse_lookup_items([{"title": "no id"}, "junk", {"id": 3}]) == [LookupItem(3, "")]

    def test_non_list(self):
        assert parse_lookup_items({"error_message": "nope"}) == []


class TestShortDate:
    NOW = datetime(2024, 6, 15, 18, 0, tzinfo=timezone.utc)

    def test_today_shows_time(self):
        value = datetime(2024, 6, 15, 9, 5, tzinfo=timezone.utc)
        assert short_date(value, self.NOW) == "09:05"

    def test_this_year_shows_month_day(self):
        value = datetime(2024, 2, 3, 9, 5, tzinfo=timezone.utc)
        assert short_date(value, self.NOW) == "Feb 03"

    def test_older_shows_year(self):
        value = datetime(2021, 11, 30, 9, 5, tzinfo=timezone.utc)
        assert short_date(value, self.NOW) == "Nov 30 '21"

    def test_converts_to_now_timezone(self):
        value = datetime(2024, 6, 15, 23, 30, tzinfo=timezone.utc)
        now = datetime(2024, 6, 16, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert short_date(value, now) == "01:30"

    def test_none(self):
        assert short_date(None, self.NOW) == ""
