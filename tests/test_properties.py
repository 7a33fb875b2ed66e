"""Property-based tests for pacing, the entry window and config validation.

Run with:
    pytest tests/test_properties.py -v
    pytest tests/test_properties.py -v --hypothesis-seed=0  # reproducible
"""

from __future__ import annotations

import hypothesis.strategies as st
from hypothesis import HealthCheck, given, settings

from speedreader.config import _dict_to_config
from speedreader.models import MIN_WPM, Entry, LookupItem
from speedreader.pacing import adjust_wpm, split_word, word_delay
from speedreader.pagination import EntryWindow
from speedreader.search import TextField, filter_lookup
from speedreader.themes import READER_THEMES

settings.register_profile("ci", max_examples=50, deadline=None)
settings.register_profile("dev", max_examples=200, deadline=None)
settings.load_profile("ci")

words = st.text(min_size=0, max_size=40)
wpms = st.integers(min_value=1, max_value=2000)
moves = st.lists(st.sampled_from(["up", "down", "start", "end", "remove"]), max_size=60)


def _entries(count: int) -> list[Entry]:
    return [Entry(id=i, title=f"Entry {i}", url="") for i in range(count)]


class TestPacingProperties:
    @given(word=words)
    def test_split_word_reassembles(self, word):
        lead, pivot, trail = split_word(word)
        assert lead + pivot + trail == word
        assert len(pivot) == (1 if word else 0)

    @given(word=words, wpm=wpms, ramp=st.booleans())
    def test_delay_bounds(self, word, wpm, ramp):
        base = 60.0 / wpm
        delay = word_delay(word, wpm, ramp)
        assert base <= delay <= base * 1.5 * 2.0 + 1e-9

    @given(
        word=st.text(alphabet=st.characters(whitelist_categories=("L", "N")), max_size=20),
        wpm=wpms,
        ramp=st.booleans(),
    )
    def test_punctuation_never_shortens_delay(self, word, wpm, ramp):
        sentence = word_delay(word + ".", wpm, ramp)
        clause = word_delay(word + ",", wpm, ramp)
        assert sentence >= clause >= word_delay(word, wpm, ramp)

    @given(wpm=st.integers(min_value=MIN_WPM, max_value=5000), step=st.integers(-500, 500))
    def test_adjust_never_below_minimum(self, wpm, step):
        assert adjust_wpm(wpm, step) >= MIN_WPM


class TestWindowProperties:
    @given(
        count=st.integers(min_value=0, max_value=80),
        extra=st.integers(min_value=0, max_value=50),
        rows=st.integers(min_value=1, max_value=40),
        ops=moves,
    )
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_cursor_stays_visible(self, count, extra, rows, ops):
        window = EntryWindow()
        window.merge(_entries(count), count + extra, 0)
        for op in ops:
            if op == "up":
                window.move_up()
            elif op == "down":
                window.move_down(rows)
            elif op == "start":
                window.jump_start()
            elif op == "end":
                window.jump_end(rows)
            elif window.highlighted is not None:
                window.remove(window.highlighted.id)

            view = window.viewport(rows)
            assert 0 <= view.start <= view.end <= len(window.entries)
            if window.entries:
                assert view.start <= window.cursor < view.end
                visible = view.end - view.start
                assert visible + int(view.more_above) + int(view.more_below) <= max(rows, 3)
            else:
                assert window.cursor == 0

    @given(
        first=st.lists(st.integers(0, 30), max_size=20),
        second=st.lists(st.integers(0, 30), max_size=20),
    )
    def test_merge_never_duplicates_ids(self, first, second):
        window = EntryWindow()
        window.merge([Entry(id=i, title="", url="") for i in first], 100, 0)
        window.merge([Entry(id=i, title="", url="") for i in second], 100, len(window.entries))
        ids = [entry.id for entry in window.entries]
        assert len(ids) == len(set(ids))
        assert set(ids) == set(first) | set(second)


class TestSearchProperties:
    @given(
        titles=st.lists(st.text(max_size=12), max_size=15),
        query=st.text(max_size=4),
    )
    def test_filter_keeps_positional_correspondence(self, titles, query):
        items = [LookupItem(id=i, title=title) for i, title in enumerate(titles)]
        matched_titles, matched_ids = filter_lookup(items, query)
        assert len(matched_titles) == len(matched_ids)
        for title, item_id in zip(matched_titles, matched_ids):
            assert titles[item_id] == title
            assert query.casefold() in title.casefold()

    @given(limit=st.integers(0, 50), chunks=st.lists(st.text(max_size=20), max_size=10))
    def test_text_field_respects_limit(self, limit, chunks):
        field = TextField(limit=limit)
        for chunk in chunks:
            field.insert(chunk)
        assert len(field.value) <= limit


class TestConfigProperties:
    @given(
        data=st.dictionaries(
            st.sampled_from(
                ["wpm", "theme_index", "ramp_speed", "zen_mode", "total_articles", "total_words"]
            ),
            st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=5)),
        )
    )
    def test_dict_to_config_always_valid(self, data):
        config = _dict_to_config(data)
        assert isinstance(config.wpm, int)
        assert config.wpm > 0
        assert 0 <= config.theme_index < len(READER_THEMES)
        assert isinstance(config.ramp_speed, bool)
        assert config.total_articles >= 0
        assert config.total_words >= 0
