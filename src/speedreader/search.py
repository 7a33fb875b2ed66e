"""Search prompt state: mode cycling, query editing and lookup filtering."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from speedreader.models import (
    LOOKUP_SEARCH_MODES,
    SEARCH_CATEGORY,
    SEARCH_FEED,
    SEARCH_GENERAL,
    SEARCH_MODE_LABELS,
    SEARCH_MODES,
    SEARCH_QUERY_LIMIT,
    LookupItem,
)


@dataclass(slots=True)
class TextField:
    """Single-line text input owned by the session."""

    value: str = ""
    limit: int = SEARCH_QUERY_LIMIT

    def insert(self, text: str) -> bool:
        """Append ``text`` up to the limit. Returns True if the value changed."""
        room = self.limit - len(self.value)
        if room <= 0 or not text:
            return False
        self.value += text[:room]
        return True

    def backspace(self) -> bool:
        if not self.value:
            return False
        self.value = self.value[:-1]
        return True

    def clear(self) -> None:
        self.value = ""

    def set(self, value: str) -> None:
        self.value = value[: self.limit]


def filter_lookup(items: Iterable[LookupItem], query: str) -> tuple[list[str], list[int]]:
    """Return titles and ids of items whose title contains ``query``.

    Matching is a case-insensitive substring test; an empty query keeps
    everything. Both lists keep positional correspondence.
    """
    needle = query.casefold()
    titles: list[str] = []
    ids: list[int] = []
    for item in items:
        if needle in item.title.casefold():
            titles.append(item.title)
            ids.append(item.id)
    return titles, ids


@dataclass(slots=True)
class SearchState:
    """Mode, query and the candidate list shown under the prompt."""

    mode: str = SEARCH_GENERAL
    query: TextField = field(default_factory=TextField)
    candidates: list[str] = field(default_factory=list)
    candidate_ids: list[int] = field(default_factory=list)
    cursor: int = 0

    @property
    def label(self) -> str:
        return SEARCH_MODE_LABELS[self.mode]

    @property
    def is_lookup(self) -> bool:
        return self.mode in LOOKUP_SEARCH_MODES

    @property
    def lookup_kind(self) -> str | None:
        """Name of the cached collection this mode selects from, if any."""
        if self.mode == SEARCH_CATEGORY:
            return "categories"
        if self.mode == SEARCH_FEED:
            return "feeds"
        return None

    def reset(self) -> None:
        self.query.clear()
        self.clear_candidates()

    def clear_candidates(self) -> None:
        self.candidates = []
        self.candidate_ids = []
        self.cursor = 0

    def cycle_mode(self) -> str:
        index = SEARCH_MODES.index(self.mode)
        self.mode = SEARCH_MODES[(index + 1) % len(SEARCH_MODES)]
        self.reset()
        return self.mode

    def refilter(self, items: list[LookupItem] | None) -> None:
        """Recompute candidates from a cached lookup collection.

        ``None`` means the collection has not been loaded yet.
        """
        if items is None or not self.is_lookup:
            self.clear_candidates()
            return
        self.candidates, self.candidate_ids = filter_lookup(items, self.query.value)
        if self.cursor >= len(self.candidates):
            self.cursor = 0

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_down(self) -> None:
        if self.cursor < len(self.candidates) - 1:
            self.cursor += 1

    def selected_id(self) -> int | None:
        if 0 <= self.cursor < len(self.candidate_ids):
            return self.candidate_ids[self.cursor]
        return None


__all__ = ["SearchState", "TextField", "filter_lookup"]
