"""Entry list cursor, viewport offset and incremental loading.

The window only knows list lengths and a row count; it never talks to the
feed service. Callers ask :meth:`EntryWindow.needs_more` after moving down and
issue the fetch themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from speedreader.models import PREFETCH_THRESHOLD, SCROLL_MARGIN, Entry


@dataclass(slots=True, frozen=True)
class Viewport:
    """Slice of the entry list that fits on screen."""

    start: int
    end: int
    more_above: bool
    more_below: bool


@dataclass(slots=True)
class EntryWindow:
    """Loaded entries plus cursor and scroll position."""

    entries: list[Entry] = field(default_factory=list)
    total: int = 0
    cursor: int = 0
    offset: int = 0
    fetch_in_flight: bool = False

    @property
    def highlighted(self) -> Entry | None:
        if not self.entries:
            return None
        return self.entries[min(self.cursor, len(self.entries) - 1)]

    @property
    def has_unloaded(self) -> bool:
        return len(self.entries) < self.total

    def effective_height(self, rows: int) -> int:
        """Rows left for entries once scroll indicators are drawn."""
        height = rows
        if self.offset > 0:
            height -= 1
        if self.offset + height < len(self.entries) or self.has_unloaded:
            height -= 1
        return max(height, SCROLL_MARGIN + 1)

    # -- movement -----------------------------------------------------------

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
        if self.cursor < self.offset:
            self.offset = self.cursor

    def move_down(self, rows: int) -> None:
        if self.entries and self.cursor < len(self.entries) - 1:
            self.cursor += 1
        height = self.effective_height(rows)
        last_comfortable = self.offset + height - 1 - SCROLL_MARGIN
        if self.cursor > last_comfortable:
            self.offset = max(0, self.cursor - (height - 1 - SCROLL_MARGIN))

    def jump_start(self) -> None:
        self.cursor = 0
        self.offset = 0

    def jump_end(self, rows: int) -> None:
        if not self.entries:
            return
        self.cursor = len(self.entries) - 1
        height = rows
        if len(self.entries) > rows:
            height -= 1  # Top indicator will be shown
        if self.has_unloaded or len(self.entries) > rows:
            height -= 1
        height = max(height, SCROLL_MARGIN + 1)
        self.offset = max(0, self.cursor - (height - 1 - SCROLL_MARGIN))

    def needs_more(self) -> bool:
        """Return True when the cursor is close enough to the end to prefetch."""
        return (
            not self.fetch_in_flight
            and self.has_unloaded
            and self.cursor >= len(self.entries) - PREFETCH_THRESHOLD
        )

    # -- mutation from results ---------------------------------------------

    def merge(self, items: list[Entry], total: int, request_offset: int) -> None:
        """Apply a page of results.

        A page fetched at offset 0 replaces the list and resets the cursor;
        later pages are appended, skipping ids that are already loaded.
        """
        if request_offset == 0:
            self.entries = []
            self.cursor = 0
            self.offset = 0
        seen = {entry.id for entry in self.entries}
        for item in items:
            if item.id in seen:
                continue
            seen.add(item.id)
            self.entries.append(item)
        self.total = max(total, 0)
        self.fetch_in_flight = False

    def remove(self, entry_id: int) -> bool:
        """Drop an entry by id. Returns True when something was removed."""
        for index, entry in enumerate(self.entries):
            if entry.id == entry_id:
                del self.entries[index]
                break
        else:
            return False
        self.total = max(0, self.total - 1)
        if self.cursor >= len(self.entries):
            self.cursor = max(0, len(self.entries) - 1)
        return True

    def find(self, entry_id: int) -> Entry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    # -- rendering ---------------------------------------------------------

    def viewport(self, rows: int) -> Viewport:
        """Clamp the offset for ``rows`` visible lines and return the slice.

        The offset never leaves blank rows at the bottom of a list that is
        shorter than the screen, and the cursor always lands inside the slice.
        """
        count = len(self.entries)
        rows = max(rows, 1)
        if count == 0:
            self.cursor = 0
            self.offset = 0
            return Viewport(0, 0, False, self.has_unloaded)

        self.cursor = min(max(self.cursor, 0), count - 1)
        if count < self.offset + rows:
            self.offset = max(0, count - rows)
        self.offset = min(self.offset, self.cursor)

        # Indicators steal rows and can push the cursor out; the offset only grows here.
        while True:
            more_above = self.offset > 0
            height = rows - int(more_above)
            more_below = self.offset + height < count or self.has_unloaded
            if more_below:
                height -= 1
            height = max(height, 1)
            if self.cursor < self.offset + height:
                break
            self.offset = self.cursor - height + 1
        end = min(count, self.offset + height)
        return Viewport(self.offset, end, more_above, more_below)


__all__ = ["EntryWindow", "Viewport"]
