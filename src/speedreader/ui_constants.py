"""Internal UI constants for the SpeedReaderApp."""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_CSS = """
Screen {
    layers: base;
}

#reader {
    width: 100%;
    height: 100%;
    padding: 0 1;
}

#reader:focus {
    border: none;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("ctrl+c", "quit", "Quit immediately", show=False, priority=True),
]

# Reader footer / HUD widths
PROGRESS_BAR_WIDTH = 40
LIST_PREFIX_WIDTH = 15  # Cursor, space, date column, space, star column
MIN_TITLE_WIDTH = 10
SEARCH_MIN_CANDIDATE_ROWS = 5
SEARCH_CHROME_ROWS = 6  # Header, blank, prompt, blank, footer lines

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "LIST_PREFIX_WIDTH",
    "MIN_TITLE_WIDTH",
    "PROGRESS_BAR_WIDTH",
    "SEARCH_CHROME_ROWS",
    "SEARCH_MIN_CANDIDATE_ROWS",
]
