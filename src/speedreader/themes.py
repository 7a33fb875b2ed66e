"""Reader color palettes, cycled with ``c`` and persisted by index."""

from __future__ import annotations

from dataclasses import dataclass

# Foregrounds on dark backgrounds
_LIGHT_TEXT = "#eeeeee"
_DARK_HUD = "#585858"
# Foregrounds on light backgrounds
_DARK_TEXT = "#000000"
_LIGHT_HUD = "#444444"

FOCUS_COLOR = "#ff0000"  # Pivot letter and selected list row
LINE_COLOR = "#444444"  # Guide lines and dates
STAR_COLOR = "#ffd700"


@dataclass(slots=True, frozen=True)
class ReaderTheme:
    """Colors used by the render step. ``background`` None keeps the terminal's own."""

    name: str
    background: str | None
    text: str = _LIGHT_TEXT
    hud: str = _DARK_HUD
    focus: str = FOCUS_COLOR
    line: str = LINE_COLOR
    star: str = STAR_COLOR


READER_THEMES: tuple[ReaderTheme, ...] = (
    ReaderTheme("terminal", None),
    ReaderTheme("black", "#000000"),
    ReaderTheme("catppuccin-mocha", "#1e1e2e"),
    ReaderTheme("one-dark", "#282c34"),
    ReaderTheme("gruvbox-light", "#fbf1c7", text=_DARK_TEXT, hud=_LIGHT_HUD),
    ReaderTheme("white", "#ffffff", text=_DARK_TEXT, hud=_LIGHT_HUD),
)
THEME_NAMES: list[str] = [theme.name for theme in READER_THEMES]


def normalize_theme_index(index: int) -> int:
    """Map an out-of-range persisted index back to the default theme."""
    if 0 <= index < len(READER_THEMES):
        return index
    return 0


def theme_for(index: int) -> ReaderTheme:
    return READER_THEMES[normalize_theme_index(index)]


def next_theme_index(index: int) -> int:
    return (normalize_theme_index(index) + 1) % len(READER_THEMES)


__all__ = [
    "FOCUS_COLOR",
    "LINE_COLOR",
    "READER_THEMES",
    "STAR_COLOR",
    "THEME_NAMES",
    "ReaderTheme",
    "next_theme_index",
    "normalize_theme_index",
    "theme_for",
]
