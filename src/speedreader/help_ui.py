"""Help screen sections for each reader mode."""

from __future__ import annotations

from collections.abc import Sequence

from textual.binding import Binding

HELP_GLOBAL: list[tuple[str, str]] = [
    ("?", "Toggle this help"),
    ("Esc", "Back (quit from the top level)"),
    ("q", "Quit"),
    ("c", "Cycle background color"),
]

HELP_REMOTE_GLOBAL: list[tuple[str, str]] = [
    ("o", "Open entry in browser"),
    ("f", "Toggle starred"),
]

HELP_READING: list[tuple[str, str]] = [
    ("Space", "Play / pause"),
    ("k / Up", "Faster (+50 wpm)"),
    ("j / Down", "Slower (-50 wpm)"),
    ("Left / Right", "Seek 10 words"),
    ("g / G", "Jump to start / end"),
    ("s", "Toggle large glyphs"),
    ("r", "Toggle speed ramp for long words"),
    ("z", "Toggle zen mode"),
]

HELP_BROWSING: list[tuple[str, str]] = [
    ("j / k", "Move selection"),
    ("g / G", "Jump to first / last"),
    ("Enter", "Read entry (videos open a link view)"),
    ("/", "Search"),
    ("y", "Toggle YouTube-only filter"),
    ("m", "Mark entry read"),
]

HELP_SEARCHING: list[tuple[str, str]] = [
    ("Tab", "Cycle mode: General, Blog Title, Author, Category, Tags"),
    ("Up / Down", "Choose a category or blog"),
    ("Enter", "Apply search"),
    ("Esc", "Cancel"),
]


def _format_help_key(key: str) -> str:
    """Normalize Textual key names for user-facing help text."""
    replacements = {
        "slash": "/",
        "space": "Space",
        "question_mark": "?",
        "escape": "Esc",
    }
    key = replacements.get(key, key)
    if key.startswith("ctrl+"):
        return "Ctrl+" + key.removeprefix("ctrl+")
    return key


def build_help_sections(
    bindings: Sequence[Binding] = (),
    *,
    remote: bool = False,
) -> list[tuple[str, list[tuple[str, str]]]]:
    """Build help sections; feed-only keys are listed when ``remote`` is set."""
    general = list(HELP_GLOBAL)
    if remote:
        general.extend(HELP_REMOTE_GLOBAL)
    for binding in bindings:
        if binding.description:
            general.append((_format_help_key(binding.key), binding.description))

    sections: list[tuple[str, list[tuple[str, str]]]] = [
        ("General", general),
        ("Reading", list(HELP_READING)),
    ]
    if remote:
        sections.append(("Browsing", list(HELP_BROWSING)))
        sections.append(("Searching", list(HELP_SEARCHING)))
    return sections


__all__ = ["build_help_sections"]
