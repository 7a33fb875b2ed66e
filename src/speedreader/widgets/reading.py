"""Word display with eye-guide alignment, the reading HUD and the video link view."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.cells import cell_len

from speedreader.pacing import seconds_remaining, split_word, to_full_width
from speedreader.themes import ReaderTheme
from speedreader.widgets.chrome import (
    center_line,
    escape_rich_text,
    format_time_remaining,
    render_error_line,
    render_progress_bar,
)

if TYPE_CHECKING:
    from speedreader.session import ReaderSession

SEPARATOR_MIN_HEIGHT = 11  # Guide lines only fit on taller terminals
VERTICAL_GAP = 1


def build_hud_lines(session: ReaderSession) -> list[str]:
    """Plain-text HUD lines shown under the word."""
    words = session.words
    left = len(words) - session.word_cursor
    status = "PLAYING" if not session.paused else "PAUSED (Press Space)"
    ramp = "ON" if session.ramp_enabled else "OFF"
    controls = f"{status} | Size: s | Color: c | Ramp: r ({ramp}) | Zen: z"
    if session.remote:
        controls += " | Esc: Back | o: Open | f: Star"
    lines = [
        f"WPM: {session.wpm} | {format_time_remaining(seconds_remaining(left, session.wpm))}",
        render_progress_bar(session.word_cursor, len(words)),
        controls,
    ]
    if session.selected_entry is not None:
        lines.append(f"Title: {session.selected_entry.title}")
    return lines


def render_word_line(session: ReaderSession, theme: ReaderTheme) -> str:
    """Render the current word with its pivot letter at the horizontal center."""
    lead, pivot, trail = split_word(session.current_word)
    if session.large_glyphs:
        lead, pivot, trail = to_full_width(lead), to_full_width(pivot), to_full_width(trail)
    pad = max(0, session.width // 2 - cell_len(lead))
    return (
        " " * pad
        + f"[{theme.text}]{escape_rich_text(lead)}[/]"
        + f"[bold {theme.focus}]{escape_rich_text(pivot)}[/]"
        + f"[{theme.text}]{escape_rich_text(trail)}[/]"
    )


def render_reading(session: ReaderSession, theme: ReaderTheme) -> str:
    """Render the reading screen for the current terminal size."""
    width = max(session.width, 1)
    if not session.words:
        return "Nothing to read."

    hud = [] if session.distraction_free else build_hud_lines(session)
    if session.last_error and not session.distraction_free:
        hud_markup = [render_error_line(session.last_error)]
        hud_plain = [session.last_error]
    else:
        hud_markup, hud_plain = [], []
    for line in hud:
        hud_markup.append(f"[{theme.hud}]{escape_rich_text(line)}[/]")
        hud_plain.append(line)

    main_height = max(0, session.height - len(hud_markup))
    separator = f"[{theme.line}]{'─' * width}[/]"
    word_line = render_word_line(session, theme)
    if session.height >= SEPARATOR_MIN_HEIGHT and not session.distraction_free:
        gap = [""] * VERTICAL_GAP
        block = [separator, *gap, word_line, *gap, separator]
    else:
        block = [word_line]

    top = max(0, (main_height - len(block)) // 2)
    bottom = max(0, main_height - len(block) - top)
    lines = [""] * top + block + [""] * bottom
    lines.extend(
        center_line(markup, plain, width) for markup, plain in zip(hud_markup, hud_plain)
    )
    return "\n".join(lines)


def render_video_link(session: ReaderSession, theme: ReaderTheme) -> str:
    entry = session.selected_entry
    if entry is None:
        return "No video link selected. (Esc to go back)"
    lines = [
        "[bold]YouTube Video Link[/]",
        "",
        f"Title: {escape_rich_text(entry.title)}",
        "",
        f"URL: {escape_rich_text(entry.url)}",
        "",
    ]
    if session.last_error:
        lines.extend([render_error_line(session.last_error), ""])
    lines.append(f"[{theme.hud}](Press o to open in browser, Esc to go back to list)[/]")
    return "\n".join(lines)


__all__ = [
    "build_hud_lines",
    "render_reading",
    "render_video_link",
    "render_word_line",
]
