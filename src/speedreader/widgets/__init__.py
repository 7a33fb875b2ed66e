"""Widget and render helpers for the reader screens."""

from speedreader.widgets.chrome import (
    escape_rich_text,
    format_time_remaining,
    render_help,
    render_login,
    render_progress_bar,
)
from speedreader.widgets.listing import (
    candidate_window,
    render_browsing,
    render_entry_row,
    render_searching,
    truncate_title,
)
from speedreader.widgets.reader_view import ReaderView, render_session
from speedreader.widgets.reading import build_hud_lines, render_reading, render_video_link

__all__ = [
    "ReaderView",
    "build_hud_lines",
    "candidate_window",
    "escape_rich_text",
    "format_time_remaining",
    "render_browsing",
    "render_entry_row",
    "render_help",
    "render_login",
    "render_progress_bar",
    "render_reading",
    "render_searching",
    "render_session",
    "render_video_link",
    "truncate_title",
]
