"""The single full-screen widget that shows whichever mode the session is in."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from textual.binding import Binding
from textual.events import Key
from textual.message import Message
from textual.widgets import Static

from speedreader.help_ui import build_help_sections
from speedreader.models import (
    MODE_BROWSING,
    MODE_HELP,
    MODE_LOGIN,
    MODE_SEARCHING,
    MODE_VIDEO_LINK,
)
from speedreader.themes import ReaderTheme
from speedreader.widgets.chrome import render_help, render_login
from speedreader.widgets.listing import render_browsing, render_searching
from speedreader.widgets.reading import render_reading, render_video_link

if TYPE_CHECKING:
    from speedreader.session import ReaderSession


def render_session(
    session: ReaderSession,
    theme: ReaderTheme,
    bindings: Sequence[Binding] = (),
    now: datetime | None = None,
) -> str:
    """Render the markup for the session's current mode."""
    mode = session.mode
    if mode == MODE_HELP:
        return render_help(build_help_sections(bindings, remote=session.remote), theme)
    if mode == MODE_LOGIN:
        return render_login(session, theme)
    if mode == MODE_BROWSING:
        return render_browsing(session, theme, now)
    if mode == MODE_SEARCHING:
        return render_searching(session, theme)
    if mode == MODE_VIDEO_LINK:
        return render_video_link(session, theme)
    return render_reading(session, theme)


class ReaderView(Static, can_focus=True):
    """Focusable canvas that forwards every key press to the app."""

    DEFAULT_CSS = """
    ReaderView {
        width: 100%;
        height: 100%;
    }
    """

    class KeyPressed(Message):
        """Posted for each key; ``character`` is set only for printable keys."""

        def __init__(self, key: str, character: str | None) -> None:
            super().__init__()
            self.key = key
            self.character = character

    def on_key(self, event: Key) -> None:
        character = event.character if event.is_printable else None
        event.prevent_default()
        event.stop()
        self.post_message(self.KeyPressed(event.key, character))


__all__ = ["ReaderView", "render_session"]
