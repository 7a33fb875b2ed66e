"""Shared markup helpers plus the login, help and HUD chrome."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.cells import cell_len
from rich.markup import escape as escape_markup

from speedreader.session import LOGIN_FOCUS_TOKEN, LOGIN_FOCUS_URL
from speedreader.themes import ReaderTheme
from speedreader.ui_constants import PROGRESS_BAR_WIDTH

if TYPE_CHECKING:
    from speedreader.session import ReaderSession

INPUT_CURSOR = "█"


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


def center_line(markup: str, plain: str, width: int) -> str:
    """Left-pad ``markup`` so its plain text sits centered in ``width`` cells."""
    pad = max(0, (width - cell_len(plain)) // 2)
    return " " * pad + markup


def render_progress_bar(current: int, total: int, width: int = PROGRESS_BAR_WIDTH) -> str:
    """Render a progress bar like ``[=====-----] 50%``."""
    if total <= 0:
        return ""
    fraction = min(max(current / total, 0.0), 1.0)
    filled = int(fraction * width)
    return f"[{'=' * filled}{'-' * (width - filled)}] {int(fraction * 100)}%"


def format_time_remaining(seconds: int) -> str:
    seconds = max(0, seconds)
    return f"Time Remaining: {seconds // 60:02d}:{seconds % 60:02d}"


def render_error_line(message: str) -> str:
    return f"[bold red]{escape_rich_text(message)}[/]" if message else ""


def _render_field(value: str, *, focused: bool, masked: bool, theme: ReaderTheme) -> str:
    shown = "*" * len(value) if masked and not focused else value
    text = escape_rich_text(shown)
    if focused:
        return f"[{theme.focus}]>[/] {text}[{theme.hud}]{INPUT_CURSOR}[/]"
    return f"  {text}"


def render_login(session: ReaderSession, theme: ReaderTheme) -> str:
    """Render the credentials prompt."""
    lines = ["[bold]Miniflux Login[/]", ""]
    message = session.validation_message or session.last_error
    if message:
        lines.extend([render_error_line(message), ""])
    lines.append("Miniflux URL:")
    lines.append(
        _render_field(
            session.login_url.value,
            focused=session.login_focus == LOGIN_FOCUS_URL,
            masked=False,
            theme=theme,
        )
    )
    lines.append("")
    lines.append("API Token:")
    lines.append(
        _render_field(
            session.login_token.value,
            focused=session.login_focus == LOGIN_FOCUS_TOKEN,
            masked=True,
            theme=theme,
        )
    )
    lines.append("")
    lines.append(f"[{theme.hud}](Enter to switch fields, or submit. Tab to switch. Esc to quit)[/]")
    return "\n".join(lines)


def render_help(sections: list[tuple[str, list[tuple[str, str]]]], theme: ReaderTheme) -> str:
    """Render help sections as aligned key/description columns."""
    key_width = max(
        (cell_len(key) for _, entries in sections for key, _ in entries),
        default=0,
    )
    lines = ["[bold]Help & Keybindings[/]"]
    for title, entries in sections:
        if not entries:
            continue
        lines.append("")
        lines.append(f"[bold {theme.hud}]{escape_rich_text(title)}[/]")
        for key, description in entries:
            padding = " " * (key_width - cell_len(key) + 2)
            lines.append(
                f"[bold {theme.focus}]{escape_rich_text(key)}[/]{padding}"
                f"{escape_rich_text(description)}"
            )
    lines.append("")
    lines.append("[dim]Press Esc or ? to close.[/]")
    return "\n".join(lines)


__all__ = [
    "INPUT_CURSOR",
    "center_line",
    "escape_rich_text",
    "format_time_remaining",
    "render_error_line",
    "render_help",
    "render_login",
    "render_progress_bar",
]
