"""Entry list and search prompt rendering."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.cells import cell_len

from speedreader.models import Entry, LookupItem
from speedreader.parsing import SHORT_DATE_WIDTH, short_date
from speedreader.themes import ReaderTheme
from speedreader.ui_constants import (
    LIST_PREFIX_WIDTH,
    MIN_TITLE_WIDTH,
    SEARCH_CHROME_ROWS,
    SEARCH_MIN_CANDIDATE_ROWS,
)
from speedreader.widgets.chrome import INPUT_CURSOR, escape_rich_text, render_error_line

if TYPE_CHECKING:
    from speedreader.session import ReaderSession

ELLIPSIS = "…"
STAR_MARK = "★ "
MORE_ABOVE = "▲ (more above)"
MORE_BELOW = "▼ (more below)"
LOADING_MORE = "... loading more ..."
BROWSING_HINTS = "(/: Search, y: YouTube Filter, m: Mark Read, ?: Help)"
SEARCH_HINTS = "(Enter to search/select, Tab to change mode, Esc to cancel)"


def truncate_title(title: str, width: int) -> str:
    """Flatten newlines and cut ``title`` to ``width`` cells, ending with an ellipsis."""
    flat = title.replace("\r", "").replace("\n", " ")
    if cell_len(flat) <= width:
        return flat
    target = max(0, width - 1)
    used = 0
    kept: list[str] = []
    for ch in flat:
        w = cell_len(ch)
        if used + w > target:
            break
        kept.append(ch)
        used += w
    return "".join(kept) + ELLIPSIS


def render_entry_row(
    entry: Entry,
    *,
    selected: bool,
    width: int,
    theme: ReaderTheme,
    now: datetime | None = None,
) -> str:
    """Render one list row: cursor, date column, star column, title."""
    cursor = ">" if selected else " "
    date_text = short_date(entry.published_at, now).ljust(SHORT_DATE_WIDTH)
    star = STAR_MARK if entry.starred else "  "
    title_width = max(MIN_TITLE_WIDTH, width - LIST_PREFIX_WIDTH - 1)
    title = escape_rich_text(truncate_title(entry.title, title_width))
    if selected:
        title = f"[bold {theme.focus}]{title}[/]"
    else:
        title = f"[{theme.text}]{title}[/]"
    return f"{cursor} [{theme.line}]{date_text}[/] [{theme.star}]{star}[/]{title}"


def _list_header(session: ReaderSession) -> str:
    header = "Miniflux Unread Entries"
    if session.youtube_filter:
        header += " (YouTube Only)"
    return f"[bold]{header}[/]"


def _status_line(session: ReaderSession, theme: ReaderTheme) -> str:
    if session.last_error:
        return render_error_line(f"Error: {session.last_error}")
    parts: list[str] = []
    if session.active_search:
        parts.append(f'search "{session.active_search}"')
    if session.category_filter is not None:
        parts.append(_lookup_title(session.category_cache, session.category_filter, "category"))
    if session.feed_filter is not None:
        parts.append(_lookup_title(session.feed_cache, session.feed_filter, "feed"))
    count = f"{len(session.window.entries)} of {session.window.total}"
    if session.loading and session.window.entries:
        count += " · loading"
    parts.insert(0, count)
    return f"[{theme.hud}]{escape_rich_text(' | '.join(parts))}[/]"


def _lookup_title(items: list[LookupItem] | None, item_id: int, noun: str) -> str:
    for item in items or []:
        if item.id == item_id:
            return f"{noun}: {item.title}"
    return f"{noun} #{item_id}"


def render_browsing(
    session: ReaderSession, theme: ReaderTheme, now: datetime | None = None
) -> str:
    """Render the entry list with scroll indicators."""
    window = session.window
    lines = [_list_header(session), _status_line(session, theme), ""]
    indent = " " * LIST_PREFIX_WIDTH

    if session.loading and not window.entries:
        lines.append("Loading...")
    elif not window.entries:
        lines.append("No entries found.")
    else:
        view = window.viewport(session.list_rows)
        if view.more_above:
            lines.append(f"[{theme.hud}]{indent}{MORE_ABOVE}[/]")
        for index in range(view.start, view.end):
            lines.append(
                render_entry_row(
                    window.entries[index],
                    selected=index == window.cursor,
                    width=session.width,
                    theme=theme,
                    now=now,
                )
            )
        if view.more_below:
            marker = LOADING_MORE if window.fetch_in_flight else MORE_BELOW
            lines.append(f"[{theme.hud}]{indent}{escape_rich_text(marker)}[/]")

    lines.append("")
    lines.append(f"[{theme.hud}]{escape_rich_text(BROWSING_HINTS)}[/]")
    return "\n".join(lines)


def candidate_window(cursor: int, count: int, height: int) -> tuple[int, int]:
    """Return the [start, end) slice of candidates that keeps ``cursor`` visible."""
    rows = max(SEARCH_MIN_CANDIDATE_ROWS, height - SEARCH_CHROME_ROWS)
    start = cursor - rows + 1 if cursor >= rows else 0
    end = min(count, start + rows)
    return start, end


def render_searching(session: ReaderSession, theme: ReaderTheme) -> str:
    """Render the search prompt and, in category/blog modes, the candidate list."""
    search = session.search
    lines = [
        f"[bold]Search Articles ({escape_rich_text(search.label)})[/]",
        "",
        f"[{theme.focus}]>[/] {escape_rich_text(search.query.value)}[{theme.hud}]{INPUT_CURSOR}[/]",
    ]
    if session.validation_message:
        lines.append(render_error_line(session.validation_message))
    elif session.last_error:
        lines.append(render_error_line(f"Error: {session.last_error}"))

    if search.is_lookup:
        lines.append("")
        in_flight = (
            session.categories_in_flight
            if search.lookup_kind == "categories"
            else session.feeds_in_flight
        )
        if not search.candidates:
            lines.append("Loading..." if in_flight else "No matches.")
        start, end = candidate_window(search.cursor, len(search.candidates), session.height)
        for index in range(start, end):
            title = escape_rich_text(search.candidates[index])
            if index == search.cursor:
                lines.append(f"> [bold {theme.focus}]{title}[/]")
            else:
                lines.append(f"  [{theme.text}]{title}[/]")

    lines.append("")
    lines.append(f"[{theme.hud}]{escape_rich_text(SEARCH_HINTS)}[/]")
    return "\n".join(lines)


__all__ = [
    "ELLIPSIS",
    "LOADING_MORE",
    "MORE_ABOVE",
    "MORE_BELOW",
    "candidate_window",
    "render_browsing",
    "render_entry_row",
    "render_searching",
    "truncate_title",
]
