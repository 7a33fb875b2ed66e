"""Interaction state machine for the reader.

``ReaderSession`` owns every piece of UI state and never performs I/O. Key
presses and async results go in through :meth:`ReaderSession.handle_key` and
:meth:`ReaderSession.apply`; both return the effects the app must run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from speedreader.effects import (
    OP_CATEGORIES,
    OP_CONNECT,
    OP_CONTENT,
    OP_ENTRIES,
    OP_FEEDS,
    CategoriesLoaded,
    Connect,
    ContentReady,
    CredentialsStored,
    Effect,
    EntriesLoaded,
    EntryMarkedRead,
    Event,
    ExtractContent,
    FeedsLoaded,
    FetchCategories,
    FetchEntries,
    FetchFeeds,
    MarkRead,
    OpenUrl,
    Quit,
    RequestFailed,
    Resized,
    ScheduleTick,
    StarToggled,
    StoreCredentials,
    Tick,
    ToggleStar,
)
from speedreader.models import (
    DEFAULT_WPM,
    LIST_FOOTER_HEIGHT,
    LIST_HEADER_HEIGHT,
    LOGIN_FIELD_LIMIT,
    MODE_BROWSING,
    MODE_HELP,
    MODE_LOGIN,
    MODE_READING,
    MODE_SEARCHING,
    MODE_VIDEO_LINK,
    SEARCH_CATEGORY,
    SEEK_WORDS,
    WPM_STEP,
    YOUTUBE_SEARCH_TERM,
    Entry,
    LookupItem,
    UserConfig,
    is_video_url,
)
from speedreader.pacing import adjust_wpm, word_delay
from speedreader.pagination import EntryWindow
from speedreader.search import SearchState, TextField
from speedreader.themes import next_theme_index

logger = logging.getLogger(__name__)

LOGIN_FOCUS_URL = "url"
LOGIN_FOCUS_TOKEN = "token"

LOGIN_REQUIRED_MESSAGE = "Miniflux URL and API token are required"
EMPTY_ENTRY_MESSAGE = "This entry has no readable text"


def _is_printable(character: str | None) -> bool:
    return bool(character) and character.isprintable()


class ReaderSession:
    """All state for one run of the reader."""

    def __init__(
        self,
        config: UserConfig,
        *,
        words: list[str] | None = None,
        remote: bool = False,
        login_url: str = "",
        width: int = 80,
        height: int = 24,
    ) -> None:
        self.config = config
        self.wpm = config.wpm if config.wpm > 0 else DEFAULT_WPM
        self.ramp_enabled = config.ramp_speed
        self.distraction_free = config.zen_mode
        self.large_glyphs = False
        self.theme_index = config.theme_index

        self.words: list[str] = list(words or [])
        self.word_cursor = 0
        self.paused = True

        self.remote = remote
        self.window = EntryWindow()
        self.selected_entry: Entry | None = None
        self.loading = False

        self.search = SearchState()
        self.active_search = ""
        self.category_filter: int | None = None
        self.feed_filter: int | None = None
        self.youtube_filter = False
        self.category_cache: list[LookupItem] | None = None
        self.feed_cache: list[LookupItem] | None = None
        self.categories_in_flight = False
        self.feeds_in_flight = False

        self.login_url = TextField(limit=LOGIN_FIELD_LIMIT)
        self.login_url.set(login_url)
        self.login_token = TextField(limit=LOGIN_FIELD_LIMIT)
        self.login_focus = LOGIN_FOCUS_URL

        self.last_error = ""
        self.validation_message = ""

        self.session_articles = 0
        self.session_words = 0

        self.width = width
        self.height = height

        self._tick_generation = 0
        self._entries_request = 0

        if self.words:
            self.mode = MODE_READING
        elif remote:
            self.mode = MODE_BROWSING
        else:
            self.mode = MODE_LOGIN
        self.return_mode: str | None = None

    # -- derived state -----------------------------------------------------

    @property
    def base_mode(self) -> str:
        """The mode underneath the help overlay, or the current mode."""
        if self.mode == MODE_HELP and self.return_mode is not None:
            return self.return_mode
        return self.mode

    @property
    def target_entry(self) -> Entry | None:
        """The open entry if any, else the highlighted list entry."""
        if self.selected_entry is not None:
            return self.selected_entry
        if self.base_mode == MODE_BROWSING:
            return self.window.highlighted
        return None

    @property
    def list_rows(self) -> int:
        return max(1, self.height - LIST_HEADER_HEIGHT - LIST_FOOTER_HEIGHT)

    @property
    def current_word(self) -> str:
        if not self.words:
            return ""
        return self.words[min(self.word_cursor, len(self.words) - 1)]

    @property
    def search_term(self) -> str:
        """Text term sent with entry fetches under the active filters."""
        if self.youtube_filter:
            return YOUTUBE_SEARCH_TERM
        return self.active_search

    def current_delay(self) -> float:
        return word_delay(self.current_word, self.wpm, self.ramp_enabled)

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> list[Effect]:
        """Effects to run once the UI is up."""
        if self.mode == MODE_BROWSING:
            return [self._fresh_fetch()]
        return []

    # -- input -------------------------------------------------------------

    def handle_key(self, key: str, character: str | None = None) -> list[Effect]:
        """Apply one key press. ``character`` is the printable text, if any."""
        if key == "ctrl+c":
            return [Quit()]
        if self.mode == MODE_SEARCHING:
            return self._searching_key(key, character)
        if self.mode == MODE_LOGIN:
            return self._login_key(key, character)

        # Named keys like "space" keep their name; printable keys use their glyph
        # so "?" and "G" match regardless of terminal key naming.
        token = character if _is_printable(character) and key != "space" else key

        handled, effects = self._global_key(token)
        if handled:
            return effects
        handler = self._mode_handlers().get(self.mode)
        if handler is None:
            return []
        return handler(token)

    def _mode_handlers(self) -> dict[str, Callable[[str], list[Effect]]]:
        return {
            MODE_READING: self._reading_key,
            MODE_BROWSING: self._browsing_key,
        }

    def _global_key(self, token: str) -> tuple[bool, list[Effect]]:
        if token == "q":
            return True, [Quit()]
        if token == "?":
            self._toggle_help()
            return True, []
        if token == "escape":
            return True, self._escape()
        if token == "c":
            self.theme_index = next_theme_index(self.theme_index)
            return True, []
        if token == "o":
            return True, self._open_target()
        if token == "f":
            target = self.target_entry
            if self.remote and target is not None:
                return True, [ToggleStar(target.id)]
            return True, []
        return False, []

    def _toggle_help(self) -> None:
        if self.mode == MODE_HELP:
            self.mode = self.return_mode or MODE_READING
            self.return_mode = None
            return
        self._pause()
        self.return_mode = self.mode
        self.mode = MODE_HELP

    def _escape(self) -> list[Effect]:
        if self.mode == MODE_HELP:
            self._toggle_help()
            return []
        if self.mode in (MODE_READING, MODE_VIDEO_LINK) and self.remote:
            self._pause()
            self.mode = MODE_BROWSING
            self.selected_entry = None
            return []
        return [Quit()]

    def _open_target(self) -> list[Effect]:
        target = self.target_entry
        if target is None or not target.url:
            return []
        effects: list[Effect] = [OpenUrl(target.url)]
        if self.remote and is_video_url(target.url):
            effects.append(MarkRead(target.id))
        return effects

    def _reading_key(self, token: str) -> list[Effect]:
        if token == "space":
            if self.paused:
                return self._resume()
            self._pause()
        elif token == "s":
            self.large_glyphs = not self.large_glyphs
        elif token == "r":
            self.ramp_enabled = not self.ramp_enabled
        elif token == "z":
            self.distraction_free = not self.distraction_free
        elif token in ("up", "k"):
            self.wpm = adjust_wpm(self.wpm, WPM_STEP)
        elif token in ("down", "j"):
            self.wpm = adjust_wpm(self.wpm, -WPM_STEP)
        elif token == "right":
            if self.words:
                self.word_cursor = min(self.word_cursor + SEEK_WORDS, len(self.words) - 1)
        elif token == "left":
            self.word_cursor = max(self.word_cursor - SEEK_WORDS, 0)
        elif token == "g":
            self.word_cursor = 0
        elif token == "G":
            self.word_cursor = max(len(self.words) - 1, 0)
        if token in ("right", "left", "g", "G") and not self.paused:
            # Re-arm the timer for the word now shown.
            return self._resume()
        return []

    def _browsing_key(self, token: str) -> list[Effect]:
        window = self.window
        if token == "/":
            self.mode = MODE_SEARCHING
            self.search.query.clear()
            self.validation_message = ""
            return self._load_lookup()
        if token == "g":
            window.jump_start()
        elif token == "G":
            window.jump_end(self.list_rows)
        elif token in ("up", "k"):
            window.move_up()
        elif token in ("down", "j"):
            window.move_down(self.list_rows)
            if self.remote and window.needs_more():
                window.fetch_in_flight = True
                return [self._entries_effect(offset=len(window.entries))]
        elif token == "enter":
            return self._open_highlighted()
        elif token == "y":
            self.youtube_filter = not self.youtube_filter
            return [self._fresh_fetch()]
        elif token == "m":
            entry = window.highlighted
            if self.remote and entry is not None:
                return [MarkRead(entry.id)]
        return []

    def _open_highlighted(self) -> list[Effect]:
        entry = self.window.highlighted
        if entry is None:
            return []
        self.selected_entry = entry
        if is_video_url(entry.url):
            self.mode = MODE_VIDEO_LINK
            return []
        self.loading = True
        return [ExtractContent(entry.id, entry.content)]

    def _searching_key(self, key: str, character: str | None) -> list[Effect]:
        search = self.search
        if key == "enter":
            return self._submit_search()
        if key == "escape":
            self.mode = MODE_BROWSING
            self.validation_message = ""
            return []
        if key == "tab":
            search.cycle_mode()
            self.validation_message = ""
            return self._load_lookup()
        if key == "up":
            search.move_up()
            return []
        if key == "down":
            search.move_down()
            return []
        if key == "backspace":
            changed = search.query.backspace()
        elif _is_printable(character):
            changed = search.query.insert(character or "")
        else:
            return []
        if changed:
            search.refilter(self._lookup_cache())
        return []

    def _lookup_cache(self) -> list[LookupItem] | None:
        kind = self.search.lookup_kind
        if kind == "categories":
            return self.category_cache
        if kind == "feeds":
            return self.feed_cache
        return None

    def _load_lookup(self) -> list[Effect]:
        """Show cached candidates, or request the collection the first time."""
        kind = self.search.lookup_kind
        cache = self._lookup_cache()
        if kind is None or cache is not None:
            self.search.refilter(cache)
            return []
        self.search.clear_candidates()
        if not self.remote:
            return []
        if kind == "categories":
            if self.categories_in_flight:
                return []
            self.categories_in_flight = True
            return [FetchCategories()]
        if self.feeds_in_flight:
            return []
        self.feeds_in_flight = True
        return [FetchFeeds()]

    def _submit_search(self) -> list[Effect]:
        search = self.search
        if search.is_lookup:
            selected = search.selected_id()
            if selected is None:
                noun = "category" if search.mode == SEARCH_CATEGORY else "feed"
                self.validation_message = f"Select a {noun} from the list first"
                return []
            self.category_filter = selected if search.mode == SEARCH_CATEGORY else None
            self.feed_filter = None if search.mode == SEARCH_CATEGORY else selected
            self.active_search = ""
        else:
            self.category_filter = None
            self.feed_filter = None
            self.active_search = search.query.value
        self.youtube_filter = False
        self.validation_message = ""
        self.mode = MODE_BROWSING
        return [self._fresh_fetch()]

    def _login_key(self, key: str, character: str | None) -> list[Effect]:
        if key == "escape":
            return [Quit()]
        if key in ("tab", "shift+tab"):
            self._swap_login_focus()
            return []
        if key == "enter":
            if self.login_focus == LOGIN_FOCUS_URL:
                self.login_focus = LOGIN_FOCUS_TOKEN
                return []
            return self._submit_login()
        field = self.login_url if self.login_focus == LOGIN_FOCUS_URL else self.login_token
        if key == "backspace":
            field.backspace()
        elif _is_printable(character):
            field.insert(character or "")
        return []

    def _swap_login_focus(self) -> None:
        if self.login_focus == LOGIN_FOCUS_URL:
            self.login_focus = LOGIN_FOCUS_TOKEN
        else:
            self.login_focus = LOGIN_FOCUS_URL

    def _submit_login(self) -> list[Effect]:
        url = self.login_url.value.strip()
        token = self.login_token.value.strip()
        effects: list[Effect] = []
        if url:
            self.config.miniflux_url = url
        if url or token:
            effects.append(StoreCredentials(url, token))
        if not (url and token):
            self.validation_message = LOGIN_REQUIRED_MESSAGE
            self.login_focus = LOGIN_FOCUS_URL
            return effects
        self.validation_message = ""
        self.remote = True
        self.mode = MODE_BROWSING
        effects.append(Connect(url, token))
        effects.append(self._fresh_fetch())
        return effects

    # -- timing ------------------------------------------------------------

    def _pause(self) -> None:
        self.paused = True
        # Any tick already scheduled becomes stale.
        self._tick_generation += 1

    def _resume(self) -> list[Effect]:
        if not self.words:
            return []
        self.paused = False
        self._tick_generation += 1
        return [ScheduleTick(self.current_delay(), self._tick_generation)]

    def _on_tick(self, event: Tick) -> list[Effect]:
        if event.generation != self._tick_generation:
            return []
        if self.mode != MODE_READING or self.paused or not self.words:
            return []
        if self.word_cursor >= len(self.words) - 1:
            self._pause()
            self.session_articles += 1
            self.session_words += len(self.words)
            logger.debug("Finished article (%d words)", len(self.words))
            if self.remote and self.selected_entry is not None:
                return [MarkRead(self.selected_entry.id)]
            return []
        self.word_cursor += 1
        return [ScheduleTick(self.current_delay(), self._tick_generation)]

    # -- fetch helpers -----------------------------------------------------

    def _entries_effect(self, *, offset: int) -> FetchEntries:
        return FetchEntries(
            search=self.search_term,
            category_id=self.category_filter,
            feed_id=self.feed_filter,
            offset=offset,
            request_id=self._entries_request,
        )

    def _fresh_fetch(self) -> FetchEntries:
        """Start a new offset-0 query; results of older queries are dropped."""
        self._entries_request += 1
        self.window.fetch_in_flight = True
        self.loading = True
        return self._entries_effect(offset=0)

    # -- results -----------------------------------------------------------

    def apply(self, event: Event) -> list[Effect]:
        """Apply one async result, timer tick or resize."""
        if isinstance(event, Tick):
            return self._on_tick(event)
        if isinstance(event, Resized):
            self.width = event.width
            self.height = event.height
            return []
        if isinstance(event, EntriesLoaded):
            self._on_entries(event)
        elif isinstance(event, CategoriesLoaded):
            self.category_cache = list(event.items)
            self.categories_in_flight = False
            self.last_error = ""
            if self.mode == MODE_SEARCHING and self.search.lookup_kind == "categories":
                self.search.refilter(self.category_cache)
        elif isinstance(event, FeedsLoaded):
            self.feed_cache = list(event.items)
            self.feeds_in_flight = False
            self.last_error = ""
            if self.mode == MODE_SEARCHING and self.search.lookup_kind == "feeds":
                self.search.refilter(self.feed_cache)
        elif isinstance(event, ContentReady):
            self._on_content(event)
        elif isinstance(event, EntryMarkedRead):
            self.window.remove(event.entry_id)
            self.last_error = ""
        elif isinstance(event, StarToggled):
            self._on_star(event.entry_id)
        elif isinstance(event, RequestFailed):
            self._on_failure(event)
        elif isinstance(event, CredentialsStored):
            logger.debug("Credentials stored")
        return []

    def _on_entries(self, event: EntriesLoaded) -> None:
        if event.request_id != self._entries_request:
            logger.debug(
                "Dropping stale entries page (request %d, current %d)",
                event.request_id,
                self._entries_request,
            )
            return
        self.window.merge(event.entries, event.total, event.offset)
        self.loading = False
        self.last_error = ""

    def _on_content(self, event: ContentReady) -> None:
        entry = self.selected_entry
        if entry is None or entry.id != event.entry_id:
            return
        self.loading = False
        words = event.text.split()
        if not words:
            self.last_error = EMPTY_ENTRY_MESSAGE
            self.selected_entry = None
            return
        self.words = words
        self.word_cursor = 0
        self._pause()
        self.last_error = ""
        if self.mode == MODE_HELP:
            self.return_mode = MODE_READING
        else:
            self.mode = MODE_READING

    def _on_star(self, entry_id: int) -> None:
        toggled: list[Entry] = []
        for entry in (self.window.find(entry_id), self.selected_entry):
            if entry is None or entry.id != entry_id:
                continue
            if any(entry is seen for seen in toggled):
                continue
            entry.starred = not entry.starred
            toggled.append(entry)
        self.last_error = ""

    def _on_failure(self, event: RequestFailed) -> None:
        if event.operation == OP_ENTRIES:
            if event.request_id is not None and event.request_id != self._entries_request:
                return
            self.window.fetch_in_flight = False
            self.loading = False
        elif event.operation == OP_CATEGORIES:
            self.categories_in_flight = False
        elif event.operation == OP_FEEDS:
            self.feeds_in_flight = False
        elif event.operation == OP_CONTENT:
            self.loading = False
            self.selected_entry = None
        elif event.operation == OP_CONNECT:
            self.remote = False
            self.loading = False
            self.window.fetch_in_flight = False
            self.mode = MODE_LOGIN
        self.last_error = event.message
        logger.debug("Request failed: %s: %s", event.operation, event.message)


__all__ = [
    "EMPTY_ENTRY_MESSAGE",
    "LOGIN_FOCUS_TOKEN",
    "LOGIN_FOCUS_URL",
    "LOGIN_REQUIRED_MESSAGE",
    "ReaderSession",
]
