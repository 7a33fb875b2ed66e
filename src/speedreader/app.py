"""Textual app that drives a ReaderSession.

Usage:
    speedreader                 # Browse unread Miniflux entries
    speedreader article.txt     # Read a local text file

Key bindings (press ? inside the app for the full list):
    Space   - Play / pause reading
    j/k     - Slower / faster while reading, move selection while browsing
    Enter   - Read the highlighted entry
    /       - Search entries (Tab cycles General, Blog Title, Author, Category, Tags)
    y       - Toggle YouTube-only filter
    m       - Mark entry read
    o       - Open entry in browser
    f       - Toggle starred
    c       - Cycle background color
    Esc     - Back / quit
    q       - Quit
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from keyring.errors import KeyringError
from textual import on
from textual.app import App, ComposeResult
from textual.css.query import NoMatches
from textual.events import Resize
from textual.message import Message
from textual.timer import Timer

from speedreader.config import save_config
from speedreader.effects import (
    OP_CATEGORIES,
    OP_CONNECT,
    OP_CONTENT,
    OP_CREDENTIALS,
    OP_ENTRIES,
    OP_FEEDS,
    OP_MARK_READ,
    OP_OPEN_URL,
    OP_STAR,
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
from speedreader.models import UserConfig
from speedreader.services.interfaces import AppServices, FeedClient, build_default_app_services
from speedreader.services.miniflux import MinifluxError
from speedreader.session import ReaderSession
from speedreader.themes import theme_for
from speedreader.ui_constants import APP_BINDINGS, APP_CSS
from speedreader.widgets import ReaderView, render_session

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "Not connected to Miniflux"


class SpeedReaderApp(App):
    """A terminal speed reader for Miniflux entries and local text."""

    TITLE = "speedreader"
    CSS = APP_CSS
    BINDINGS = APP_BINDINGS
    ENABLE_COMMAND_PALETTE = False

    class SessionEvent(Message):
        """Carries an async result or timer tick back onto the app's queue."""

        def __init__(self, event: Event) -> None:
            super().__init__()
            self.event = event

    def __init__(
        self,
        session: ReaderSession,
        *,
        client: FeedClient | None = None,
        services: AppServices | None = None,
        save_config_fn: Callable[[UserConfig], bool] = save_config,
    ) -> None:
        super().__init__()
        self.session = session
        self._client = client
        self._services: AppServices = services or build_default_app_services()
        self._save_config = save_config_fn
        self._tick_timer: Timer | None = None
        self._theme_index: int | None = None
        self._effect_handlers: dict[type, Callable[[Any], None]] = {
            FetchEntries: self._run_fetch_entries,
            FetchCategories: self._run_fetch_categories,
            FetchFeeds: self._run_fetch_feeds,
            ExtractContent: self._run_extract_content,
            MarkRead: self._run_mark_read,
            ToggleStar: self._run_toggle_star,
            OpenUrl: self._run_open_url,
            ScheduleTick: self._run_schedule_tick,
            StoreCredentials: self._run_store_credentials,
            Connect: self._run_connect,
            Quit: self._run_quit,
        }

        # Background task tracking (prevent GC of fire-and-forget tasks)
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def client(self) -> FeedClient | None:
        return self._client

    def compose(self) -> ComposeResult:
        yield ReaderView(id="reader")

    def on_mount(self) -> None:
        """Size the session to the terminal and run its startup effects."""
        self.session.width = self.size.width
        self.session.height = self.size.height
        self._run_effects(self.session.start())
        self._refresh_view()
        logger.debug(
            "App mounted: mode=%s remote=%s words=%d",
            self.session.mode,
            self.session.remote,
            len(self.session.words),
        )
        try:
            self.query_one(ReaderView).focus()
        except NoMatches:
            pass

    async def on_unmount(self) -> None:
        """Stop the reading timer, cancel pending requests and close the client."""
        timer = self._tick_timer
        self._tick_timer = None
        if timer is not None:
            timer.stop()

        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()

        client = self._client
        self._client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug("Failed to close Miniflux client: %s", e, exc_info=True)

    # -- event plumbing ----------------------------------------------------

    def on_resize(self, event: Resize) -> None:
        self._dispatch(Resized(event.size.width, event.size.height))

    @on(ReaderView.KeyPressed)
    def relay_key_to_session(self, message: ReaderView.KeyPressed) -> None:
        self._run_effects(self.session.handle_key(message.key, message.character))
        self._refresh_view()

    @on(SessionEvent)
    def apply_session_event(self, message: SessionEvent) -> None:
        self._dispatch(message.event)

    def _dispatch(self, event: Event) -> None:
        self._run_effects(self.session.apply(event))
        self._refresh_view()

    def _post_event(self, event: Event) -> None:
        self.post_message(self.SessionEvent(event))

    def _run_effects(self, effects: list[Effect]) -> None:
        for effect in effects:
            handler = self._effect_handlers.get(type(effect))
            if handler is None:
                logger.warning("No handler for effect %r", effect)
                continue
            handler(effect)

    def _refresh_view(self) -> None:
        theme = theme_for(self.session.theme_index)
        try:
            view = self.query_one(ReaderView)
        except NoMatches:
            return
        if self._theme_index != self.session.theme_index:
            self._theme_index = self.session.theme_index
            # None clears the inline rule so the terminal background shows through
            self.screen.styles.background = theme.background
            view.styles.background = theme.background
            view.styles.color = theme.text
        view.update(render_session(self.session, theme, self.BINDINGS))

    # -- background work ---------------------------------------------------

    def _track_task(self, coro: Any) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)

    async def _guarded(
        self,
        operation: str,
        work: Callable[[], Awaitable[Event | None]],
        request_id: int | None = None,
    ) -> None:
        """Run ``work`` and post its result, or a RequestFailed on known errors."""
        try:
            result = await work()
        except MinifluxError as e:
            logger.warning("%s failed: %s", operation, e)
            failure = str(e)
        except (httpx.HTTPError, OSError, ValueError, KeyringError) as e:
            logger.warning("%s failed: %s", operation, e, exc_info=True)
            failure = str(e) or type(e).__name__
        except Exception as e:
            logger.warning("Unexpected %s failure: %s", operation, e, exc_info=True)
            failure = str(e) or type(e).__name__
        else:
            if result is not None:
                self._post_event(result)
            return
        self._post_event(RequestFailed(operation, failure, request_id))

    def _require_client(self, operation: str, request_id: int | None = None) -> FeedClient | None:
        """Return the client, failing the request if the session expected one."""
        if self._client is None and self.session.remote:
            self._dispatch(RequestFailed(operation, NOT_CONNECTED_MESSAGE, request_id))
        return self._client

    # -- effect runners ----------------------------------------------------

    def _run_fetch_entries(self, effect: FetchEntries) -> None:
        client = self._require_client(OP_ENTRIES, effect.request_id)
        if client is None:
            return

        async def work() -> Event:
            page = await client.list_entries(
                search=effect.search,
                category_id=effect.category_id,
                feed_id=effect.feed_id,
                offset=effect.offset,
                limit=effect.limit,
            )
            return EntriesLoaded(page.entries, page.total, effect.offset, effect.request_id)

        self._track_task(self._guarded(OP_ENTRIES, work, effect.request_id))

    def _run_fetch_categories(self, _effect: FetchCategories) -> None:
        client = self._require_client(OP_CATEGORIES)
        if client is None:
            return

        async def work() -> Event:
            return CategoriesLoaded(await client.list_categories())

        self._track_task(self._guarded(OP_CATEGORIES, work))

    def _run_fetch_feeds(self, _effect: FetchFeeds) -> None:
        client = self._require_client(OP_FEEDS)
        if client is None:
            return

        async def work() -> Event:
            return FeedsLoaded(await client.list_feeds())

        self._track_task(self._guarded(OP_FEEDS, work))

    def _run_extract_content(self, effect: ExtractContent) -> None:
        extractor = self._services.content

        async def work() -> Event:
            text = await asyncio.to_thread(extractor.to_plain_text, effect.markup)
            return ContentReady(effect.entry_id, text)

        self._track_task(self._guarded(OP_CONTENT, work))

    def _run_mark_read(self, effect: MarkRead) -> None:
        client = self._require_client(OP_MARK_READ)
        if client is None:
            return

        async def work() -> Event:
            await client.mark_read(effect.entry_id)
            return EntryMarkedRead(effect.entry_id)

        self._track_task(self._guarded(OP_MARK_READ, work))

    def _run_toggle_star(self, effect: ToggleStar) -> None:
        client = self._require_client(OP_STAR)
        if client is None:
            return

        async def work() -> Event:
            await client.toggle_starred(effect.entry_id)
            return StarToggled(effect.entry_id)

        self._track_task(self._guarded(OP_STAR, work))

    def _run_open_url(self, effect: OpenUrl) -> None:
        browser = self._services.browser

        # Best effort: a missing browser is logged, not shown.
        async def work() -> Event | None:
            if not await asyncio.to_thread(browser.open, effect.url):
                logger.warning("No browser could open %s", effect.url)
            return None

        self._track_task(self._guarded(OP_OPEN_URL, work))

    def _run_schedule_tick(self, effect: ScheduleTick) -> None:
        timer = self._tick_timer
        if timer is not None:
            timer.stop()
        self._tick_timer = self.set_timer(
            effect.delay, functools.partial(self._dispatch, Tick(effect.generation))
        )

    def _run_store_credentials(self, effect: StoreCredentials) -> None:
        config = self.session.config
        credentials = self._services.credentials
        save = self._save_config

        async def work() -> Event:
            if effect.url:
                config.miniflux_url = effect.url
                if not await asyncio.to_thread(save, config):
                    raise OSError("could not write the config file")
            if effect.token:
                await asyncio.to_thread(credentials.set_token, effect.token)
            return CredentialsStored()

        self._track_task(self._guarded(OP_CREDENTIALS, work))

    def _run_connect(self, effect: Connect) -> None:
        previous = self._client
        try:
            self._client = self._services.connect(effect.url, effect.token)
        except ValueError as e:
            logger.warning("Could not connect to %s: %s", effect.url, e)
            self._client = None
            self._dispatch(RequestFailed(OP_CONNECT, str(e)))
            return
        if previous is not None:
            self._track_task(previous.aclose())
        logger.debug("Connected to Miniflux at %s", effect.url)

    def _run_quit(self, _effect: Quit) -> None:
        self.exit()


__all__ = ["NOT_CONNECTED_MESSAGE", "SpeedReaderApp"]
