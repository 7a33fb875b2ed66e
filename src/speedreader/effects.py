"""Requests the session makes of the outside world, and the results it gets back.

Effects are returned from :class:`~speedreader.session.ReaderSession` and
executed by the app. Events are fed back into the session one at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from speedreader.models import ENTRY_PAGE_SIZE, Entry, LookupItem

# Operation names carried by RequestFailed
OP_ENTRIES = "entries"
OP_CATEGORIES = "categories"
OP_FEEDS = "feeds"
OP_CONTENT = "content"
OP_MARK_READ = "mark_read"
OP_STAR = "star"
OP_OPEN_URL = "open_url"
OP_CREDENTIALS = "credentials"
OP_CONNECT = "connect"


# -- effects ----------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class FetchEntries:
    search: str = ""
    category_id: int | None = None
    feed_id: int | None = None
    offset: int = 0
    limit: int = ENTRY_PAGE_SIZE
    request_id: int = 0


@dataclass(slots=True, frozen=True)
class FetchCategories:
    pass


@dataclass(slots=True, frozen=True)
class FetchFeeds:
    pass


@dataclass(slots=True, frozen=True)
class ExtractContent:
    entry_id: int
    markup: str


@dataclass(slots=True, frozen=True)
class MarkRead:
    entry_id: int


@dataclass(slots=True, frozen=True)
class ToggleStar:
    entry_id: int


@dataclass(slots=True, frozen=True)
class OpenUrl:
    url: str


@dataclass(slots=True, frozen=True)
class ScheduleTick:
    delay: float
    generation: int


@dataclass(slots=True, frozen=True)
class StoreCredentials:
    url: str
    token: str


@dataclass(slots=True, frozen=True)
class Connect:
    """Build a feed client for ``url`` authenticated by ``token``."""

    url: str
    token: str


@dataclass(slots=True, frozen=True)
class Quit:
    pass


Effect = (
    FetchEntries
    | FetchCategories
    | FetchFeeds
    | ExtractContent
    | MarkRead
    | ToggleStar
    | OpenUrl
    | ScheduleTick
    | StoreCredentials
    | Connect
    | Quit
)


# -- events -----------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class EntriesLoaded:
    entries: list[Entry] = field(default_factory=list)
    total: int = 0
    offset: int = 0
    request_id: int = 0


@dataclass(slots=True, frozen=True)
class CategoriesLoaded:
    items: list[LookupItem] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class FeedsLoaded:
    items: list[LookupItem] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class ContentReady:
    entry_id: int
    text: str


@dataclass(slots=True, frozen=True)
class EntryMarkedRead:
    entry_id: int


@dataclass(slots=True, frozen=True)
class StarToggled:
    entry_id: int


@dataclass(slots=True, frozen=True)
class CredentialsStored:
    pass


@dataclass(slots=True, frozen=True)
class RequestFailed:
    """An effect could not be completed; ``message`` is shown to the user."""

    operation: str
    message: str
    request_id: int | None = None


@dataclass(slots=True, frozen=True)
class Tick:
    generation: int


@dataclass(slots=True, frozen=True)
class Resized:
    width: int
    height: int


Event = (
    EntriesLoaded
    | CategoriesLoaded
    | FeedsLoaded
    | ContentReady
    | EntryMarkedRead
    | StarToggled
    | CredentialsStored
    | RequestFailed
    | Tick
    | Resized
)


__all__ = [
    "OP_CATEGORIES",
    "OP_CONNECT",
    "OP_CONTENT",
    "OP_CREDENTIALS",
    "OP_ENTRIES",
    "OP_FEEDS",
    "OP_MARK_READ",
    "OP_OPEN_URL",
    "OP_STAR",
    "CategoriesLoaded",
    "Connect",
    "ContentReady",
    "CredentialsStored",
    "Effect",
    "EntriesLoaded",
    "EntryMarkedRead",
    "Event",
    "ExtractContent",
    "FeedsLoaded",
    "FetchCategories",
    "FetchEntries",
    "FetchFeeds",
    "MarkRead",
    "OpenUrl",
    "Quit",
    "RequestFailed",
    "Resized",
    "ScheduleTick",
    "StarToggled",
    "StoreCredentials",
    "Tick",
]
