"""Data models and constants for the speedreader application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# Application identity, used for platformdirs config paths
CONFIG_APP_NAME = "speedreader"

# Secure token storage
KEYRING_SERVICE = "speedreader"
KEYRING_TOKEN_KEY = "miniflux-token"

# Screen modes
MODE_READING = "reading"
MODE_BROWSING = "browsing"
MODE_SEARCHING = "searching"
MODE_VIDEO_LINK = "video_link"
MODE_LOGIN = "login"
MODE_HELP = "help"
MODES = (
    MODE_READING,
    MODE_BROWSING,
    MODE_SEARCHING,
    MODE_VIDEO_LINK,
    MODE_LOGIN,
    MODE_HELP,
)

# Search modes, in tab-cycling order
SEARCH_GENERAL = "general"
SEARCH_FEED = "feed"
SEARCH_AUTHOR = "author"
SEARCH_CATEGORY = "category"
SEARCH_TAG = "tag"
SEARCH_MODES = (SEARCH_GENERAL, SEARCH_FEED, SEARCH_AUTHOR, SEARCH_CATEGORY, SEARCH_TAG)
SEARCH_MODE_LABELS: dict[str, str] = {
    SEARCH_GENERAL: "General",
    SEARCH_FEED: "Blog Title",
    SEARCH_AUTHOR: "Author",
    SEARCH_CATEGORY: "Category",
    SEARCH_TAG: "Tags",
}
# Modes that pick an id from a cached lookup collection instead of sending text
LOOKUP_SEARCH_MODES = (SEARCH_FEED, SEARCH_CATEGORY)

# Reading speed
DEFAULT_WPM = 300
MIN_WPM = 50
WPM_STEP = 50
SEEK_WORDS = 10

# Entry list paging
ENTRY_PAGE_SIZE = 50
PREFETCH_THRESHOLD = 10  # Fetch the next page when this close to the loaded end
SCROLL_MARGIN = 2
LIST_HEADER_HEIGHT = 3  # Title, status line and a blank line
LIST_FOOTER_HEIGHT = 2  # Blank line + key hint

# Text field limits
SEARCH_QUERY_LIMIT = 156
LOGIN_FIELD_LIMIT = 200

# Video entries are opened in the browser instead of being read
VIDEO_URL_PATTERNS = ("youtube.com/watch?v=", "youtu.be/")
YOUTUBE_SEARCH_TERM = "youtube.com/watch?v=|youtu.be/"

# Miniflux API
MINIFLUX_TIMEOUT = 60  # Seconds per request
MINIFLUX_USER_AGENT = "miniflux-speedreader/0.3"


@dataclass(slots=True)
class Entry:
    """An unread Miniflux entry."""

    id: int
    title: str
    url: str
    published_at: datetime | None = None
    starred: bool = False
    content: str = ""  # Raw HTML as delivered by the server
    feed_title: str = ""
    author: str = ""


@dataclass(slots=True)
class LookupItem:
    """A category or feed that can narrow the entry query."""

    id: int
    title: str


@dataclass(slots=True)
class EntryPage:
    """One page of entries plus the server-reported total for the query."""

    entries: list[Entry]
    total: int


@dataclass(slots=True)
class UserConfig:
    """Persisted preferences and lifetime reading statistics."""

    wpm: int = DEFAULT_WPM
    theme_index: int = 0
    ramp_speed: bool = False
    zen_mode: bool = False
    total_articles: int = 0
    total_words: int = 0
    miniflux_url: str = ""
    version: int = 1


def is_video_url(url: str) -> bool:
    """Return True when the URL points at a hosted video instead of an article."""
    return any(pattern in url for pattern in VIDEO_URL_PATTERNS)


__all__ = [
    "CONFIG_APP_NAME",
    "DEFAULT_WPM",
    "ENTRY_PAGE_SIZE",
    "KEYRING_SERVICE",
    "KEYRING_TOKEN_KEY",
    "LIST_FOOTER_HEIGHT",
    "LIST_HEADER_HEIGHT",
    "LOGIN_FIELD_LIMIT",
    "LOOKUP_SEARCH_MODES",
    "MINIFLUX_TIMEOUT",
    "MINIFLUX_USER_AGENT",
    "MIN_WPM",
    "MODES",
    "MODE_BROWSING",
    "MODE_HELP",
    "MODE_LOGIN",
    "MODE_READING",
    "MODE_SEARCHING",
    "MODE_VIDEO_LINK",
    "PREFETCH_THRESHOLD",
    "SCROLL_MARGIN",
    "SEARCH_AUTHOR",
    "SEARCH_CATEGORY",
    "SEARCH_FEED",
    "SEARCH_GENERAL",
    "SEARCH_MODES",
    "SEARCH_MODE_LABELS",
    "SEARCH_QUERY_LIMIT",
    "SEARCH_TAG",
    "SEEK_WORDS",
    "VIDEO_URL_PATTERNS",
    "WPM_STEP",
    "YOUTUBE_SEARCH_TERM",
    "Entry",
    "EntryPage",
    "LookupItem",
    "UserConfig",
    "is_video_url",
]
