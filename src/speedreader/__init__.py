"""Terminal speed reader for Miniflux entries."""

from speedreader.models import Entry, EntryPage, LookupItem, UserConfig
from speedreader.pacing import split_word, word_delay
from speedreader.session import ReaderSession

__version__ = "0.3.0"

__all__ = [
    "Entry",
    "EntryPage",
    "LookupItem",
    "ReaderSession",
    "UserConfig",
    "__version__",
    "split_word",
    "word_delay",
]
