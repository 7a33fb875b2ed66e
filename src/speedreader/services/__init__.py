"""Service layer: Miniflux transport, token storage and app adapters."""

from speedreader.services.credentials import get_token, set_token
from speedreader.services.miniflux import (
    MinifluxAPIError,
    MinifluxAuthError,
    MinifluxClient,
    MinifluxError,
)

__all__ = [
    "MinifluxAPIError",
    "MinifluxAuthError",
    "MinifluxClient",
    "MinifluxError",
    "get_token",
    "set_token",
]
