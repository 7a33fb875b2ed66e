"""API token storage in the system keyring."""

from __future__ import annotations

import logging

import keyring

from speedreader.models import KEYRING_SERVICE, KEYRING_TOKEN_KEY

logger = logging.getLogger(__name__)


def get_token(service: str = KEYRING_SERVICE, key: str = KEYRING_TOKEN_KEY) -> str:
    """Return the stored token, or "" when none is stored.

    Backend failures raise ``keyring.errors.KeyringError``.
    """
    token = keyring.get_password(service, key)
    return token or ""


def set_token(token: str, service: str = KEYRING_SERVICE, key: str = KEYRING_TOKEN_KEY) -> None:
    keyring.set_password(service, key, token)
    logger.debug("Stored API token in keyring service %s", service)


__all__ = ["get_token", "set_token"]
