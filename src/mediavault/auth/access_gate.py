"""Shared-passphrase access gate (a convenience lock, not authentication)."""

from __future__ import annotations

import hmac
import logging

from mediavault.errors import AccessDeniedError
from mediavault.util.key_value import KeyValueStore

logger = logging.getLogger(__name__)

LOGGED_IN_KEY: str = "mv_isLoggedIn"


class AccessGate:
    """Compare a typed code with the shared passphrase and remember success."""

    def __init__(self, passphrase: str, store: KeyValueStore) -> None:
        if not isinstance(passphrase, str) or not passphrase:
            raise ValueError("passphrase must be a non-empty string")
        self._passphrase = passphrase
        self._store = store

    @property
    def is_unlocked(self) -> bool:
        return self._store.get_item(LOGGED_IN_KEY) == "true"

    def unlock(self, code: str) -> None:
        """
        Raises:
            AccessDeniedError: if the code does not match.
        """
        if not isinstance(code, str) or not hmac.compare_digest(
            code.encode("utf-8"), self._passphrase.encode("utf-8")
        ):
            logger.info("Rejected access code")
            raise AccessDeniedError("Incorrect access code")
        self._store.set_item(LOGGED_IN_KEY, "true")

    def lock(self) -> None:
        self._store.remove_item(LOGGED_IN_KEY)
