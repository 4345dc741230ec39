"""Read-only adapter fetching a snapshot file from a static content host."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from mediavault.config import DEFAULT_STATIC_PATH
from mediavault.errors import (
    AdapterUnavailableError,
    HttpErrorInfo,
    InvalidInputError,
    map_http_error,
)
from mediavault.models import Snapshot

from .base import PersistenceAdapter

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC: float = 10.0


def github_raw_url(owner: str, repo: str, branch: str = "main") -> str:
    """Base URL serving raw files of a public GitHub repository."""
    return f"https://raw.githubusercontent.com/{owner}/{repo}/{branch}"


class StaticFetchAdapter(PersistenceAdapter):
    """
    Loads ``<base_url>/<path>`` with an HTTP GET.

    The host is read-only: save() does nothing and callers keep their own
    local copy.
    """

    name = "static"
    read_only = True

    def __init__(
        self,
        base_url: str,
        path: str = DEFAULT_STATIC_PATH,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url must be a non-empty string")
        self.url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        self._timeout = timeout
        self._session = session or requests.Session()

    def load(self) -> Snapshot:
        try:
            resp = self._session.get(
                self.url,
                timeout=self._timeout,
                headers={"Cache-Control": "no-cache"},
            )
        except requests.RequestException as exc:
            raise AdapterUnavailableError(
                "Static host unreachable",
                details={"url": self.url},
                cause=exc,
            ) from exc

        if not resp.ok:
            raise map_http_error(
                HttpErrorInfo(
                    status_code=resp.status_code,
                    reason=resp.reason,
                    details={"url": self.url},
                )
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise InvalidInputError(
                "Static snapshot is not valid JSON",
                details={"url": self.url},
                cause=exc,
            ) from exc

        snapshot = Snapshot.from_dict(payload)
        logger.info("Fetched snapshot from %s (%d folders)", self.url, len(snapshot.folders))
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        logger.debug("Static host is read-only; not writing %s", self.url)
