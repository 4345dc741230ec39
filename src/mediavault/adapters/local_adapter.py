"""Adapter over the local key-value store."""

from __future__ import annotations

import json
import logging
from typing import Any

from mediavault.errors import InvalidInputError, NotFoundError
from mediavault.models import Snapshot
from mediavault.util.key_value import KeyValueStore

from .base import PersistenceAdapter

logger = logging.getLogger(__name__)

FOLDERS_KEY: str = "mv_folderStructure"
MEDIA_KEY: str = "mv_mediaData"
LAST_UPDATED_KEY: str = "mv_lastUpdated"
VERSION_KEY: str = "mv_version"


class LocalStorageAdapter(PersistenceAdapter):
    """
    Stores the snapshot under separate keys, one JSON document each.

    Always available; also used as the backup copy for remote backends.
    """

    name = "local"

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def load(self) -> Snapshot:
        raw_folders = self._store.get_item(FOLDERS_KEY)
        if raw_folders is None:
            raise NotFoundError("No local snapshot stored", details={"key": FOLDERS_KEY})

        payload: dict[str, Any] = {
            "folderStructure": _decode(FOLDERS_KEY, raw_folders),
            "mediaData": _decode(MEDIA_KEY, self._store.get_item(MEDIA_KEY) or "{}"),
        }
        raw_ts = self._store.get_item(LAST_UPDATED_KEY)
        if raw_ts:
            payload["lastUpdated"] = raw_ts
        raw_version = self._store.get_item(VERSION_KEY)
        if raw_version and raw_version.isdigit():
            payload["version"] = int(raw_version)

        snapshot = Snapshot.from_dict(payload)
        logger.debug("Loaded local snapshot with %d folders", len(snapshot.folders))
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        data = snapshot.to_dict()
        self._store.set_items(
            {
                FOLDERS_KEY: json.dumps(data["folderStructure"], ensure_ascii=False),
                MEDIA_KEY: json.dumps(data["mediaData"], ensure_ascii=False),
                LAST_UPDATED_KEY: data["lastUpdated"],
                VERSION_KEY: str(data["version"]),
            }
        )
        logger.debug("Saved local snapshot (%s)", data["lastUpdated"])

    def clear(self) -> None:
        for key in (FOLDERS_KEY, MEDIA_KEY, LAST_UPDATED_KEY, VERSION_KEY):
            self._store.remove_item(key)


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(
            "Stored value is not valid JSON",
            details={"key": key},
            cause=exc,
        ) from exc
