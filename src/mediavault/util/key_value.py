"""A small persistent key-value store of string values (one JSON file)."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Mapping, Optional

from mediavault.errors import AdapterUnavailableError

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    String-to-string store persisted as a JSON object.

    Every write rewrites the file atomically (temp file + os.replace) and
    in-memory values change only after the write succeeds. With
    path=None the store lives in memory only.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = os.path.expanduser(path) if path else None
        self._data: dict[str, str] = self._read() if self.path else {}

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.set_items({key: value})

    def set_items(self, items: Mapping[str, str]) -> None:
        """Set several keys with a single write; nothing changes if it fails."""
        if not all(isinstance(v, str) for v in items.values()):
            raise TypeError("KeyValueStore values must be strings")
        staged = dict(self._data)
        staged.update(items)
        self._commit(staged)

    def remove_item(self, key: str) -> None:
        if key in self._data:
            staged = dict(self._data)
            del staged[key]
            self._commit(staged)

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._commit({})

    # ----------------------------
    # Internals
    # ----------------------------
    def _commit(self, data: dict[str, str]) -> None:
        self._flush(data)
        self._data = data

    def _read(self) -> dict[str, str]:
        if self.path is None or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except OSError as exc:
            raise AdapterUnavailableError(
                "Failed to read key-value store",
                details={"path": self.path},
                cause=exc,
            ) from exc
        except json.JSONDecodeError as exc:
            # A torn or hand-edited file; start empty rather than refuse to open.
            logger.warning("Ignoring unreadable key-value store %s: %s", self.path, exc)
            return {}

        if not isinstance(raw, dict):
            logger.warning("Ignoring key-value store %s: not a JSON object", self.path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self, data: dict[str, str]) -> None:
        if self.path is None:
            return

        directory = os.path.dirname(self.path) or "."
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".kv-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise AdapterUnavailableError(
                "Failed to write key-value store",
                details={"path": self.path},
                cause=exc,
            ) from exc
