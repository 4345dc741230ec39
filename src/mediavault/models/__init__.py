"""Public model exports for mediavault."""

from __future__ import annotations

from .folder_node import ROOT_ID, ROOT_NAME, FolderNode
from .media_item import DEFAULT_TITLE, MediaItem, MediaType
from .path import PathEntry
from .results import ImportResult
from .snapshot import SNAPSHOT_VERSION, Snapshot

__all__ = [
    "ROOT_ID",
    "ROOT_NAME",
    "FolderNode",
    "DEFAULT_TITLE",
    "MediaItem",
    "MediaType",
    "PathEntry",
    "ImportResult",
    "SNAPSHOT_VERSION",
    "Snapshot",
]
