"""Snapshot: the unit of persistence and sync comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from mediavault.errors import InvalidInputError
from mediavault.util.time import EPOCH, coerce_timestamp, to_rfc3339

from .folder_node import ROOT_ID, ROOT_NAME, FolderNode
from .media_item import DEFAULT_TITLE, MediaItem, MediaType

SNAPSHOT_VERSION: int = 1


@dataclass(slots=True)
class Snapshot:
    """
    Complete folder + media tree at a point in time.

    Persisted shape:
        {
          "folderStructure": {id: {"name", "parent", "children": [...]}},
          "mediaData": {folderId: [{"id", "type", "title", "added"}]},
          "lastUpdated": RFC3339,
          "version": int,
        }
    """

    folders: dict[str, FolderNode] = field(default_factory=dict)
    media: dict[str, list[MediaItem]] = field(default_factory=dict)
    last_updated: datetime = EPOCH
    version: int = SNAPSHOT_VERSION

    @classmethod
    def default(cls) -> Snapshot:
        """Empty tree: a lone root folder, no media, timestamped at the epoch."""
        root = FolderNode(id=ROOT_ID, name=ROOT_NAME, parent_id=None)
        return cls(folders={ROOT_ID: root}, media={ROOT_ID: []})

    def clone(self) -> Snapshot:
        """Deep-clone folders and media lists."""
        return Snapshot(
            folders={fid: node.copy() for fid, node in self.folders.items()},
            media={fid: [m.copy() for m in items] for fid, items in self.media.items()},
            last_updated=self.last_updated,
            version=self.version,
        )

    # ----------------------------
    # Serialization
    # ----------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "folderStructure": folders_to_dict(self.folders),
            "mediaData": media_to_dict(self.media),
            "lastUpdated": to_rfc3339(self.last_updated),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Snapshot:
        """
        Build a snapshot from its persisted shape.

        Raises:
            InvalidInputError: if the payload is not a mapping, has no root
                folder, or holds malformed entries.
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError("Snapshot payload must be an object")

        folders = folders_from_dict(data.get("folderStructure"))
        media = media_from_dict(data.get("mediaData") or {})

        last_updated = EPOCH
        raw_ts = data.get("lastUpdated")
        if raw_ts is not None:
            try:
                last_updated = coerce_timestamp(raw_ts)
            except (TypeError, ValueError) as exc:
                raise InvalidInputError(
                    "Invalid lastUpdated timestamp",
                    details={"lastUpdated": raw_ts},
                    cause=exc,
                ) from exc

        version = data.get("version", SNAPSHOT_VERSION)
        if not isinstance(version, int) or isinstance(version, bool):
            version = SNAPSHOT_VERSION

        # Every folder owns a media list, even an empty one.
        for fid in folders:
            media.setdefault(fid, [])

        return cls(folders=folders, media=media, last_updated=last_updated, version=version)


def folders_to_dict(folders: Mapping[str, FolderNode]) -> dict[str, Any]:
    return {
        fid: {
            "name": node.name,
            "parent": node.parent_id,
            "children": list(node.child_ids),
        }
        for fid, node in folders.items()
    }


def media_to_dict(media: Mapping[str, list[MediaItem]]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for fid, items in media.items():
        out[fid] = [
            {
                "id": m.id,
                "type": m.type.value,
                "title": m.title,
                "added": to_rfc3339(m.added) if m.added is not None else None,
            }
            for m in items
        ]
    return out


def folders_from_dict(raw: Any) -> dict[str, FolderNode]:
    if not isinstance(raw, Mapping):
        raise InvalidInputError("folderStructure must be an object")
    if ROOT_ID not in raw:
        raise InvalidInputError("folderStructure has no root folder")

    folders: dict[str, FolderNode] = {}
    for fid, entry in raw.items():
        if not isinstance(entry, Mapping):
            raise InvalidInputError("Malformed folder entry", details={"folder_id": fid})
        name = entry.get("name")
        parent = entry.get("parent")
        children = entry.get("children") or []
        if not isinstance(name, str):
            raise InvalidInputError("Folder name must be a string", details={"folder_id": fid})
        if parent is not None and not isinstance(parent, str):
            raise InvalidInputError("Folder parent must be a string", details={"folder_id": fid})
        if not isinstance(children, list) or not all(isinstance(c, str) for c in children):
            raise InvalidInputError("Folder children must be strings", details={"folder_id": fid})
        folders[fid] = FolderNode(
            id=fid,
            name=name,
            parent_id=None if fid == ROOT_ID else parent,
            child_ids=list(children),
        )
    return folders


def media_from_dict(raw: Any) -> dict[str, list[MediaItem]]:
    if not isinstance(raw, Mapping):
        raise InvalidInputError("mediaData must be an object")

    media: dict[str, list[MediaItem]] = {}
    for fid, items in raw.items():
        if not isinstance(items, list):
            raise InvalidInputError("Media list must be an array", details={"folder_id": fid})
        media[fid] = [_media_item_from_dict(fid, entry) for entry in items]
    return media


def _media_item_from_dict(folder_id: str, entry: Any) -> MediaItem:
    if not isinstance(entry, Mapping) or not isinstance(entry.get("id"), str):
        raise InvalidInputError("Malformed media entry", details={"folder_id": folder_id})

    try:
        media_type = MediaType(str(entry.get("type", "")).lower())
    except ValueError as exc:
        raise InvalidInputError(
            "Unknown media type",
            details={"folder_id": folder_id, "type": entry.get("type")},
            cause=exc,
        ) from exc

    added = None
    if entry.get("added") is not None:
        try:
            added = coerce_timestamp(entry["added"])
        except (TypeError, ValueError):
            added = None

    title = entry.get("title")
    return MediaItem(
        id=entry["id"],
        type=media_type,
        title=title if isinstance(title, str) and title else DEFAULT_TITLE,
        added=added,
    )
