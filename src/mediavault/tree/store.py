"""TreeStore: in-memory folder/media tree with invariant-preserving mutations."""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional

from mediavault.errors import DuplicateMediaError, InvalidStateError, NotFoundError
from mediavault.models import ROOT_ID, FolderNode, MediaItem, PathEntry, Snapshot
from mediavault.util.ids import new_folder_id
from mediavault.util.time import normalize_dt

from .validators import (
    validate_folder_exists,
    validate_move_no_cycle,
    validate_name,
    validate_not_root,
    validate_parent_exists,
)


class TreeStore:
    """
    Owns one Snapshot and keeps its parent/child links consistent.

    Nothing here persists: callers save explicitly after a mutation that
    should be durable.
    """

    def __init__(self, snapshot: Optional[Snapshot] = None) -> None:
        self._snapshot = snapshot.clone() if snapshot is not None else Snapshot.default()
        for fid in self._snapshot.folders:
            self._snapshot.media.setdefault(fid, [])

    # ----------------------------
    # Read APIs
    # ----------------------------
    @property
    def last_updated(self) -> datetime:
        return self._snapshot.last_updated

    def has_folder(self, folder_id: str) -> bool:
        return folder_id in self._snapshot.folders

    def get_folder(self, folder_id: str) -> FolderNode:
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        return self._snapshot.folders[folder_id]

    def iter_folders(self) -> Iterator[FolderNode]:
        return iter(list(self._snapshot.folders.values()))

    def list_children(self, folder_id: str) -> list[FolderNode]:
        """Child folders in display order; dangling ids are skipped."""
        node = self.get_folder(folder_id)
        folders = self._snapshot.folders
        return [folders[cid] for cid in node.child_ids if cid in folders]

    def find_child_by_name(self, parent_id: str, name: str) -> Optional[FolderNode]:
        for child in self.list_children(parent_id):
            if child.name == name:
                return child
        return None

    def list_media(self, folder_id: str) -> list[MediaItem]:
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        return list(self._snapshot.media.get(folder_id, []))

    def get_media(self, folder_id: str, media_id: str) -> MediaItem:
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        for item in self._snapshot.media.get(folder_id, []):
            if item.id == media_id:
                return item
        raise NotFoundError(
            f"Media does not exist: {media_id}",
            details={"folder_id": folder_id, "media_id": media_id},
        )

    def iter_subtree(self, folder_id: str) -> Iterator[str]:
        """Yield folder_id and all descendants in post-order (children first)."""
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        folders = self._snapshot.folders

        # Iterative post-order; `seen` guards against corrupted child links.
        seen: set[str] = set()
        stack: list[tuple[str, bool]] = [(folder_id, False)]
        while stack:
            cur, expanded = stack.pop()
            if expanded:
                yield cur
                continue
            if cur in seen:
                continue
            seen.add(cur)
            stack.append((cur, True))
            for child_id in reversed(folders[cur].child_ids):
                if child_id in folders and child_id not in seen:
                    stack.append((child_id, False))

    def is_descendant(self, folder_id: str, ancestor_id: str) -> bool:
        """True if ancestor_id lies on folder_id's parent chain (strictly above it)."""
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        visited: set[str] = set()
        cur = self._snapshot.folders[folder_id].parent_id
        while cur is not None and cur not in visited:
            if cur == ancestor_id:
                return True
            visited.add(cur)
            node = self._snapshot.folders.get(cur)
            cur = node.parent_id if node is not None else None
        return False

    def list_path(self, folder_id: str) -> list[PathEntry]:
        """
        Breadcrumb from root to folder_id (root first).

        Raises:
            NotFoundError: folder_id or any link towards root is missing.
            InvalidStateError: the parent chain loops.
        """
        folders = self._snapshot.folders
        validate_folder_exists(self._snapshot, folder_id, "Folder")

        path: list[PathEntry] = []
        visited: set[str] = set()
        cur: Optional[str] = folder_id
        while cur is not None:
            if cur in visited:
                raise InvalidStateError("Parent chain contains a cycle", details={"folder_id": cur})
            visited.add(cur)
            node = folders.get(cur)
            if node is None:
                raise NotFoundError(
                    f"Broken parent link: {cur}",
                    details={"folder_id": folder_id, "missing_id": cur},
                )
            path.append(PathEntry(id=node.id, name=node.name))
            cur = node.parent_id

        path.reverse()
        if path[0].id != ROOT_ID:
            raise NotFoundError(
                "Parent chain does not reach root",
                details={"folder_id": folder_id},
            )
        return path

    def to_snapshot(self) -> Snapshot:
        return self._snapshot.clone()

    # ----------------------------
    # Mutation APIs
    # ----------------------------
    def replace(self, snapshot: Snapshot) -> None:
        """Swap the whole tree (last-write-wins sync)."""
        self._snapshot = snapshot.clone()
        for fid in self._snapshot.folders:
            self._snapshot.media.setdefault(fid, [])

    def touch(self, when: datetime) -> None:
        self._snapshot.last_updated = normalize_dt(when)

    def create_folder(self, parent_id: str, name: str) -> str:
        validate_parent_exists(self._snapshot, parent_id)
        clean = validate_name(name, "Folder name")

        new_id = new_folder_id()
        while new_id in self._snapshot.folders:
            new_id = new_folder_id()

        self._snapshot.folders[new_id] = FolderNode(id=new_id, name=clean, parent_id=parent_id)
        self._snapshot.folders[parent_id].child_ids.append(new_id)
        self._snapshot.media[new_id] = []
        return new_id

    def rename_folder(self, folder_id: str, name: str) -> None:
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        clean = validate_name(name, "Folder name")
        self._snapshot.folders[folder_id].name = clean

    def rename_media(self, folder_id: str, media_id: str, title: str) -> None:
        item = self.get_media(folder_id, media_id)
        item.title = validate_name(title, "Media title")

    def move_folder(self, folder_id: str, new_parent_id: str) -> None:
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        validate_folder_exists(self._snapshot, new_parent_id, "New parent")
        validate_not_root(folder_id, "move")
        validate_move_no_cycle(self._snapshot, folder_id, new_parent_id)

        node = self._snapshot.folders[folder_id]
        if node.parent_id == new_parent_id:
            return

        old_parent = self._snapshot.folders.get(node.parent_id) if node.parent_id else None
        if old_parent is not None:
            old_parent.child_ids = [cid for cid in old_parent.child_ids if cid != folder_id]

        node.parent_id = new_parent_id
        self._snapshot.folders[new_parent_id].child_ids.append(folder_id)

    def add_media(self, folder_id: str, item: MediaItem) -> None:
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        items = self._snapshot.media.setdefault(folder_id, [])
        if any(existing.id == item.id for existing in items):
            raise DuplicateMediaError(
                f"Folder already contains media: {item.id}",
                details={"folder_id": folder_id, "media_id": item.id},
            )
        items.append(item)

    def move_media(self, media_id: str, from_folder_id: str, to_folder_id: str) -> None:
        item = self.get_media(from_folder_id, media_id)
        validate_folder_exists(self._snapshot, to_folder_id, "Destination folder")
        if from_folder_id == to_folder_id:
            return

        dest = self._snapshot.media.setdefault(to_folder_id, [])
        if any(existing.id == media_id for existing in dest):
            raise DuplicateMediaError(
                f"Destination already contains media: {media_id}",
                details={"folder_id": to_folder_id, "media_id": media_id},
            )

        source = self._snapshot.media[from_folder_id]
        source.remove(item)
        dest.append(item)

    def delete_media(self, folder_id: str, media_id: str) -> MediaItem:
        item = self.get_media(folder_id, media_id)
        self._snapshot.media[folder_id].remove(item)
        return item

    def delete_folder(self, folder_id: str) -> list[str]:
        """
        Delete folder_id and its whole subtree (post-order), with media lists.

        Returns:
            Deleted folder ids, deepest first.
        """
        validate_folder_exists(self._snapshot, folder_id, "Folder")
        validate_not_root(folder_id, "delete")

        doomed = list(self.iter_subtree(folder_id))
        node = self._snapshot.folders[folder_id]
        parent = self._snapshot.folders.get(node.parent_id) if node.parent_id else None
        if parent is not None:
            parent.child_ids = [cid for cid in parent.child_ids if cid != folder_id]

        for fid in doomed:
            self._snapshot.folders.pop(fid, None)
            self._snapshot.media.pop(fid, None)
        return doomed
