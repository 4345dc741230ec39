"""Strict validation helpers for TreeStore."""

from __future__ import annotations

from collections import deque

from mediavault.errors import (
    CyclicMoveError,
    InvalidInputError,
    InvalidOperationError,
    InvalidParentError,
    InvalidStateError,
    NotFoundError,
)
from mediavault.models import ROOT_ID, Snapshot


def validate_folder_exists(snapshot: Snapshot, folder_id: str, what: str) -> None:
    if folder_id not in snapshot.folders:
        raise NotFoundError(f"{what} does not exist: {folder_id}", details={"folder_id": folder_id})


def validate_parent_exists(snapshot: Snapshot, parent_id: str) -> None:
    if parent_id not in snapshot.folders:
        raise InvalidParentError(
            f"Parent folder does not exist: {parent_id}",
            details={"folder_id": parent_id},
        )


def validate_not_root(folder_id: str, action: str) -> None:
    if folder_id == ROOT_ID:
        raise InvalidOperationError(f"Root is protected: cannot {action} root")


def validate_name(name: object, what: str) -> str:
    """Return the stripped name; reject non-strings and blank names."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError(f"{what} must be a non-empty string")
    return name.strip()


def validate_move_no_cycle(snapshot: Snapshot, folder_id: str, new_parent_id: str) -> None:
    """
    Reject cycles: walk from new_parent towards root; hitting folder_id means
    the destination is inside the moved subtree.
    """
    if folder_id == new_parent_id:
        raise CyclicMoveError(
            "Cannot move a folder into itself",
            details={"folder_id": folder_id, "new_parent_id": new_parent_id},
        )

    visited: set[str] = set()
    cur = snapshot.folders[new_parent_id].parent_id
    while cur is not None and cur not in visited:
        if cur == folder_id:
            raise CyclicMoveError(
                "Cannot move a folder into one of its descendants",
                details={"folder_id": folder_id, "new_parent_id": new_parent_id},
            )
        visited.add(cur)
        node = snapshot.folders.get(cur)
        if node is None:
            break
        cur = node.parent_id


def validate_tree(snapshot: Snapshot) -> None:
    """
    Check structural invariants of a snapshot.

    - root exists and has no parent
    - every child link points to an existing folder whose parent is the owner
    - every non-root folder is listed exactly once by its parent
    - every folder is reachable from root (no cycles, no orphans)
    """
    folders = snapshot.folders
    root = folders.get(ROOT_ID)
    if root is None:
        raise InvalidStateError("Tree has no root folder")
    if root.parent_id is not None:
        raise InvalidStateError("Root folder must not have a parent")

    for fid, node in folders.items():
        for child_id in node.child_ids:
            child = folders.get(child_id)
            if child is None:
                raise InvalidStateError(
                    "Child link points to a missing folder",
                    details={"folder_id": fid, "child_id": child_id},
                )
            if child.parent_id != fid:
                raise InvalidStateError(
                    "Child link does not match the child's parent",
                    details={"folder_id": fid, "child_id": child_id},
                )
        if fid == ROOT_ID:
            continue
        parent = folders.get(node.parent_id) if node.parent_id is not None else None
        if parent is None:
            raise InvalidStateError("Folder has no existing parent", details={"folder_id": fid})
        if parent.child_ids.count(fid) != 1:
            raise InvalidStateError(
                "Folder must be listed exactly once by its parent",
                details={"folder_id": fid},
            )

    seen: set[str] = set()
    q: deque[str] = deque([ROOT_ID])
    while q:
        cur = q.popleft()
        if cur in seen:
            raise InvalidStateError("Tree contains a cycle", details={"folder_id": cur})
        seen.add(cur)
        q.extend(folders[cur].child_ids)

    unreachable = set(folders) - seen
    if unreachable:
        raise InvalidStateError(
            "Tree contains unreachable folders",
            details={"folder_ids": sorted(unreachable)},
        )
