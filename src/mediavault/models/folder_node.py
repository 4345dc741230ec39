"""Data model for folders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

ROOT_ID: str = "root"
ROOT_NAME: str = "Home"


@dataclass(slots=True)
class FolderNode:
    """
    A folder in the vault tree.

    Notes:
        - Only the root folder has parent_id None.
        - child_ids keeps display order (creation / move-in order).
    """

    id: str
    name: str
    parent_id: Optional[str]
    child_ids: list[str] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def copy(self) -> FolderNode:
        return FolderNode(
            id=self.id,
            name=self.name,
            parent_id=self.parent_id,
            child_ids=list(self.child_ids),
        )
