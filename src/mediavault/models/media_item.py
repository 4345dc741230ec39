"""Data model for media references."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class MediaType(str, Enum):
    """Kinds of media a folder can hold."""

    VIDEO = "video"
    IMAGE = "image"


DEFAULT_TITLE: str = "Untitled"


@dataclass(slots=True)
class MediaItem:
    """
    A Google Drive file referenced from a folder.

    The owning folder is implicit: it is the key of the media list holding the
    item. ``id`` is unique per folder, not globally.
    """

    id: str
    type: MediaType
    title: str = DEFAULT_TITLE
    added: Optional[datetime] = None

    @property
    def is_video(self) -> bool:
        return self.type is MediaType.VIDEO

    def copy(self) -> MediaItem:
        return MediaItem(id=self.id, type=self.type, title=self.title, added=self.added)
