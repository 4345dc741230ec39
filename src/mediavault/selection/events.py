"""Event and state types for the selection controller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SelectionMode(str, Enum):
    IDLE = "IDLE"
    SELECTING = "SELECTING"


class EventKind(str, Enum):
    """Pointer, touch and drag events the controller understands."""

    POINTER_DOWN = "POINTER_DOWN"
    POINTER_UP = "POINTER_UP"
    POINTER_MOVE = "POINTER_MOVE"
    TOUCH_START = "TOUCH_START"
    TOUCH_END = "TOUCH_END"
    TOUCH_MOVE = "TOUCH_MOVE"
    CLICK = "CLICK"
    DRAG_START = "DRAG_START"
    DRAG_OVER = "DRAG_OVER"
    DROP = "DROP"
    DRAG_END = "DRAG_END"


class TargetKind(str, Enum):
    FOLDER = "FOLDER"
    MEDIA = "MEDIA"
    BREADCRUMB = "BREADCRUMB"
    NONE = "NONE"


@dataclass(frozen=True, slots=True)
class NodeRef:
    """
    A reference to something under the pointer.

    Notes:
        - FOLDER / BREADCRUMB: node_id is the folder id.
        - MEDIA: node_id is the media id, folder_id the folder holding it.
    """

    kind: TargetKind
    node_id: str
    folder_id: Optional[str] = None

    @classmethod
    def folder(cls, folder_id: str) -> NodeRef:
        return cls(kind=TargetKind.FOLDER, node_id=folder_id, folder_id=folder_id)

    @classmethod
    def media(cls, media_id: str, folder_id: str) -> NodeRef:
        return cls(kind=TargetKind.MEDIA, node_id=media_id, folder_id=folder_id)

    @classmethod
    def breadcrumb(cls, folder_id: str) -> NodeRef:
        return cls(kind=TargetKind.BREADCRUMB, node_id=folder_id, folder_id=folder_id)

    @property
    def is_selectable(self) -> bool:
        return self.kind in (TargetKind.FOLDER, TargetKind.MEDIA)

    @property
    def is_drop_target(self) -> bool:
        return self.kind in (TargetKind.FOLDER, TargetKind.BREADCRUMB)


@dataclass(frozen=True, slots=True)
class UiEvent:
    kind: EventKind
    target: Optional[NodeRef] = None
    on_option_button: bool = False

    @property
    def target_kind(self) -> TargetKind:
        return self.target.kind if self.target is not None else TargetKind.NONE


@dataclass(frozen=True, slots=True)
class SelectionState:
    """Immutable view of the controller, handed to listeners."""

    mode: SelectionMode = SelectionMode.IDLE
    selected: tuple[NodeRef, ...] = ()
    drop_candidate: Optional[NodeRef] = None
    dragging: bool = False

    def is_selected(self, ref: NodeRef) -> bool:
        return ref in self.selected
