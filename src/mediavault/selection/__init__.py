"""Public selection exports for mediavault."""

from __future__ import annotations

from .controller import LONG_PRESS_DELAY_SEC, SelectionController, asyncio_scheduler
from .events import EventKind, NodeRef, SelectionMode, SelectionState, TargetKind, UiEvent

__all__ = [
    "SelectionController",
    "asyncio_scheduler",
    "LONG_PRESS_DELAY_SEC",
    "EventKind",
    "NodeRef",
    "SelectionMode",
    "SelectionState",
    "TargetKind",
    "UiEvent",
]
