"""Selection & drag controller: an explicit state machine driven by UI events."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Optional, Protocol

from .events import EventKind, NodeRef, SelectionMode, SelectionState, TargetKind, UiEvent

logger = logging.getLogger(__name__)

LONG_PRESS_DELAY_SEC: float = 0.5


class TimerHandle(Protocol):
    def cancel(self) -> Any: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
Listener = Callable[[SelectionState], None]
DropHandler = Callable[[str, tuple[NodeRef, ...]], None]
ActivateHandler = Callable[[NodeRef], None]


def asyncio_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule on the running event loop (the UI loop)."""
    return asyncio.get_running_loop().call_later(delay, callback)


_SELECTABLE = (TargetKind.FOLDER, TargetKind.MEDIA)
_DROP_TARGETS = (TargetKind.FOLDER, TargetKind.BREADCRUMB)
_ALL_TARGETS = tuple(TargetKind)


class SelectionController:
    """
    Tracks the selected set and turns a drop into a move request.

    All transitions go through one dispatch table keyed by
    (EventKind, TargetKind); events without an entry are ignored.
    """

    def __init__(
        self,
        *,
        current_folder: Callable[[], str],
        on_drop: Optional[DropHandler] = None,
        on_activate: Optional[ActivateHandler] = None,
        scheduler: Scheduler = asyncio_scheduler,
        long_press_delay: float = LONG_PRESS_DELAY_SEC,
    ) -> None:
        self._current_folder = current_folder
        self._on_drop = on_drop
        self._on_activate = on_activate
        self._scheduler = scheduler
        self._long_press_delay = long_press_delay

        self._state = SelectionState()
        self._timer: Optional[TimerHandle] = None
        self._listeners: list[Listener] = []
        self._table = self._build_dispatch_table()

    # ----------------------------
    # Read APIs
    # ----------------------------
    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def mode(self) -> SelectionMode:
        return self._state.mode

    @property
    def selected(self) -> tuple[NodeRef, ...]:
        return self._state.selected

    @property
    def long_press_pending(self) -> bool:
        return self._timer is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ----------------------------
    # Dispatch
    # ----------------------------
    def dispatch(self, event: UiEvent) -> bool:
        """Run the handler for (event.kind, target kind); False if none applies."""
        handler = self._table.get((event.kind, event.target_kind))
        if handler is None:
            return False
        return handler(event)

    def clear(self) -> None:
        """Drop the selection and any drag state (back to IDLE)."""
        self._cancel_long_press()
        self._set_state(SelectionState())

    def select(self, ref: NodeRef) -> None:
        """Select programmatically (e.g., from a per-item options button)."""
        if not ref.is_selectable:
            raise ValueError(f"{ref.kind.value} nodes cannot be selected")
        if self._state.is_selected(ref):
            return
        self._set_state(
            replace(
                self._state,
                mode=SelectionMode.SELECTING,
                selected=self._state.selected + (ref,),
            )
        )

    # ----------------------------
    # Handlers
    # ----------------------------
    def _build_dispatch_table(self) -> dict[tuple[EventKind, TargetKind], Callable[[UiEvent], bool]]:
        table: dict[tuple[EventKind, TargetKind], Callable[[UiEvent], bool]] = {}
        for kind in _SELECTABLE:
            table[(EventKind.POINTER_DOWN, kind)] = self._handle_press
            table[(EventKind.TOUCH_START, kind)] = self._handle_press
            table[(EventKind.CLICK, kind)] = self._handle_click
            table[(EventKind.DRAG_START, kind)] = self._handle_drag_start
        table[(EventKind.CLICK, TargetKind.BREADCRUMB)] = self._handle_breadcrumb_click
        for kind in _ALL_TARGETS:
            for cancel in (
                EventKind.POINTER_UP,
                EventKind.POINTER_MOVE,
                EventKind.TOUCH_END,
                EventKind.TOUCH_MOVE,
            ):
                table[(cancel, kind)] = self._handle_release
            table[(EventKind.DRAG_OVER, kind)] = self._handle_drag_over
            table[(EventKind.DROP, kind)] = self._handle_drop
            table[(EventKind.DRAG_END, kind)] = self._handle_drag_end
        return table

    def _handle_press(self, event: UiEvent) -> bool:
        ref = event.target
        if ref is None or self._state.mode is SelectionMode.SELECTING:
            return False
        self._cancel_long_press()
        self._timer = self._scheduler(self._long_press_delay, lambda: self._long_press_fired(ref))
        return True

    def _handle_release(self, event: UiEvent) -> bool:
        if self._timer is None:
            return False
        self._cancel_long_press()
        return True

    def _long_press_fired(self, ref: NodeRef) -> None:
        self._timer = None
        if self._state.mode is SelectionMode.SELECTING:
            return
        logger.debug("Long press on %s %s: entering selection mode", ref.kind.value, ref.node_id)
        self._set_state(SelectionState(mode=SelectionMode.SELECTING, selected=(ref,)))

    def _handle_click(self, event: UiEvent) -> bool:
        ref = event.target
        if ref is None:
            return False
        if self._state.mode is SelectionMode.SELECTING:
            if event.on_option_button:
                return False
            self._toggle(ref)
            return True
        if self._on_activate is not None and not event.on_option_button:
            self._on_activate(ref)
            return True
        return False

    def _handle_breadcrumb_click(self, event: UiEvent) -> bool:
        if self._on_activate is None or event.target is None:
            return False
        self._on_activate(event.target)
        return True

    def _handle_drag_start(self, event: UiEvent) -> bool:
        if not self._state.selected:
            return False
        self._cancel_long_press()
        self._set_state(replace(self._state, dragging=True))
        return True

    def _handle_drag_over(self, event: UiEvent) -> bool:
        if not self._state.dragging:
            return False
        candidate = event.target if event.target_kind in _DROP_TARGETS else None
        if candidate != self._state.drop_candidate:
            self._set_state(replace(self._state, drop_candidate=candidate))
        return True

    def _handle_drop(self, event: UiEvent) -> bool:
        if not self._state.dragging:
            return False

        selected = self._state.selected
        target = event.target
        self._end_drag()

        if target is None or target.kind not in _DROP_TARGETS:
            return True
        target_folder_id = target.node_id
        if target_folder_id == self._current_folder():
            return True
        if self._on_drop is not None:
            self._on_drop(target_folder_id, selected)
        return True

    def _handle_drag_end(self, event: UiEvent) -> bool:
        if not self._state.dragging:
            return False
        self._end_drag()
        return True

    # ----------------------------
    # Internals
    # ----------------------------
    def _toggle(self, ref: NodeRef) -> None:
        if self._state.is_selected(ref):
            remaining = tuple(s for s in self._state.selected if s != ref)
        else:
            remaining = self._state.selected + (ref,)

        if not remaining:
            self._set_state(SelectionState())
            return
        self._set_state(replace(self._state, mode=SelectionMode.SELECTING, selected=remaining))

    def _end_drag(self) -> None:
        self._set_state(replace(self._state, dragging=False, drop_candidate=None))

    def _cancel_long_press(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_state(self, state: SelectionState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)
