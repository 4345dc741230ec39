"""Public sync exports for mediavault."""

from __future__ import annotations

from .reconciler import SyncReconciler, pick_newer

__all__ = ["SyncReconciler", "pick_newer"]
