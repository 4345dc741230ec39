"""Public tree exports for mediavault."""

from __future__ import annotations

from .store import TreeStore
from .validators import validate_tree

__all__ = ["TreeStore", "validate_tree"]
