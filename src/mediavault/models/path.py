from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PathEntry:
    """One breadcrumb segment."""

    id: str
    name: str
