"""Result models for batch operations."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ImportResult:
    """Aggregate result for a CSV import."""

    imported: int = 0
    skipped: int = 0
    created_folders: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.imported + self.skipped
