"""Persistence adapter contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from mediavault.errors import InvalidOperationError
from mediavault.models import Snapshot

SnapshotCallback = Callable[[Snapshot], None]


class Subscription(ABC):
    """Handle returned by PersistenceAdapter.subscribe()."""

    @abstractmethod
    def unsubscribe(self) -> None: ...


class PersistenceAdapter(ABC):
    """
    Load/save contract shared by every backend.

    load():
        Returns the stored Snapshot.
        Raises NotFoundError when nothing is stored yet and
        AdapterUnavailableError when the backend cannot be reached.
    save(snapshot):
        Persists the snapshot. Raises AdapterUnavailableError on failure.
    """

    name: str = "adapter"
    read_only: bool = False

    @abstractmethod
    def load(self) -> Snapshot: ...

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None: ...

    @property
    def supports_subscribe(self) -> bool:
        return False

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        """Invoke callback with every remote change (push-capable backends only)."""
        raise InvalidOperationError(f"{self.name} adapter does not support subscriptions")
