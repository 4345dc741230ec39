"""Public adapter exports for mediavault."""

from __future__ import annotations

from .base import PersistenceAdapter, SnapshotCallback, Subscription
from .factory import build_adapter
from .firestore_adapter import DEFAULT_COLLECTION, FirestoreAdapter, installation_id
from .local_adapter import LocalStorageAdapter
from .static_fetch import DEFAULT_STATIC_PATH, StaticFetchAdapter, github_raw_url

__all__ = [
    "PersistenceAdapter",
    "Subscription",
    "SnapshotCallback",
    "LocalStorageAdapter",
    "StaticFetchAdapter",
    "FirestoreAdapter",
    "DEFAULT_COLLECTION",
    "DEFAULT_STATIC_PATH",
    "github_raw_url",
    "installation_id",
    "build_adapter",
]
