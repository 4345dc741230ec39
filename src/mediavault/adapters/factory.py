"""Adapter selection from configuration."""

from __future__ import annotations

from mediavault.config import VaultConfig
from mediavault.util.key_value import KeyValueStore

from .base import PersistenceAdapter
from .firestore_adapter import FirestoreAdapter
from .local_adapter import LocalStorageAdapter
from .static_fetch import StaticFetchAdapter


def build_adapter(config: VaultConfig, store: KeyValueStore) -> PersistenceAdapter:
    """Return the adapter for config.backend (local store is shared)."""
    if config.backend == "static":
        return StaticFetchAdapter(
            config.static_base_url or "",
            config.static_path,
            timeout=config.http_timeout,
        )
    if config.backend == "firestore":
        return FirestoreAdapter.from_config(config, store)
    return LocalStorageAdapter(store)
