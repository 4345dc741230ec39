"""Adapter storing the snapshot as one Firestore document per installation."""

from __future__ import annotations

import logging
from typing import Any, Optional

from mediavault.auth import AuthInfo, CredentialsProvider
from mediavault.config import DEFAULT_COLLECTION, VaultConfig
from mediavault.errors import (
    AdapterUnavailableError,
    AuthError,
    InvalidInputError,
    MediaVaultError,
    NotFoundError,
)
from mediavault.models import Snapshot
from mediavault.util.ids import new_installation_id
from mediavault.util.key_value import KeyValueStore

from .base import PersistenceAdapter, SnapshotCallback, Subscription

logger = logging.getLogger(__name__)

INSTALLATION_ID_KEY: str = "mv_installationId"

# Merge mask for save(): each field is replaced whole, nested keys included.
SNAPSHOT_FIELDS: tuple[str, ...] = ("folderStructure", "mediaData", "lastUpdated", "version")


def installation_id(store: KeyValueStore) -> str:
    """Return this installation's anonymous identity, creating it on first use."""
    value = store.get_item(INSTALLATION_ID_KEY)
    if not value:
        value = new_installation_id()
        store.set_item(INSTALLATION_ID_KEY, value)
        logger.info("Created installation id %s", value)
    return value


class _WatchSubscription(Subscription):
    def __init__(self, watch: Any) -> None:
        self._watch = watch

    def unsubscribe(self) -> None:
        if self._watch is not None:
            self._watch.unsubscribe()
            self._watch = None


class FirestoreAdapter(PersistenceAdapter):
    """
    Reads and upserts ``<collection>/<installation_id>``, replacing the
    snapshot fields whole.

    Notes:
        - The Firestore client is injected; use from_config() to build one.
        - subscribe() callbacks run on the Firestore watch thread.
    """

    name = "firestore"

    def __init__(
        self,
        client: Any,
        installation_id: str,
        collection: str = DEFAULT_COLLECTION,
    ) -> None:
        if not installation_id:
            raise ValueError("installation_id must be a non-empty string")
        self._client = client
        self.installation_id = installation_id
        self.collection = collection

    @classmethod
    def from_config(cls, config: VaultConfig, store: KeyValueStore) -> FirestoreAdapter:
        """Build the client from VaultConfig credentials (AuthInfo)."""
        auth_info = config.auth or AuthInfo(kind="default", data={})
        client = CredentialsProvider(auth_info).build_firestore_client(config.firestore_project)
        return cls(
            client,
            installation_id(store),
            collection=config.firestore_collection,
        )

    @property
    def supports_subscribe(self) -> bool:
        return True

    def load(self) -> Snapshot:
        try:
            doc = self._document().get()
        except Exception as exc:
            raise self._map_exception(exc) from exc

        if not doc.exists:
            raise NotFoundError(
                "No remote snapshot stored",
                details={"collection": self.collection, "document": self.installation_id},
            )
        return Snapshot.from_dict(doc.to_dict() or {})

    def save(self, snapshot: Snapshot) -> None:
        try:
            self._document().set(snapshot.to_dict(), merge=list(SNAPSHOT_FIELDS))
        except Exception as exc:
            raise self._map_exception(exc) from exc
        logger.debug("Saved snapshot to %s/%s", self.collection, self.installation_id)

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        def _on_snapshot(doc_snapshots: list[Any], changes: Any, read_time: Any) -> None:
            for doc in doc_snapshots:
                if not doc.exists:
                    continue
                try:
                    snapshot = Snapshot.from_dict(doc.to_dict() or {})
                except InvalidInputError as exc:
                    logger.warning("Ignoring malformed remote snapshot: %s", exc)
                    continue
                callback(snapshot)

        try:
            watch = self._document().on_snapshot(_on_snapshot)
        except Exception as exc:
            raise self._map_exception(exc) from exc
        return _WatchSubscription(watch)

    # ----------------------------
    # Internals
    # ----------------------------
    def _document(self) -> Any:
        return self._client.collection(self.collection).document(self.installation_id)

    def _map_exception(self, exc: Exception) -> MediaVaultError:
        from google.api_core import exceptions as gexc

        details: dict[str, Optional[str]] = {
            "collection": self.collection,
            "document": self.installation_id,
        }
        if isinstance(exc, MediaVaultError):
            return exc
        if isinstance(exc, gexc.NotFound):
            return NotFoundError("Remote document not found", details=details, cause=exc)
        if isinstance(exc, (gexc.PermissionDenied, gexc.Unauthenticated)):
            return AuthError("Firestore access denied", details=details, cause=exc)
        return AdapterUnavailableError("Firestore unavailable", details=details, cause=exc)
