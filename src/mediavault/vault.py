"""MediaVault: application state, persistence policy and user actions."""

from __future__ import annotations

import logging
import queue
from enum import Enum
from typing import Optional

from mediavault.adapters import (
    LocalStorageAdapter,
    PersistenceAdapter,
    Subscription,
    build_adapter,
)
from mediavault.auth import AccessGate
from mediavault.config import DEFAULT_PASSPHRASE, VaultConfig
from mediavault.errors import (
    InvalidInputError,
    InvalidStateError,
    MediaVaultError,
    NotFoundError,
)
from mediavault.ingest import import_csv
from mediavault.models import (
    ROOT_ID,
    ImportResult,
    MediaItem,
    MediaType,
    PathEntry,
    Snapshot,
)
from mediavault.selection import NodeRef, SelectionController, TargetKind, asyncio_scheduler
from mediavault.selection.controller import Scheduler
from mediavault.sync import SyncReconciler, pick_newer
from mediavault.tree import TreeStore, validate_tree
from mediavault.util.drive_links import extract_file_id, preview_url, thumbnail_url
from mediavault.util.key_value import KeyValueStore
from mediavault.util.time import now_utc

logger = logging.getLogger(__name__)


class VaultStatus(str, Enum):
    """Non-blocking persistence status shown to the user."""

    LOCAL = "LOCAL"  # local backend only
    ONLINE = "ONLINE"  # remote backend reachable
    OFFLINE = "OFFLINE"  # remote backend failing; working from the local copy


class MediaVault:
    """
    Owns the tree, the selection controller and the persistence policy.

    Every mutating action persists on success. Adapter failures never raise
    from open()/save(); they switch status to OFFLINE and keep last_error.
    Validation errors always propagate to the caller.
    """

    def __init__(
        self,
        config: Optional[VaultConfig] = None,
        *,
        scheduler: Scheduler = asyncio_scheduler,
    ) -> None:
        cfg = config or VaultConfig()
        kv = KeyValueStore(cfg.storage_path)
        local = LocalStorageAdapter(kv)
        remote = None if cfg.backend == "local" else build_adapter(cfg, kv)
        self._init(
            local,
            remote,
            gate=AccessGate(cfg.passphrase, kv),
            scheduler=scheduler,
        )

    @classmethod
    def from_adapters(
        cls,
        local: LocalStorageAdapter,
        remote: Optional[PersistenceAdapter] = None,
        *,
        gate: Optional[AccessGate] = None,
        scheduler: Scheduler = asyncio_scheduler,
    ) -> MediaVault:
        """Create a vault with injected adapters (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init(
            local,
            remote,
            gate=gate or AccessGate(DEFAULT_PASSPHRASE, local.store),
            scheduler=scheduler,
        )
        return obj

    def _init(
        self,
        local: LocalStorageAdapter,
        remote: Optional[PersistenceAdapter],
        *,
        gate: AccessGate,
        scheduler: Scheduler,
    ) -> None:
        self._local = local
        self._remote = remote
        self._gate = gate
        self._store = TreeStore()
        self._reconciler = SyncReconciler()
        self._current_folder = ROOT_ID
        self._status = VaultStatus.LOCAL if remote is None else VaultStatus.OFFLINE
        self._last_error: Optional[MediaVaultError] = None
        self._opened = False
        self._subscription: Optional[Subscription] = None
        self._remote_changes: queue.SimpleQueue[Snapshot] = queue.SimpleQueue()
        self.selection = SelectionController(
            current_folder=lambda: self._current_folder,
            on_drop=self._handle_drop,
            on_activate=self._handle_activate,
            scheduler=scheduler,
        )
        self.playing: Optional[MediaItem] = None

    # ----------------------------
    # State
    # ----------------------------
    @property
    def store(self) -> TreeStore:
        return self._store

    @property
    def status(self) -> VaultStatus:
        return self._status

    @property
    def last_error(self) -> Optional[MediaVaultError]:
        return self._last_error

    @property
    def current_folder(self) -> str:
        return self._current_folder

    # ----------------------------
    # Access gate
    # ----------------------------
    @property
    def is_unlocked(self) -> bool:
        return self._gate.is_unlocked

    def unlock(self, code: str) -> None:
        """Raises AccessDeniedError on a wrong code; opens the vault on success."""
        self._gate.unlock(code)
        if not self._opened:
            self.open()

    def lock(self) -> None:
        self._gate.lock()
        self.selection.clear()
        self.stop_live_sync()
        self._opened = False

    # ----------------------------
    # Lifecycle / persistence
    # ----------------------------
    def open(self) -> TreeStore:
        """
        Load the newer of the remote snapshot and the local copy, else an
        empty tree.

        Never raises for adapter failures.
        """
        snapshot: Optional[Snapshot] = None
        if self._remote is not None:
            snapshot, error = self._try_load(self._remote)
            reachable = error is None or isinstance(error, NotFoundError)
            self._set_status(VaultStatus.ONLINE if reachable else VaultStatus.OFFLINE)

        # The local copy may be newer, e.g. edits made against a read-only host.
        backup, _ = self._try_load(self._local, quiet=self._remote is not None)
        if backup is not None:
            snapshot = backup if snapshot is None else pick_newer(backup, snapshot)

        if snapshot is None:
            logger.info("No stored snapshot; starting with an empty tree")
            snapshot = Snapshot.default()

        self._store.replace(snapshot)
        self._current_folder = ROOT_ID
        self._opened = True
        return self._store

    def save(self) -> bool:
        """
        Stamp and persist the tree.

        The local copy is always written; the remote one too unless the
        remote adapter is read-only. Returns False if any write failed.
        """
        stamp = now_utc()
        self._store.touch(stamp)
        snapshot = self._store.to_snapshot()

        self._reconciler.begin_save()
        try:
            self._local.save(snapshot)
            if self._remote is not None and not self._remote.read_only:
                self._remote.save(snapshot)
        except MediaVaultError as exc:
            self._reconciler.abort_save()
            logger.warning("Save failed, continuing offline: %s", exc)
            self._last_error = exc
            if self._remote is not None:
                self._set_status(VaultStatus.OFFLINE)
            return False

        self._reconciler.end_save(stamp)
        if self._remote is not None and not self._remote.read_only:
            self._set_status(VaultStatus.ONLINE)
        return True

    def resync(self) -> bool:
        """
        Last-write-wins against the remote copy (run when connectivity returns).

        Pulls a newer remote snapshot, pushes a newer local one. Returns True
        when the remote was reachable.
        """
        if self._remote is None:
            return True
        remote, error = self._try_load(self._remote)
        if error is not None and not isinstance(error, NotFoundError):
            self._set_status(VaultStatus.OFFLINE)
            return False

        self._set_status(VaultStatus.ONLINE)
        local = self._store.to_snapshot()
        if remote is not None and remote.last_updated > local.last_updated:
            self._apply_remote(remote)
            return True
        if self._remote.read_only:
            return True
        if remote is None or local.last_updated > remote.last_updated:
            return self.save()
        return True

    # ----------------------------
    # Live sync
    # ----------------------------
    def start_live_sync(self) -> None:
        """Subscribe to remote pushes; they are applied by process_remote_changes()."""
        if self._remote is None or not self._remote.supports_subscribe:
            raise InvalidStateError("The configured backend does not push changes")
        if self._subscription is None:
            self._subscription = self._remote.subscribe(self._remote_changes.put)

    def stop_live_sync(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def process_remote_changes(self) -> int:
        """Drain queued pushes on the caller's thread; returns how many were applied."""
        applied = 0
        while True:
            try:
                remote = self._remote_changes.get_nowait()
            except queue.Empty:
                return applied
            try:
                validate_tree(remote)
            except InvalidStateError as exc:
                logger.warning("Ignoring inconsistent remote snapshot: %s", exc)
                self._last_error = exc
                continue
            if self._reconciler.on_remote_change(remote, self._apply_remote):
                applied += 1

    # ----------------------------
    # Navigation
    # ----------------------------
    def navigate(self, folder_id: str) -> str:
        """Enter folder_id (unknown ids fall back to root); returns the folder entered."""
        self._current_folder = folder_id if self._store.has_folder(folder_id) else ROOT_ID
        return self._current_folder

    def breadcrumb(self) -> list[PathEntry]:
        return self._store.list_path(self._current_folder)

    def move_targets(self) -> list[PathEntry]:
        """Folders the current selection may be moved into."""
        excluded = {self._current_folder}
        for ref in self.selection.selected:
            if ref.kind is TargetKind.FOLDER and self._store.has_folder(ref.node_id):
                excluded.update(self._store.iter_subtree(ref.node_id))
        return [
            PathEntry(id=node.id, name=node.name)
            for node in self._store.iter_folders()
            if node.id not in excluded
        ]

    # ----------------------------
    # Actions (persist on success)
    # ----------------------------
    def create_folder(self, name: str) -> str:
        folder_id = self._store.create_folder(self._current_folder, name)
        self.save()
        return folder_id

    def add_media(self, link: str, media_type: MediaType | str, title: Optional[str] = None) -> MediaItem:
        """
        Add a Drive file to the current folder.

        Raises:
            InvalidInputError: empty or unrecognised link, unknown media type.
            DuplicateMediaError: the folder already holds this file.
        """
        if not link or not link.strip():
            raise InvalidInputError("Please enter a Google Drive link")
        file_id = extract_file_id(link)
        if file_id is None:
            raise InvalidInputError(
                "Invalid Google Drive link; make sure it is a shared link",
                details={"link": link},
            )
        try:
            kind = MediaType(media_type.lower() if isinstance(media_type, str) else media_type)
        except ValueError as exc:
            raise InvalidInputError(
                "Unknown media type",
                details={"type": media_type},
                cause=exc,
            ) from exc

        now = now_utc()
        clean_title = (title or "").strip() or f"Media {now.date().isoformat()}"
        item = MediaItem(id=file_id, type=kind, title=clean_title, added=now)
        self._store.add_media(self._current_folder, item)
        self.save()
        return item

    def import_csv(self, text: str) -> ImportResult:
        result = import_csv(self._store, text, self._current_folder)
        if result.imported or result.created_folders:
            self.save()
        return result

    def rename_selected(self, name: str) -> None:
        selected = self.selection.selected
        if len(selected) != 1:
            raise InvalidInputError("Select exactly one item to rename")
        ref = selected[0]
        if ref.kind is TargetKind.FOLDER:
            self._store.rename_folder(ref.node_id, name)
        else:
            self._store.rename_media(ref.folder_id or self._current_folder, ref.node_id, name)
        self.selection.clear()
        self.save()

    def delete_selected(self) -> int:
        """Delete every selected item (folders cascade); returns the count."""
        selected = self.selection.selected
        if not selected:
            return 0

        backup = self._store.to_snapshot()
        try:
            for ref in selected:
                if ref.kind is TargetKind.FOLDER:
                    # Already gone when an ancestor in the same selection was deleted.
                    if self._store.has_folder(ref.node_id):
                        self._store.delete_folder(ref.node_id)
                else:
                    folder_id = ref.folder_id or self._current_folder
                    if self._store.has_folder(folder_id):
                        self._store.delete_media(folder_id, ref.node_id)
        except MediaVaultError:
            self._store.replace(backup)
            raise

        if not self._store.has_folder(self._current_folder):
            self._current_folder = ROOT_ID
        self.selection.clear()
        self.save()
        return len(selected)

    def move_selected(self, target_folder_id: str) -> int:
        """
        Move every selected item into target_folder_id.

        All-or-nothing: on the first error the tree is restored and the error
        re-raised (e.g., CyclicMoveError).
        """
        if not target_folder_id:
            raise InvalidInputError("Please select a target folder")
        self._store.get_folder(target_folder_id)
        selected = self.selection.selected
        if not selected:
            return 0

        backup = self._store.to_snapshot()
        try:
            for ref in selected:
                if ref.kind is TargetKind.FOLDER:
                    self._store.move_folder(ref.node_id, target_folder_id)
                else:
                    self._store.move_media(
                        ref.node_id,
                        ref.folder_id or self._current_folder,
                        target_folder_id,
                    )
        except MediaVaultError:
            self._store.replace(backup)
            raise

        self.selection.clear()
        self.save()
        logger.info("Moved %d items to %s", len(selected), target_folder_id)
        return len(selected)

    def media_urls(self, item: MediaItem) -> dict[str, str]:
        return {"preview": preview_url(item.id), "thumbnail": thumbnail_url(item.id)}

    # ----------------------------
    # Internals
    # ----------------------------
    def _handle_drop(self, target_folder_id: str, selected: tuple[NodeRef, ...]) -> None:
        self.move_selected(target_folder_id)

    def _handle_activate(self, ref: NodeRef) -> None:
        if ref.kind in (TargetKind.FOLDER, TargetKind.BREADCRUMB):
            self.navigate(ref.node_id)
            return
        item = self._store.get_media(ref.folder_id or self._current_folder, ref.node_id)
        if item.is_video:
            self.playing = item

    def _apply_remote(self, remote: Snapshot) -> None:
        self._store.replace(remote)
        self._try_backup(remote)
        if not self._store.has_folder(self._current_folder):
            self._current_folder = ROOT_ID
        self.selection.clear()

    def _try_backup(self, snapshot: Snapshot) -> None:
        try:
            self._local.save(snapshot)
        except MediaVaultError as exc:
            logger.warning("Could not write local backup: %s", exc)
            self._last_error = exc

    def _try_load(
        self,
        adapter: PersistenceAdapter,
        *,
        quiet: bool = False,
    ) -> tuple[Optional[Snapshot], Optional[MediaVaultError]]:
        """Load and validate; an inconsistent tree counts as a failed load."""
        try:
            snapshot = adapter.load()
            validate_tree(snapshot)
            return snapshot, None
        except NotFoundError as exc:
            logger.debug("%s adapter has no snapshot: %s", adapter.name, exc)
            return None, exc
        except MediaVaultError as exc:
            log = logger.debug if quiet else logger.warning
            log("%s adapter load failed: %s", adapter.name, exc)
            self._last_error = exc
            return None, exc

    def _set_status(self, status: VaultStatus) -> None:
        if status != self._status:
            logger.info("Vault status: %s -> %s", self._status.value, status.value)
        self._status = status
