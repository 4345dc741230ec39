"""mediavault public API."""

from __future__ import annotations

from mediavault.adapters import (
    FirestoreAdapter,
    LocalStorageAdapter,
    PersistenceAdapter,
    StaticFetchAdapter,
    build_adapter,
)
from mediavault.auth import AccessGate, AuthInfo, CredentialsProvider
from mediavault.config import VaultConfig
from mediavault.errors import (
    AccessDeniedError,
    AdapterUnavailableError,
    AuthError,
    CyclicMoveError,
    DuplicateMediaError,
    InvalidInputError,
    InvalidOperationError,
    InvalidParentError,
    InvalidStateError,
    MediaVaultError,
    NotFoundError,
)
from mediavault.ingest import import_csv, parse_csv
from mediavault.models import (
    ROOT_ID,
    FolderNode,
    ImportResult,
    MediaItem,
    MediaType,
    PathEntry,
    Snapshot,
)
from mediavault.selection import (
    EventKind,
    NodeRef,
    SelectionController,
    SelectionMode,
    TargetKind,
    UiEvent,
)
from mediavault.sync import SyncReconciler, pick_newer
from mediavault.tree import TreeStore, validate_tree
from mediavault.util import KeyValueStore, extract_file_id
from mediavault.vault import MediaVault, VaultStatus

__version__ = "0.1.0"

__all__ = [
    # High-level
    "MediaVault",
    "VaultStatus",
    "VaultConfig",
    # Tree / models
    "TreeStore",
    "validate_tree",
    "ROOT_ID",
    "FolderNode",
    "MediaItem",
    "MediaType",
    "PathEntry",
    "Snapshot",
    "ImportResult",
    # Persistence
    "PersistenceAdapter",
    "LocalStorageAdapter",
    "StaticFetchAdapter",
    "FirestoreAdapter",
    "KeyValueStore",
    "build_adapter",
    # Sync / selection
    "SyncReconciler",
    "pick_newer",
    "SelectionController",
    "SelectionMode",
    "EventKind",
    "TargetKind",
    "NodeRef",
    "UiEvent",
    # Ingest / links
    "parse_csv",
    "import_csv",
    "extract_file_id",
    # Auth
    "AccessGate",
    "AuthInfo",
    "CredentialsProvider",
    # Errors
    "MediaVaultError",
    "NotFoundError",
    "InvalidParentError",
    "InvalidInputError",
    "DuplicateMediaError",
    "CyclicMoveError",
    "InvalidOperationError",
    "InvalidStateError",
    "AdapterUnavailableError",
    "AuthError",
    "AccessDeniedError",
]
