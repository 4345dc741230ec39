"""Public error exports for mediavault."""

from __future__ import annotations

from .exceptions import (
    AccessDeniedError,
    AdapterUnavailableError,
    AuthError,
    CyclicMoveError,
    DuplicateMediaError,
    HttpErrorInfo,
    InvalidInputError,
    InvalidOperationError,
    InvalidParentError,
    InvalidStateError,
    MediaVaultError,
    NotFoundError,
    map_http_error,
)

__all__ = [
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
    "HttpErrorInfo",
    "map_http_error",
]
