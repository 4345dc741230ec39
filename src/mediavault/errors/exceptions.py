"""Exception hierarchy and HTTP error mapping for mediavault."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class MediaVaultError(Exception):
    """
    Base exception for mediavault.

    Attributes:
        details: Optional structured information (e.g., folder id, HTTP status).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class NotFoundError(MediaVaultError):
    """Raised when a folder, media item, path link or stored snapshot is absent."""


class InvalidParentError(NotFoundError):
    """Raised when a folder is created under a parent that does not exist."""


class InvalidInputError(MediaVaultError):
    """Raised for empty names, unparseable links and malformed CSV or payloads."""


class DuplicateMediaError(InvalidInputError):
    """Raised when a folder already holds a media item with the same id."""


class CyclicMoveError(MediaVaultError):
    """Raised when a folder would be moved into itself or one of its descendants."""


class InvalidOperationError(MediaVaultError):
    """Raised for operations that are never allowed (e.g., deleting root)."""


class InvalidStateError(MediaVaultError):
    """Raised when the vault is used in an invalid state or the tree is corrupted."""


class AdapterUnavailableError(MediaVaultError):
    """Raised when a persistence backend cannot be reached."""


class AuthError(AdapterUnavailableError):
    """Raised when backend credentials cannot be loaded or refreshed."""


class AccessDeniedError(MediaVaultError):
    """Raised when the shared access code does not match."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to mediavault exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_UNAVAILABLE_STATUS_CODES: frozenset[int] = frozenset({408, 429})


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> MediaVaultError:
    """
    Map a non-success HTTP response from a static content host.

    Policy:
        - 408/429 -> AdapterUnavailableError (host busy, try again later)
        - 5xx -> AdapterUnavailableError
        - any other status (404, 410, 401, 403, ...) -> NotFoundError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code in _UNAVAILABLE_STATUS_CODES:
        return AdapterUnavailableError(message, details=details, cause=cause)
    if 500 <= info.status_code <= 599:
        return AdapterUnavailableError(message, details=details, cause=cause)

    return NotFoundError(message, details=details, cause=cause)
