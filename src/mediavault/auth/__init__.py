"""Public auth exports for mediavault."""

from __future__ import annotations

from .access_gate import AccessGate
from .auth_info import AuthInfo
from .credentials import DATASTORE_SCOPES, CredentialsProvider

__all__ = ["AccessGate", "AuthInfo", "CredentialsProvider", "DATASTORE_SCOPES"]
