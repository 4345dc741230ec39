"""Vault configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from mediavault.auth import AuthInfo

BACKENDS: tuple[str, ...] = ("local", "static", "firestore")

DEFAULT_DATA_DIR: str = "~/.mediavault"
DEFAULT_STATIC_PATH: str = "data/media-vault.json"
DEFAULT_COLLECTION: str = "mediaVaults"
DEFAULT_PASSPHRASE: str = "1"

ENV_PREFIX: str = "MEDIAVAULT_"


@dataclass(slots=True, frozen=True)
class VaultConfig:
    """
    Settings for one vault instance.

    backend:
        - "local": key-value file only
        - "static": read from static_base_url/static_path, keep a local copy
        - "firestore": one document in firestore_collection, keep a local copy
    """

    backend: str = "local"
    data_dir: str = DEFAULT_DATA_DIR
    static_base_url: Optional[str] = None
    static_path: str = DEFAULT_STATIC_PATH
    http_timeout: float = 10.0
    firestore_project: Optional[str] = None
    firestore_collection: str = DEFAULT_COLLECTION
    auth: Optional[AuthInfo] = None
    passphrase: str = DEFAULT_PASSPHRASE

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {self.backend!r}")
        if not isinstance(self.data_dir, str) or not self.data_dir.strip():
            raise ValueError("data_dir must be a non-empty string")
        if self.backend == "static" and not self.static_base_url:
            raise ValueError("static_base_url is required for the static backend")
        if not isinstance(self.http_timeout, (int, float)) or self.http_timeout <= 0:
            raise ValueError("http_timeout must be a positive number")
        if not self.firestore_collection:
            raise ValueError("firestore_collection must be a non-empty string")
        if self.auth is not None and not isinstance(self.auth, AuthInfo):
            raise TypeError("auth must be an AuthInfo")
        if not isinstance(self.passphrase, str) or not self.passphrase:
            raise ValueError("passphrase must be a non-empty string")

    @property
    def storage_path(self) -> str:
        """File backing the local key-value store."""
        return os.path.join(os.path.expanduser(self.data_dir), "vault.json")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> VaultConfig:
        """
        Read MEDIAVAULT_* variables.

        BACKEND, DATA_DIR, STATIC_BASE_URL, STATIC_PATH, HTTP_TIMEOUT,
        FIRESTORE_PROJECT, FIRESTORE_COLLECTION, PASSPHRASE, and for
        credentials either CREDENTIALS_FILE (service account) or
        CLIENT_SECRETS + TOKEN_FILE (OAuth).
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name, "").strip()
            return value or None

        auth: Optional[AuthInfo] = None
        if get("CREDENTIALS_FILE"):
            auth = AuthInfo(kind="service_account", data={"credentials_file": get("CREDENTIALS_FILE")})
        elif get("CLIENT_SECRETS") or get("TOKEN_FILE"):
            auth = AuthInfo(
                kind="oauth",
                data={
                    "client_secrets_file": get("CLIENT_SECRETS"),
                    "token_file": get("TOKEN_FILE"),
                },
            )

        timeout_raw = get("HTTP_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else 10.0
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}HTTP_TIMEOUT must be a number") from exc

        return cls(
            backend=(get("BACKEND") or "local").lower(),
            data_dir=get("DATA_DIR") or DEFAULT_DATA_DIR,
            static_base_url=get("STATIC_BASE_URL"),
            static_path=get("STATIC_PATH") or DEFAULT_STATIC_PATH,
            http_timeout=timeout,
            firestore_project=get("FIRESTORE_PROJECT"),
            firestore_collection=get("FIRESTORE_COLLECTION") or DEFAULT_COLLECTION,
            auth=auth,
            passphrase=get("PASSPHRASE") or DEFAULT_PASSPHRASE,
        )
