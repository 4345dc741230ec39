"""Google credentials and Firestore client construction."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from mediavault.errors import AuthError, InvalidInputError

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)

DATASTORE_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/datastore",)


class CredentialsProvider:
    """Load, refresh and persist credentials described by an AuthInfo."""

    def __init__(self, auth_info: AuthInfo) -> None:
        self._auth_info = auth_info

    @property
    def auth_info(self) -> AuthInfo:
        return self._auth_info

    def get_credentials(
        self,
        scopes: Sequence[str] = DATASTORE_SCOPES,
        ensure_valid: bool = True,
    ):
        """
        Return google-auth credentials for the given scopes.

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidInputError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidInputError("scopes must be a non-empty sequence of strings")

        if self._auth_info.kind == "service_account":
            return self._service_account_credentials(scopes)
        if self._auth_info.kind == "default":
            return self._default_credentials(scopes)
        return self._oauth_credentials(scopes, ensure_valid)

    def build_firestore_client(self, project: Optional[str] = None):
        """
        Build a Firestore client.

        Returns:
            google.cloud.firestore.Client
        """
        from google.cloud import firestore

        creds = self.get_credentials(DATASTORE_SCOPES)
        try:
            return firestore.Client(project=project, credentials=creds)
        except Exception as exc:
            raise AuthError(
                "Failed to build Firestore client",
                details={"project": project},
                cause=exc,
            ) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _service_account_credentials(self, scopes: Sequence[str]):
        from google.oauth2 import service_account

        path = self._auth_info.credentials_file
        try:
            return service_account.Credentials.from_service_account_file(
                path,
                scopes=list(scopes),
            )
        except Exception as exc:
            raise AuthError(
                "Failed to load service account credentials",
                details={"credentials_file": path},
                cause=exc,
            ) from exc

    def _default_credentials(self, scopes: Sequence[str]):
        import google.auth
        from google.auth.exceptions import DefaultCredentialsError

        try:
            creds, _project = google.auth.default(scopes=list(scopes))
        except DefaultCredentialsError as exc:
            raise AuthError("Application default credentials are not available", cause=exc) from exc
        return creds

    def _oauth_credentials(self, scopes: Sequence[str], ensure_valid: bool):
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow

        token_file = self._auth_info.token_file
        creds = None

        if os.path.exists(token_file):
            try:
                creds = Credentials.from_authorized_user_file(
                    token_file,
                    scopes=list(scopes),
                )
            except Exception as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

            # When ensure_valid is False, return loaded credentials as-is.
            if not ensure_valid:
                return creds

            if not creds.valid and creds.refresh_token:
                try:
                    creds.refresh(Request())
                    self._save_credentials(creds)
                except AuthError:
                    raise
                except Exception as exc:
                    raise AuthError(
                        "Failed to refresh OAuth credentials",
                        details={"token_file": token_file},
                        cause=exc,
                    ) from exc

            if creds.valid:
                return creds

        # No token, or token could not be validated/refreshed -> run OAuth flow.
        client_secrets = self._auth_info.client_secrets_file
        logger.info("Starting OAuth authorization flow using %s", client_secrets)
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                client_secrets,
                scopes=list(scopes),
            )
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={
                    "client_secrets_file": client_secrets,
                    "token_file": token_file,
                },
                cause=exc,
            ) from exc
        self._save_credentials(creds)
        return creds

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)

        try:
            if token_dir:
                os.makedirs(token_dir, exist_ok=True)
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
