import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from google.auth.exceptions import DefaultCredentialsError

from mediavault.auth import DATASTORE_SCOPES, AuthInfo, CredentialsProvider
from mediavault.errors import AuthError, InvalidInputError


class TestCredentialsProvider(unittest.TestCase):
    def test_get_credentials_loads_token_file_without_refresh(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            token_file = tmp_path / "token.json"

            token_payload = {
                "token": "fake-token",
                "refresh_token": "fake-refresh-token",
                "token_uri": "https://oauth2.googleapis.com/token",
                "client_id": "fake-client-id",
                "client_secret": "fake-client-secret",
                "scopes": list(DATASTORE_SCOPES),
                "type": "authorized_user",
            }
            token_file.write_text(json.dumps(token_payload), encoding="utf-8")

            info = AuthInfo(
                kind="oauth",
                data={
                    "client_secrets_file": str(tmp_path / "client_secrets.json"),
                    "token_file": str(token_file),
                },
            )
            provider = CredentialsProvider(info)
            creds = provider.get_credentials(ensure_valid=False)

            self.assertEqual(creds.refresh_token, "fake-refresh-token")

    def test_unreadable_token_file_raises_auth_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            token_file = Path(tmp) / "token.json"
            token_file.write_text("{}", encoding="utf-8")
            info = AuthInfo(
                kind="oauth",
                data={"client_secrets_file": "unused.json", "token_file": str(token_file)},
            )
            with self.assertRaises(AuthError):
                CredentialsProvider(info).get_credentials(ensure_valid=False)

    def test_invalid_scopes(self) -> None:
        provider = CredentialsProvider(AuthInfo(kind="default", data={}))
        with self.assertRaises(InvalidInputError):
            provider.get_credentials(scopes=[])
        with self.assertRaises(InvalidInputError):
            provider.get_credentials(scopes=[" "])

    @patch("google.auth.default")
    def test_default_credentials(self, default_mock: Mock) -> None:
        creds = Mock()
        default_mock.return_value = (creds, "proj")
        provider = CredentialsProvider(AuthInfo(kind="default", data={}))

        self.assertIs(provider.get_credentials(), creds)
        default_mock.assert_called_once_with(scopes=list(DATASTORE_SCOPES))

    @patch("google.auth.default")
    def test_default_credentials_missing(self, default_mock: Mock) -> None:
        default_mock.side_effect = DefaultCredentialsError("none")
        provider = CredentialsProvider(AuthInfo(kind="default", data={}))
        with self.assertRaises(AuthError):
            provider.get_credentials()

    @patch("google.oauth2.service_account.Credentials.from_service_account_file")
    def test_service_account_credentials(self, from_file: Mock) -> None:
        creds = Mock()
        from_file.return_value = creds
        info = AuthInfo(kind="service_account", data={"credentials_file": "/tmp/sa.json"})

        self.assertIs(CredentialsProvider(info).get_credentials(), creds)
        from_file.assert_called_once_with("/tmp/sa.json", scopes=list(DATASTORE_SCOPES))

    @patch("google.oauth2.service_account.Credentials.from_service_account_file")
    def test_service_account_load_failure(self, from_file: Mock) -> None:
        from_file.side_effect = FileNotFoundError("/tmp/sa.json")
        info = AuthInfo(kind="service_account", data={"credentials_file": "/tmp/sa.json"})
        with self.assertRaises(AuthError) as ctx:
            CredentialsProvider(info).get_credentials()
        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)

    @patch("google.cloud.firestore.Client")
    @patch("google.auth.default")
    def test_build_firestore_client(self, default_mock: Mock, client_cls: Mock) -> None:
        creds = Mock()
        default_mock.return_value = (creds, None)
        provider = CredentialsProvider(AuthInfo(kind="default", data={}))

        client = provider.build_firestore_client(project="demo")

        self.assertIs(client, client_cls.return_value)
        client_cls.assert_called_once_with(project="demo", credentials=creds)


if __name__ == "__main__":
    unittest.main()
