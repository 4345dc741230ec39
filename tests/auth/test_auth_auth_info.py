import unittest

from mediavault.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def test_auth_info_valid_oauth(self) -> None:
        info = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": "/tmp/client_secrets.json",
                "token_file": "/tmp/token.json",
            },
        )
        self.assertEqual(info.kind, "oauth")
        self.assertEqual(info.token_file, "/tmp/token.json")

    def test_auth_info_valid_service_account(self) -> None:
        info = AuthInfo(kind="service_account", data={"credentials_file": "/tmp/sa.json"})
        self.assertEqual(info.credentials_file, "/tmp/sa.json")

    def test_auth_info_default_needs_no_data(self) -> None:
        self.assertEqual(AuthInfo(kind="default", data={}).kind, "default")

    def test_auth_info_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="api_key", data={})

    def test_auth_info_missing_keys(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={"client_secrets_file": "x"})
        with self.assertRaises(ValueError):
            AuthInfo(kind="service_account", data={"credentials_file": "  "})

    def test_auth_info_data_must_be_dict(self) -> None:
        with self.assertRaises(TypeError):
            AuthInfo(kind="default", data=None)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
