import unittest
from unittest.mock import Mock, patch

from mediavault.adapters import (
    FirestoreAdapter,
    LocalStorageAdapter,
    StaticFetchAdapter,
    build_adapter,
)
from mediavault.config import VaultConfig
from mediavault.util.key_value import KeyValueStore


class TestBuildAdapter(unittest.TestCase):
    def test_local(self) -> None:
        adapter = build_adapter(VaultConfig(), KeyValueStore())
        self.assertIsInstance(adapter, LocalStorageAdapter)

    def test_static(self) -> None:
        config = VaultConfig(
            backend="static",
            static_base_url="https://example.org/vault",
            http_timeout=2.5,
        )
        adapter = build_adapter(config, KeyValueStore())
        self.assertIsInstance(adapter, StaticFetchAdapter)
        self.assertEqual(adapter.url, "https://example.org/vault/data/media-vault.json")

    @patch("mediavault.adapters.firestore_adapter.CredentialsProvider")
    def test_firestore(self, provider_cls: Mock) -> None:
        client = Mock()
        provider_cls.return_value.build_firestore_client.return_value = client
        store = KeyValueStore()
        config = VaultConfig(backend="firestore", firestore_project="demo")

        adapter = build_adapter(config, store)

        self.assertIsInstance(adapter, FirestoreAdapter)
        self.assertEqual(adapter.collection, "mediaVaults")
        self.assertEqual(adapter.installation_id, store.get_item("mv_installationId"))
        provider_cls.return_value.build_firestore_client.assert_called_once_with("demo")
        self.assertEqual(provider_cls.call_args[0][0].kind, "default")


if __name__ == "__main__":
    unittest.main()
