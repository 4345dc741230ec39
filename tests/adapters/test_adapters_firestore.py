import unittest
from unittest.mock import Mock

from google.api_core import exceptions as gexc

from mediavault.adapters import FirestoreAdapter, installation_id
from mediavault.adapters.firestore_adapter import INSTALLATION_ID_KEY
from mediavault.errors import AdapterUnavailableError, AuthError, NotFoundError
from mediavault.models import ROOT_ID, Snapshot
from mediavault.tree import TreeStore
from mediavault.util.key_value import KeyValueStore


def _doc(payload=None) -> Mock:
    doc = Mock()
    doc.exists = payload is not None
    doc.to_dict.return_value = payload
    return doc


class TestInstallationId(unittest.TestCase):
    def test_created_once(self) -> None:
        store = KeyValueStore()
        first = installation_id(store)
        self.assertEqual(store.get_item(INSTALLATION_ID_KEY), first)
        self.assertEqual(installation_id(store), first)


class TestFirestoreAdapter(unittest.TestCase):
    def setUp(self) -> None:
        self.client = Mock()
        self.document = self.client.collection.return_value.document.return_value
        self.adapter = FirestoreAdapter(self.client, "install-1", collection="vaults")

    def test_document_path(self) -> None:
        self.document.get.return_value = _doc(Snapshot.default().to_dict())
        self.adapter.load()
        self.client.collection.assert_called_once_with("vaults")
        self.client.collection.return_value.document.assert_called_once_with("install-1")

    def test_load_success(self) -> None:
        self.document.get.return_value = _doc(Snapshot.default().to_dict())
        self.assertIn(ROOT_ID, self.adapter.load().folders)

    def test_load_missing_document(self) -> None:
        self.document.get.return_value = _doc(None)
        with self.assertRaises(NotFoundError):
            self.adapter.load()

    def test_save_replaces_snapshot_fields_whole(self) -> None:
        snap = Snapshot.default()
        self.adapter.save(snap)
        self.document.set.assert_called_once_with(
            snap.to_dict(),
            merge=["folderStructure", "mediaData", "lastUpdated", "version"],
        )

    def test_deleted_folder_is_dropped_from_written_fields(self) -> None:
        tree = TreeStore()
        folder_id = tree.create_folder(ROOT_ID, "A")
        self.adapter.save(tree.to_snapshot())
        tree.delete_folder(folder_id)
        self.adapter.save(tree.to_snapshot())

        args, kwargs = self.document.set.call_args
        data = args[0]
        mask = kwargs["merge"]
        # The whole maps are in the mask, so keys absent from data are removed.
        self.assertIn("folderStructure", mask)
        self.assertIn("mediaData", mask)
        self.assertNotIn(folder_id, data["folderStructure"])
        self.assertNotIn(folder_id, data["mediaData"])

    def test_error_mapping(self) -> None:
        cases = [
            (gexc.NotFound("gone"), NotFoundError),
            (gexc.PermissionDenied("no"), AuthError),
            (gexc.Unauthenticated("who"), AuthError),
            (gexc.ServiceUnavailable("down"), AdapterUnavailableError),
            (RuntimeError("boom"), AdapterUnavailableError),
        ]
        for raised, expected in cases:
            self.document.set.side_effect = raised
            with self.assertRaises(expected) as ctx:
                self.adapter.save(Snapshot.default())
            self.assertIs(ctx.exception.cause, raised)

    def test_subscribe_delivers_snapshots(self) -> None:
        received: list[Snapshot] = []
        watch = Mock()
        self.document.on_snapshot.return_value = watch

        sub = self.adapter.subscribe(received.append)
        handler = self.document.on_snapshot.call_args[0][0]

        handler([_doc(Snapshot.default().to_dict())], [], None)
        handler([_doc(None)], [], None)
        with self.assertLogs("mediavault.adapters.firestore_adapter", level="WARNING"):
            handler([_doc({"folderStructure": {}})], [], None)

        self.assertEqual(len(received), 1)
        self.assertTrue(self.adapter.supports_subscribe)

        sub.unsubscribe()
        sub.unsubscribe()
        watch.unsubscribe.assert_called_once_with()

    def test_installation_id_required(self) -> None:
        with self.assertRaises(ValueError):
            FirestoreAdapter(self.client, "")


if __name__ == "__main__":
    unittest.main()
