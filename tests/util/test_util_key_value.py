import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from mediavault.errors import AdapterUnavailableError
from mediavault.util.key_value import KeyValueStore


class TestKeyValueStore(unittest.TestCase):
    def test_in_memory_store(self) -> None:
        store = KeyValueStore()
        self.assertIsNone(store.get_item("a"))
        store.set_item("a", "1")
        self.assertEqual(store.get_item("a"), "1")
        store.remove_item("a")
        self.assertIsNone(store.get_item("a"))

    def test_values_must_be_strings(self) -> None:
        store = KeyValueStore()
        with self.assertRaises(TypeError):
            store.set_item("a", 1)  # type: ignore[arg-type]

    def test_persists_across_instances(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "vault.json")
            store = KeyValueStore(path)
            store.set_item("k", "v")
            store.set_item("other", "x")

            reopened = KeyValueStore(path)
            self.assertEqual(reopened.get_item("k"), "v")
            self.assertEqual(sorted(reopened.keys()), ["k", "other"])

            reopened.clear()
            self.assertEqual(KeyValueStore(path).keys(), [])

    def test_leaves_no_temp_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "vault.json"
            store = KeyValueStore(str(path))
            store.set_item("k", "v")
            self.assertEqual([p.name for p in Path(tmp).iterdir()], ["vault.json"])
            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"k": "v"})

    def test_failed_write_leaves_memory_and_disk_unchanged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "vault.json"
            store = KeyValueStore(str(path))
            store.set_item("k", "old")

            with patch("mediavault.util.key_value.os.replace", side_effect=OSError("disk full")):
                with self.assertRaises(AdapterUnavailableError):
                    store.set_items({"k": "new", "extra": "x"})
                with self.assertRaises(AdapterUnavailableError):
                    store.remove_item("k")

            self.assertEqual(store.get_item("k"), "old")
            self.assertIsNone(store.get_item("extra"))
            self.assertEqual(KeyValueStore(str(path)).keys(), ["k"])
            self.assertEqual([p.name for p in Path(tmp).iterdir()], ["vault.json"])

    def test_set_items_rejects_non_strings_before_writing(self) -> None:
        store = KeyValueStore()
        with self.assertRaises(TypeError):
            store.set_items({"a": "1", "b": 2})  # type: ignore[dict-item]
        self.assertEqual(store.keys(), [])

    def test_unreadable_file_starts_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "vault.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertLogs("mediavault.util.key_value", level="WARNING"):
                store = KeyValueStore(str(path))
            self.assertEqual(store.keys(), [])

    def test_non_string_values_are_dropped_on_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "vault.json"
            path.write_text(json.dumps({"a": "1", "b": 2}), encoding="utf-8")
            store = KeyValueStore(str(path))
            self.assertEqual(store.keys(), ["a"])


if __name__ == "__main__":
    unittest.main()
