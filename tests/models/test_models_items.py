import unittest

from mediavault.models import FolderNode, ImportResult, MediaItem, MediaType, PathEntry


class TestModels(unittest.TestCase):
    def test_folder_node_root_and_copy(self) -> None:
        root = FolderNode(id="root", name="Home", parent_id=None, child_ids=["a"])
        self.assertTrue(root.is_root)
        copy = root.copy()
        copy.child_ids.append("b")
        self.assertEqual(root.child_ids, ["a"])
        self.assertFalse(FolderNode(id="a", name="A", parent_id="root").is_root)

    def test_media_type_values(self) -> None:
        self.assertEqual(MediaType("video"), MediaType.VIDEO)
        self.assertEqual(MediaType.IMAGE.value, "image")

    def test_media_item_defaults(self) -> None:
        item = MediaItem(id="x", type=MediaType.VIDEO)
        self.assertEqual(item.title, "Untitled")
        self.assertTrue(item.is_video)
        self.assertFalse(MediaItem(id="y", type=MediaType.IMAGE).is_video)

    def test_path_entry_is_frozen(self) -> None:
        entry = PathEntry(id="root", name="Home")
        with self.assertRaises(AttributeError):
            entry.name = "Other"  # type: ignore[misc]

    def test_import_result_total(self) -> None:
        result = ImportResult(imported=3, skipped=2)
        self.assertEqual(result.total, 5)
        self.assertEqual(result.created_folders, [])


if __name__ == "__main__":
    unittest.main()
