import unittest
import uuid

from mediavault.util.ids import new_folder_id, new_installation_id, new_uuid


class TestUtilIds(unittest.TestCase):
    def test_new_uuid_is_valid_uuid4(self) -> None:
        value = new_uuid()
        parsed = uuid.UUID(value)
        self.assertEqual(parsed.version, 4)

    def test_new_folder_id_prefix_and_uniqueness(self) -> None:
        ids = {new_folder_id() for _ in range(100)}
        self.assertEqual(len(ids), 100)
        for value in ids:
            self.assertTrue(value.startswith("folder-"))

    def test_new_installation_id_is_hex(self) -> None:
        value = new_installation_id()
        self.assertEqual(len(value), 32)
        int(value, 16)


if __name__ == "__main__":
    unittest.main()
