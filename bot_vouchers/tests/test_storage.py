# tests/test_storage.py
import tempfile
import unittest
from pathlib import Path

from bot_vouchers.core.storage import LocalStore


class TestLocalStore(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "data" / "storage.json"
        self.store = LocalStore(self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_is_empty(self):
        self.assertIsNone(self.store.get_item("token"))

    def test_set_get_remove(self):
        self.store.set_item("token", "abc")
        self.store.set_item("@settings_monthStartDay", "10")
        self.assertEqual(LocalStore(self.path).get_item("token"), "abc")

        self.store.remove_item("token")
        self.assertIsNone(self.store.get_item("token"))
        self.assertEqual(self.store.get_item("@settings_monthStartDay"), "10")

    def test_corrupted_file_is_ignored(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("bot_vouchers.core.storage", level="WARNING"):
            self.assertIsNone(self.store.get_item("token"))


if __name__ == "__main__":
    unittest.main()
