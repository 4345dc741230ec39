import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from mediavault.models import Snapshot
from mediavault.sync import SyncReconciler, pick_newer

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _snap(when: datetime) -> Snapshot:
    snap = Snapshot.default()
    snap.last_updated = when
    return snap


class TestPickNewer(unittest.TestCase):
    def test_remote_wins_only_when_strictly_newer(self) -> None:
        local = _snap(T0)
        newer = _snap(T0 + timedelta(seconds=1))
        same = _snap(T0)
        self.assertIs(pick_newer(local, newer), newer)
        self.assertIs(pick_newer(local, same), local)
        self.assertIs(pick_newer(newer, local), newer)


class TestSyncReconciler(unittest.TestCase):
    def setUp(self) -> None:
        self.rec = SyncReconciler()
        self.apply = Mock()

    def test_applies_when_nothing_written_yet(self) -> None:
        self.assertTrue(self.rec.on_remote_change(_snap(T0), self.apply))
        self.apply.assert_called_once()

    def test_ignores_own_write_echo(self) -> None:
        self.rec.begin_save()
        self.rec.end_save(T0)
        echo = _snap(T0.astimezone(timezone(timedelta(hours=9))))
        self.assertFalse(self.rec.on_remote_change(echo, self.apply))
        self.apply.assert_not_called()

    def test_applies_foreign_change(self) -> None:
        self.rec.begin_save()
        self.rec.end_save(T0)
        self.assertTrue(self.rec.on_remote_change(_snap(T0 + timedelta(minutes=1)), self.apply))

    def test_ignored_while_saving(self) -> None:
        self.rec.begin_save()
        self.assertTrue(self.rec.saving)
        self.assertFalse(self.rec.should_apply(_snap(T0)))
        self.rec.abort_save()
        self.assertFalse(self.rec.saving)
        self.assertIsNone(self.rec.last_written)
        self.assertTrue(self.rec.should_apply(_snap(T0)))

    def test_applying_remote_keeps_last_written(self) -> None:
        self.rec.begin_save()
        self.rec.end_save(T0)
        self.rec.on_remote_change(_snap(T0 + timedelta(minutes=1)), self.apply)
        self.assertEqual(self.rec.last_written, T0)

    def test_end_save_rejects_naive(self) -> None:
        with self.assertRaises(ValueError):
            self.rec.end_save(datetime(2025, 1, 1))


if __name__ == "__main__":
    unittest.main()
