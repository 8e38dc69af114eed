import datetime as dt
import sqlite3
import tempfile
import unittest
from pathlib import Path

from storage import FocusRecordStore, StorageError

T0 = dt.datetime(2026, 2, 21, 9, 0, tzinfo=dt.timezone.utc)


class FocusRecordStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FocusRecordStore(":memory:")

    def tearDown(self) -> None:
        self.store.close()

    def test_append_then_recent_returns_newest_first(self) -> None:
        self.store.append("Writing", 1500, T0, 1)
        self.store.append("Reading", 1200, T0 + dt.timedelta(hours=1), 2)
        self.store.append("Coding", 1500, T0 + dt.timedelta(hours=2), 3)

        records = self.store.recent(2)

        self.assertEqual(["Coding", "Reading"], [record.task for record in records])
        self.assertEqual(1500, records[0].duration_seconds)
        self.assertEqual(3, records[0].completed_focus_cycles)
        self.assertEqual(T0 + dt.timedelta(hours=2), records[0].completed_at)

    def test_recent_with_zero_limit_returns_all(self) -> None:
        for index in range(12):
            self.store.append("Task", 60, T0 + dt.timedelta(minutes=index), index % 4)

        self.assertEqual(12, len(self.store.recent(0)))

    def test_total_focus_seconds_filters_by_since(self) -> None:
        self.store.append("Yesterday", 1500, T0 - dt.timedelta(days=1), 1)
        self.store.append("Today", 1500, T0, 1)
        self.store.append("Today", 900, T0 + dt.timedelta(hours=1), 2)

        self.assertEqual(3900, self.store.total_focus_seconds())
        self.assertEqual(2400, self.store.total_focus_seconds(since=T0))

    def test_empty_store_totals_zero(self) -> None:
        self.assertEqual([], self.store.recent())
        self.assertEqual(0, self.store.total_focus_seconds())

    def test_schema_matches_focus_records_table(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = Path(temp_dir) / "nested" / "focus.db"
            store = FocusRecordStore(str(db_path))
            store.append("Writing", 1500, T0, 1)
            store.close()

            conn = sqlite3.connect(db_path)
            try:
                row = conn.execute(
                    "SELECT task, duration_secs, completed_at, completed_pomodoros "
                    "FROM focus_records"
                ).fetchone()
            finally:
                conn.close()

        self.assertEqual(("Writing", 1500, "2026-02-21T09:00:00+00:00", 1), row)

    def test_closed_store_raises_storage_error(self) -> None:
        self.store.close()

        with self.assertRaises(StorageError):
            self.store.append("Writing", 1500, T0, 1)
        with self.assertRaises(StorageError):
            self.store.recent()

        self.store = FocusRecordStore(":memory:")


if __name__ == "__main__":
    unittest.main()
