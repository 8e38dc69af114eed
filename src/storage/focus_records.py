"""SQLite log of completed focus phases."""

from __future__ import annotations

import datetime as dt
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import StorageError

_SCHEMA = """
CREATE TABLE IF NOT EXISTS focus_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task TEXT NOT NULL,
    duration_secs INTEGER NOT NULL,
    completed_at TEXT NOT NULL,
    completed_pomodoros INTEGER NOT NULL
);
"""


@dataclass(frozen=True)
class FocusRecord:
    """One completed focus phase as stored in `focus_records`."""
    id: int
    task: str
    duration_seconds: int
    completed_at: dt.datetime
    completed_focus_cycles: int


class FocusRecordStore:
    """Appends and lists focus records in a single SQLite file."""

    def __init__(self, db_path: str, *, logger: Optional[logging.Logger] = None):
        self._db_path = db_path
        self._logger = logger or logging.getLogger("storage.focus_records")
        try:
            if db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
            self._conn.commit()
        except (OSError, sqlite3.Error) as error:
            raise StorageError(f"Failed to open focus record database {db_path}: {error}") from error
        self._logger.debug("Opened focus record database: %s", db_path)

    @property
    def db_path(self) -> str:
        return self._db_path

    def append(
        self,
        task: str,
        duration_seconds: int,
        completed_at: dt.datetime,
        completed_focus_cycles: int,
    ) -> None:
        try:
            self._conn.execute(
                "INSERT INTO focus_records "
                "(task, duration_secs, completed_at, completed_pomodoros) "
                "VALUES (?, ?, ?, ?)",
                (
                    task,
                    int(duration_seconds),
                    completed_at.isoformat(timespec="seconds"),
                    int(completed_focus_cycles),
                ),
            )
            self._conn.commit()
        except sqlite3.Error as error:
            raise StorageError(f"Failed to append focus record: {error}") from error
        self._logger.info(
            "Focus record saved: task=%s duration=%ss cycles=%d",
            task,
            duration_seconds,
            completed_focus_cycles,
        )

    def recent(self, limit: int = 10) -> list[FocusRecord]:
        """Newest records first; `limit` 0 returns everything."""
        query = (
            "SELECT id, task, duration_secs, completed_at, completed_pomodoros "
            "FROM focus_records ORDER BY completed_at DESC, id DESC"
        )
        params: tuple[int, ...] = ()
        if limit > 0:
            query += " LIMIT ?"
            params = (int(limit),)
        try:
            rows = self._conn.execute(query, params).fetchall()
        except sqlite3.Error as error:
            raise StorageError(f"Failed to load focus records: {error}") from error
        return [_row_to_record(row) for row in rows]

    def total_focus_seconds(self, since: Optional[dt.datetime] = None) -> int:
        query = "SELECT COALESCE(SUM(duration_secs), 0) AS total FROM focus_records"
        params: tuple[str, ...] = ()
        if since is not None:
            query += " WHERE completed_at >= ?"
            params = (since.isoformat(timespec="seconds"),)
        try:
            row = self._conn.execute(query, params).fetchone()
        except sqlite3.Error as error:
            raise StorageError(f"Failed to sum focus records: {error}") from error
        return int(row["total"])

    def close(self) -> None:
        self._conn.close()


def _row_to_record(row: sqlite3.Row) -> FocusRecord:
    return FocusRecord(
        id=int(row["id"]),
        task=row["task"],
        duration_seconds=int(row["duration_secs"]),
        completed_at=dt.datetime.fromisoformat(row["completed_at"]),
        completed_focus_cycles=int(row["completed_pomodoros"]),
    )
