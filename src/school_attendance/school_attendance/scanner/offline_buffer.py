"""Device-local buffer of scans that could not reach the canonical store.

Backed by a single SQLite file. Every write is committed before the call returns;
storage failures are logged and reported through the return value.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DATE_FORMAT
from ..core.enums import AttendanceType
from .model import OfflineAttendanceEvent, PendingStudent, SyncLogEntry

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS offline_attendance (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    student_id TEXT NOT NULL,
    attendance_type TEXT NOT NULL,
    scan_time TEXT NOT NULL,
    device_id TEXT,
    is_synced INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_offline_attendance_unsynced ON offline_attendance (is_synced, student_id);
CREATE TABLE IF NOT EXISTS sync_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    sync_type TEXT NOT NULL,
    record_count INTEGER NOT NULL DEFAULT 0,
    sync_time TEXT NOT NULL,
    status TEXT NOT NULL,
    error_message TEXT
);
"""


def _to_text(value: datetime) -> str:
    return value.isoformat(sep=" ", timespec="seconds")


def _from_text(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _to_event(row: sqlite3.Row) -> OfflineAttendanceEvent:
    return OfflineAttendanceEvent(
        id=int(row["id"]),
        student_id=row["student_id"],
        attendance_type=AttendanceType(row["attendance_type"]),
        scan_time=_from_text(row["scan_time"]),
        device_id=row["device_id"],
        is_synced=bool(row["is_synced"]),
        created_at=_from_text(row["created_at"]),
    )


class OfflineBuffer:
    def __init__(self, db_path: str | Path, *, clock: Callable[[], datetime] = now_local):
        self._db_path = Path(db_path)
        self._clock = clock
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(str(self._db_path))) as conn:
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn

    def append(
        self,
        student_id: str,
        attendance_type: AttendanceType,
        device_id: Optional[str] = None,
        scan_time: Optional[datetime] = None,
    ) -> bool:
        student_id = require_non_empty(student_id, "studentId")
        attendance_type = AttendanceType(attendance_type)
        now = self._clock()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO offline_attendance (student_id, attendance_type, scan_time, device_id, is_synced, created_at)
                    VALUES (?, ?, ?, ?, 0, ?)
                    """,
                    (student_id, attendance_type.value, _to_text(scan_time or now), device_id, _to_text(now)),
                )
        except sqlite3.Error:
            logger.exception("Could not buffer %s for student %s", attendance_type.value, student_id)
            return False

        logger.info("Buffered %s for student %s offline", attendance_type.value, student_id)
        return True

    def unsynced_events(self) -> Optional[List[OfflineAttendanceEvent]]:
        """Unsynced events, oldest scan first; None when the buffer cannot be read."""
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT * FROM offline_attendance WHERE is_synced = 0 ORDER BY scan_time, id"
                ).fetchall()
        except sqlite3.Error:
            logger.exception("Could not read unsynced offline events")
            return None
        return [_to_event(r) for r in rows]

    def unsynced_events_for(self, student_id: str) -> Optional[List[OfflineAttendanceEvent]]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT * FROM offline_attendance WHERE is_synced = 0 AND student_id = ? ORDER BY scan_time, id",
                    (student_id,),
                ).fetchall()
        except sqlite3.Error:
            logger.exception("Could not read unsynced offline events for %s", student_id)
            return None
        return [_to_event(r) for r in rows]

    def mark_synced(self, event_id: int) -> bool:
        try:
            with self._connect() as conn:
                cur = conn.execute("UPDATE offline_attendance SET is_synced = 1 WHERE id = ?", (int(event_id),))
                return cur.rowcount > 0
        except sqlite3.Error:
            logger.exception("Could not mark offline event %s as synced", event_id)
            return False

    def mark_synced_by_student(self, student_id: str, day: date) -> bool:
        try:
            with self._connect() as conn:
                cur = conn.execute(
                    """
                    UPDATE offline_attendance SET is_synced = 1
                    WHERE student_id = ? AND substr(scan_time, 1, 10) = ? AND is_synced = 0
                    """,
                    (student_id, day.strftime(DATE_FORMAT)),
                )
                return cur.rowcount > 0
        except sqlite3.Error:
            logger.exception("Could not mark offline events of %s on %s as synced", student_id, day)
            return False

    def unsynced_count(self) -> int:
        """Number of distinct students with buffered scans."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT COUNT(DISTINCT student_id) FROM offline_attendance WHERE is_synced = 0"
                ).fetchone()
        except sqlite3.Error:
            logger.exception("Could not count unsynced offline events")
            return 0
        return int(row[0] or 0)

    def pending_students(self) -> List[PendingStudent]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT student_id, attendance_type, COUNT(*) AS pending_count, MAX(scan_time) AS last_scan
                    FROM offline_attendance
                    WHERE is_synced = 0
                    GROUP BY student_id, attendance_type
                    ORDER BY last_scan DESC
                    """
                ).fetchall()
        except sqlite3.Error:
            logger.exception("Could not list pending students")
            return []
        return [
            PendingStudent(
                student_id=r["student_id"],
                attendance_type=AttendanceType(r["attendance_type"]),
                pending_count=int(r["pending_count"]),
                last_scan=_from_text(r["last_scan"]),
            )
            for r in rows
        ]

    def log_sync(self, sync_type: str, record_count: int, status: str, error_message: Optional[str] = None) -> bool:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO sync_log (sync_type, record_count, sync_time, status, error_message)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (sync_type, int(record_count), _to_text(self._clock()), status, error_message),
                )
        except sqlite3.Error:
            logger.exception("Could not write sync log entry")
            return False
        return True

    def sync_log(self, limit: int = 50) -> List[SyncLogEntry]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT * FROM sync_log ORDER BY id DESC LIMIT ?", (int(limit),)
                ).fetchall()
        except sqlite3.Error:
            logger.exception("Could not read sync log")
            return []
        return [
            SyncLogEntry(
                id=int(r["id"]),
                sync_type=r["sync_type"],
                record_count=int(r["record_count"]),
                status=r["status"],
                sync_time=_from_text(r["sync_time"]),
                error_message=r["error_message"],
            )
            for r in rows
        ]
