from __future__ import annotations

from datetime import date, time
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import DailyAttendanceRecord
from .repository import DailyAttendanceRepository

_COLUMNS = "attendance_id, student_id, attendance_date, time_in, time_out, status, remarks, created_at, updated_at"


def _to_record(r: dict) -> DailyAttendanceRecord:
    return DailyAttendanceRecord(
        attendance_id=str(r["attendance_id"]),
        student_id=str(r["student_id"]),
        attendance_date=r["attendance_date"],
        time_in=normalize_mysql_time(r.get("time_in")),
        time_out=normalize_mysql_time(r.get("time_out")),
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks") or "",
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLDailyAttendanceRepository(DailyAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student_and_date(self, student_id: str, attendance_date: date) -> Sequence[DailyAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_attendance
                WHERE student_id=%s AND attendance_date=%s
                ORDER BY created_at ASC
                """,
                (student_id, attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student_between(
        self, student_id: str, start_date: date, end_date: date
    ) -> Sequence[DailyAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_attendance
                WHERE student_id=%s AND attendance_date BETWEEN %s AND %s
                ORDER BY attendance_date DESC, created_at ASC
                """,
                (student_id, start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def insert(self, record: DailyAttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_attendance(attendance_id, student_id, attendance_date, time_in, time_out, status, remarks, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,COALESCE(%s, CURRENT_TIMESTAMP(6)))
                """,
                (
                    record.attendance_id,
                    record.student_id,
                    record.attendance_date,
                    record.time_in,
                    record.time_out,
                    record.status.value,
                    record.remarks or "",
                    record.created_at,
                ),
            )

    def update_time_in(
        self, *, attendance_id: str, time_in: time, status: AttendanceStatus, remarks: str
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_attendance
                SET time_in=%s, status=%s, remarks=%s
                WHERE attendance_id=%s
                """,
                (time_in, status.value, remarks, attendance_id),
            )
            return cur.rowcount > 0

    def update_time_out(
        self, *, attendance_id: str, time_out: time, status: AttendanceStatus, remarks: str
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Guarded so a concurrent second time-out cannot overwrite the first.
            cur.execute(
                """
                UPDATE daily_attendance
                SET time_out=%s, status=%s, remarks=%s
                WHERE attendance_id=%s AND time_out IS NULL
                """,
                (time_out, status.value, remarks, attendance_id),
            )
            return cur.rowcount > 0

    def update_record(self, record: DailyAttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_attendance
                SET time_in=%s, time_out=%s, status=%s, remarks=%s
                WHERE attendance_id=%s
                """,
                (record.time_in, record.time_out, record.status.value, record.remarks or "", record.attendance_id),
            )
            return cur.rowcount > 0

    def delete_many(self, attendance_ids: Sequence[str]) -> int:
        ids = list(attendance_ids)
        if not ids:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM daily_attendance WHERE attendance_id IN ({placeholders})", tuple(ids))
            return int(cur.rowcount)
