from __future__ import annotations

from datetime import date, time
from typing import Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import DailyAttendanceRecord


class DailyAttendanceRepository(Protocol):
    """Canonical store for daily attendance rows.

    Note: (student_id, attendance_date) is not unique at the storage level; callers
    collapse duplicates themselves.
    """

    def list_for_student_and_date(self, student_id: str, attendance_date: date) -> Sequence[DailyAttendanceRecord]:
        """All rows for the day, earliest-created first."""

        raise NotImplementedError

    def list_for_student_between(
        self, student_id: str, start_date: date, end_date: date
    ) -> Sequence[DailyAttendanceRecord]:
        """Newest day first."""

        raise NotImplementedError

    def insert(self, record: DailyAttendanceRecord) -> None:
        raise NotImplementedError

    def update_time_in(
        self, *, attendance_id: str, time_in: time, status: AttendanceStatus, remarks: str
    ) -> bool:
        raise NotImplementedError

    def update_time_out(
        self, *, attendance_id: str, time_out: time, status: AttendanceStatus, remarks: str
    ) -> bool:
        raise NotImplementedError

    def update_record(self, record: DailyAttendanceRecord) -> bool:
        """Overwrite times, status and remarks of an existing row."""

        raise NotImplementedError

    def delete_many(self, attendance_ids: Sequence[str]) -> int:
        raise NotImplementedError
