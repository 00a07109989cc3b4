from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_clock
from ..core.constants import DATE_FORMAT
from ..core.enums import AttendanceError, AttendanceStatus


@dataclass(frozen=True)
class DailyAttendanceRecord:
    """One student's attendance for one school day (canonical store row)."""

    attendance_id: str
    student_id: str
    attendance_date: date
    time_in: Optional[time]
    time_out: Optional[time]
    status: AttendanceStatus
    remarks: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "attendanceId": self.attendance_id,
            "studentId": self.student_id,
            "date": self.attendance_date.strftime(DATE_FORMAT),
            "timeIn": format_clock(self.time_in),
            "timeOut": format_clock(self.time_out),
            "status": self.status.value,
            "remarks": self.remarks or "",
        }


@dataclass(frozen=True)
class DailyStatus:
    student_id: str
    attendance_date: date
    status: AttendanceStatus
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    remarks: str = ""

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "date": self.attendance_date.strftime(DATE_FORMAT),
            "status": self.status.value,
            "timeIn": format_clock(self.time_in),
            "timeOut": format_clock(self.time_out),
            "remarks": self.remarks or "",
        }


@dataclass(frozen=True)
class AttendanceResult:
    """Outcome of a time-in/time-out. Rejections are data, not exceptions."""

    success: bool
    message: str
    error: Optional[AttendanceError] = None
    record: Optional[DailyAttendanceRecord] = None

    @classmethod
    def ok(cls, record: DailyAttendanceRecord, message: str) -> "AttendanceResult":
        return cls(success=True, message=message, record=record)

    @classmethod
    def fail(
        cls, error: AttendanceError, message: str, record: Optional[DailyAttendanceRecord] = None
    ) -> "AttendanceResult":
        return cls(success=False, message=message, error=error, record=record)

    def to_dict(self) -> dict:
        payload = {
            "success": self.success,
            "message": self.message,
            "error": self.error.value if self.error else None,
        }
        if self.record is not None:
            payload.update(
                {
                    "attendanceId": self.record.attendance_id,
                    "status": self.record.status.value,
                    "timeIn": format_clock(self.record.time_in),
                    "timeOut": format_clock(self.record.time_out),
                    "remarks": self.record.remarks or "",
                }
            )
        return payload
