from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ..common.datetime_utils import parse_day
from ..common.validators import require_non_empty
from ..core.constants import DATE_FORMAT
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ConsolidatedRecord:
    """One student's day, rebuilt from buffered scans and sent to bulk sync."""

    student_id: str
    attendance_date: date
    time_in: Optional[str]
    time_out: Optional[str]
    status: AttendanceStatus = AttendanceStatus.PRESENT
    remarks: str = ""
    device_id: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: dict) -> "ConsolidatedRecord":
        status = payload.get("status") or AttendanceStatus.PRESENT.value
        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {status!r}")
        return cls(
            student_id=require_non_empty(payload.get("studentId"), "studentId"),
            attendance_date=parse_day(payload.get("date")),
            time_in=payload.get("timeIn") or None,
            time_out=payload.get("timeOut") or None,
            status=status,
            remarks=payload.get("remarks") or "",
            device_id=payload.get("deviceId"),
        )

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "date": self.attendance_date.strftime(DATE_FORMAT),
            "timeIn": self.time_in,
            "timeOut": self.time_out,
            "status": self.status.value,
            "remarks": self.remarks,
            "deviceId": self.device_id,
        }


@dataclass
class SyncSummary:
    success: bool = True
    synced_count: int = 0
    errors: List[str] = field(default_factory=list)
    message: str = ""

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def add_error(self, error: str) -> None:
        self.errors.append(error)
        self.success = False

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "syncedCount": self.synced_count,
            "errorCount": self.error_count,
            "errors": list(self.errors),
        }
