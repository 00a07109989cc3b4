from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceType


@dataclass(frozen=True)
class OfflineAttendanceEvent:
    """A scan buffered on the device while the canonical store was unreachable."""

    id: int
    student_id: str
    attendance_type: AttendanceType
    scan_time: datetime
    device_id: Optional[str] = None
    is_synced: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PendingStudent:
    student_id: str
    attendance_type: AttendanceType
    pending_count: int
    last_scan: datetime


@dataclass(frozen=True)
class SyncLogEntry:
    id: int
    sync_type: str
    record_count: int
    status: str
    sync_time: datetime
    error_message: Optional[str] = None
