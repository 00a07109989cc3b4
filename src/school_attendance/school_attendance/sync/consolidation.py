"""Fold buffered scans into one record per student per day.

These rules apply to offline data only and differ from the live time-out rules:
the duration between the latest time-in and time-out decides the status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from itertools import groupby
from typing import List, Optional, Sequence, Tuple

from ..common.datetime_utils import format_clock
from ..core.constants import SYNC_FULL_DAY_DURATION, SYNC_LATE_AFTER_HOUR
from ..core.enums import AttendanceStatus, AttendanceType
from ..scanner.model import OfflineAttendanceEvent
from .model import ConsolidatedRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsolidationGroup:
    record: ConsolidatedRecord
    events: Tuple[OfflineAttendanceEvent, ...]


def derive_status(time_in: Optional[datetime], time_out: Optional[datetime]) -> Tuple[AttendanceStatus, str]:
    if time_in is not None and time_out is not None:
        if time_out - time_in < SYNC_FULL_DAY_DURATION:
            return AttendanceStatus.HALF_DAY, "Half day attendance"
        return AttendanceStatus.PRESENT, "Full day attendance"
    if time_in is not None:
        if time_in.hour > SYNC_LATE_AFTER_HOUR:
            return AttendanceStatus.LATE, "Late arrival"
        return AttendanceStatus.PRESENT, "Time in only"
    return AttendanceStatus.PRESENT, "Time out only"


def _latest(events: Sequence[OfflineAttendanceEvent], kind: AttendanceType) -> Optional[OfflineAttendanceEvent]:
    matching = [e for e in events if e.attendance_type == kind]
    if not matching:
        return None
    return max(matching, key=lambda e: (e.scan_time, e.id))


def _group_key(event: OfflineAttendanceEvent) -> Tuple[date, str]:
    return event.scan_time.date(), event.student_id


def consolidate(
    events: Sequence[OfflineAttendanceEvent], *, default_device_id: Optional[str] = None
) -> List[ConsolidationGroup]:
    groups: List[ConsolidationGroup] = []
    for (day, student_id), members in groupby(sorted(events, key=_group_key), key=_group_key):
        members = tuple(members)
        latest_in = _latest(members, AttendanceType.TIME_IN)
        latest_out = _latest(members, AttendanceType.TIME_OUT)
        in_at = latest_in.scan_time if latest_in else None
        out_at = latest_out.scan_time if latest_out else None

        if in_at is None:
            logger.warning("Student %s has a time-out without a time-in on %s", student_id, day)
        status, remarks = derive_status(in_at, out_at)

        newest = max(members, key=lambda e: (e.scan_time, e.id))
        groups.append(
            ConsolidationGroup(
                record=ConsolidatedRecord(
                    student_id=student_id,
                    attendance_date=day,
                    time_in=format_clock(in_at.time()) if in_at else None,
                    time_out=format_clock(out_at.time()) if out_at else None,
                    status=status,
                    remarks=remarks,
                    device_id=newest.device_id or default_device_id,
                ),
                events=members,
            )
        )
    return groups
