from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..core.enums import AttendanceStatus
from .model import DailyAttendanceRecord


def merge_record(
    existing: Optional[DailyAttendanceRecord], incoming: DailyAttendanceRecord
) -> DailyAttendanceRecord:
    """COALESCE-style merge of a synced record into the stored one.

    Stored values win wherever they are set; the incoming record only fills gaps.
    Applying the same incoming record twice gives the same row.
    """
    if existing is None:
        return incoming

    keep_status = existing.status is not None and existing.status != AttendanceStatus.NOT_MARKED
    return replace(
        existing,
        time_in=existing.time_in if existing.time_in is not None else incoming.time_in,
        time_out=existing.time_out if existing.time_out is not None else incoming.time_out,
        status=existing.status if keep_status else incoming.status,
        remarks=existing.remarks if existing.remarks else incoming.remarks,
    )
