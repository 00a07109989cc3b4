from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_clock, parse_day
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import AttendanceError, AttendanceStatus
from ..core.exceptions import DomainError, ValidationError
from ..sync.model import ConsolidatedRecord, SyncSummary
from .factory import AttendanceStrategyFactory
from .merge import merge_record
from .model import AttendanceResult, DailyAttendanceRecord, DailyStatus
from .repository import DailyAttendanceRepository

logger = logging.getLogger(__name__)


class DailyAttendanceService:
    """Daily state machine: Not Marked -> timed in -> timed out."""

    def __init__(
        self,
        attendance: DailyAttendanceRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    def _resolve_moment(self, day, at) -> tuple[date, time]:
        now = self._clock()
        resolved_day = parse_day(day) if day else now.date()
        resolved_at = parse_clock(at) if at else None
        return resolved_day, resolved_at or now.time().replace(microsecond=0)

    def record_for(self, student_id: str, day) -> Optional[DailyAttendanceRecord]:
        """The day's row, after collapsing duplicates onto the earliest-created one."""
        student_id = require_non_empty(student_id, "studentId")
        day = parse_day(day)

        rows = list(self._attendance.list_for_student_and_date(student_id, day))
        if not rows:
            return None
        rows.sort(key=lambda r: r.created_at or datetime.max)
        keep, duplicates = rows[0], rows[1:]
        if duplicates:
            removed = self._attendance.delete_many([r.attendance_id for r in duplicates])
            logger.warning(
                "Collapsed %s duplicate attendance rows for %s on %s (kept %s)",
                removed,
                student_id,
                day,
                keep.attendance_id,
            )
        return keep

    def time_in(
        self,
        student_id: str,
        day=None,
        at=None,
        *,
        schedule_start: Optional[time] = None,
    ) -> AttendanceResult:
        student_id = require_non_empty(student_id, "studentId")
        day, at = self._resolve_moment(day, at)

        existing = self.record_for(student_id, day)
        if existing is not None and existing.time_out is not None:
            return AttendanceResult.fail(
                AttendanceError.ALREADY_MARKED,
                "Attendance is already complete for today",
                existing,
            )

        decision = self._factory.for_time_in(at=at, schedule_start=schedule_start).decide_time_in(at=at)

        if existing is not None:
            self._attendance.update_time_in(
                attendance_id=existing.attendance_id,
                time_in=at,
                status=decision.status,
                remarks=decision.remarks,
            )
            record = replace(existing, time_in=at, status=decision.status, remarks=decision.remarks)
        else:
            record = DailyAttendanceRecord(
                attendance_id=str(uuid.uuid4()),
                student_id=student_id,
                attendance_date=day,
                time_in=at,
                time_out=None,
                status=decision.status,
                remarks=decision.remarks,
                created_at=self._clock(),
            )
            self._attendance.insert(record)

        logger.info("Time in for %s on %s at %s: %s", student_id, day, at, decision.status.value)
        return AttendanceResult.ok(record, f"Time in marked: {decision.status.value}")

    def time_out(self, student_id: str, day=None, at=None) -> AttendanceResult:
        student_id = require_non_empty(student_id, "studentId")
        day, at = self._resolve_moment(day, at)

        existing = self.record_for(student_id, day)
        if existing is None or existing.time_in is None:
            return AttendanceResult.fail(
                AttendanceError.NO_TIME_IN_FOUND,
                "No time in found for today. Please time in first.",
            )
        if existing.time_out is not None:
            return AttendanceResult.fail(
                AttendanceError.ALREADY_MARKED,
                "Time out is already marked for today",
                existing,
            )

        decision = self._factory.for_time_out(time_in=existing.time_in).decide_time_out(
            time_in=existing.time_in, time_out=at
        )
        updated = self._attendance.update_time_out(
            attendance_id=existing.attendance_id,
            time_out=at,
            status=decision.status,
            remarks=decision.remarks,
        )
        if not updated:
            # Lost a race against another time-out for the same row.
            return AttendanceResult.fail(
                AttendanceError.ALREADY_MARKED,
                "Time out is already marked for today",
                existing,
            )

        record = replace(existing, time_out=at, status=decision.status, remarks=decision.remarks)
        logger.info("Time out for %s on %s at %s: %s", student_id, day, at, decision.remarks)
        return AttendanceResult.ok(record, f"Time out marked: {decision.remarks}")

    def daily_status(self, student_id: str, day=None) -> DailyStatus:
        day = parse_day(day) if day else self._clock().date()
        record = self.record_for(student_id, day)
        if record is None:
            return DailyStatus(student_id=student_id, attendance_date=day, status=AttendanceStatus.NOT_MARKED)
        return DailyStatus(
            student_id=record.student_id,
            attendance_date=record.attendance_date,
            status=record.status,
            time_in=record.time_in,
            time_out=record.time_out,
            remarks=record.remarks,
        )

    def history(self, student_id: str, days: int = DEFAULT_HISTORY_DAYS) -> Sequence[DailyAttendanceRecord]:
        student_id = require_non_empty(student_id, "studentId")
        if int(days) <= 0:
            raise ValidationError("days must be a positive number")
        today = self._clock().date()
        return self._attendance.list_for_student_between(student_id, today - timedelta(days=int(days)), today)

    def apply_synced_records(self, teacher_id: str, records: Sequence[ConsolidatedRecord]) -> SyncSummary:
        """Merge consolidated offline records into the canonical store.

        Each record is applied on its own; one bad record does not stop the rest.
        """
        summary = SyncSummary()
        for incoming in records:
            try:
                self._apply_one(incoming)
                summary.synced_count += 1
            except DomainError as exc:
                summary.add_error(f"{incoming.student_id} {incoming.attendance_date}: {exc}")
            except Exception as exc:
                logger.exception("Bulk sync of %s failed", incoming.student_id)
                summary.add_error(f"{incoming.student_id} {incoming.attendance_date}: {exc}")

        summary.message = f"Synced {summary.synced_count} records with {summary.error_count} errors"
        logger.info("Bulk sync from teacher %s: %s", teacher_id, summary.message)
        return summary

    def _apply_one(self, incoming: ConsolidatedRecord) -> None:
        student_id = require_non_empty(incoming.student_id, "studentId")
        candidate = DailyAttendanceRecord(
            attendance_id=str(uuid.uuid4()),
            student_id=student_id,
            attendance_date=incoming.attendance_date,
            time_in=parse_clock(incoming.time_in),
            time_out=parse_clock(incoming.time_out),
            status=incoming.status,
            remarks=incoming.remarks or "",
            created_at=self._clock(),
        )

        existing = self.record_for(student_id, incoming.attendance_date)
        merged = merge_record(existing, candidate)
        if existing is None:
            self._attendance.insert(merged)
        elif merged != existing:
            self._attendance.update_record(merged)
