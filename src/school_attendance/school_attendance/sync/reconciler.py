from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import AttendanceError, AttendanceType
from ..scanner.offline_buffer import OfflineBuffer
from ..scanner.remote_store import RemoteAttendanceStore
from .consolidation import ConsolidationGroup, consolidate
from .model import SyncSummary

logger = logging.getLogger(__name__)


def _log_status(summary: SyncSummary) -> str:
    if not summary.errors:
        return "Success"
    return "Partial" if summary.synced_count else "Failed"


class SyncReconciler:
    """Drains the offline buffer into the canonical store."""

    def __init__(
        self,
        buffer: OfflineBuffer,
        remote: RemoteAttendanceStore,
        *,
        device_id: Optional[str] = None,
    ):
        self._buffer = buffer
        self._remote = remote
        self._device_id = device_id

    def sync(self, teacher_id: Optional[str] = None) -> SyncSummary:
        """One pass over every unsynced event, one bulk-sync call per student-day."""
        summary = SyncSummary()
        events = self._buffer.unsynced_events()
        if events is None:
            return self._unreadable(summary, "bulk")
        if not events:
            summary.message = "No offline data to sync"
            self._buffer.log_sync("bulk", 0, "Success")
            return summary

        for group in consolidate(events, default_device_id=self._device_id):
            error = self._submit(teacher_id, group)
            if error:
                summary.add_error(error)
            else:
                summary.synced_count += 1

        summary.message = f"Synced {summary.synced_count} records with {summary.error_count} errors"
        logger.info("Offline sync: %s", summary.message)
        self._buffer.log_sync("bulk", summary.synced_count, _log_status(summary), "; ".join(summary.errors) or None)
        return summary

    def _submit(self, teacher_id: Optional[str], group: ConsolidationGroup) -> Optional[str]:
        record = group.record
        result = self._remote.bulk_sync(teacher_id, [record])
        if not result.success:
            return f"{record.student_id} {record.attendance_date}: {result.message or 'sync failed'}"

        marked = [self._buffer.mark_synced(e.id) for e in group.events]
        if not all(marked):
            self._buffer.mark_synced_by_student(record.student_id, record.attendance_date)
        return None

    def sync_student(self, student_id: str) -> SyncSummary:
        """Replay one student's buffered scans through the live time-in/time-out endpoints."""
        summary = SyncSummary()
        events = self._buffer.unsynced_events_for(student_id)
        if events is None:
            return self._unreadable(summary, "student")
        for event in events:
            day, at = event.scan_time.date(), event.scan_time.time()
            if event.attendance_type == AttendanceType.TIME_IN:
                result = self._remote.time_in(student_id, day, at)
            else:
                result = self._remote.time_out(student_id, day, at)

            if result.success or result.error == AttendanceError.ALREADY_MARKED:
                self._buffer.mark_synced(event.id)
                summary.synced_count += 1
            else:
                summary.add_error(f"{event.attendance_type.value} at {event.scan_time}: {result.message or 'failed'}")

        summary.message = f"Synced {summary.synced_count} scans for {student_id} with {summary.error_count} errors"
        self._buffer.log_sync("student", summary.synced_count, _log_status(summary), "; ".join(summary.errors) or None)
        return summary

    def _unreadable(self, summary: SyncSummary, sync_type: str) -> SyncSummary:
        summary.add_error("Could not read buffered scans from the offline store")
        summary.message = "Offline sync failed: buffered scans could not be read"
        self._buffer.log_sync(sync_type, 0, "Failed", summary.errors[0])
        return summary
