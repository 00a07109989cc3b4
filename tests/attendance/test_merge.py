from datetime import date, time

from school_attendance.attendance.merge import merge_record
from school_attendance.attendance.model import DailyAttendanceRecord
from school_attendance.core.enums import AttendanceStatus


def _record(**kwargs) -> DailyAttendanceRecord:
    base = dict(
        attendance_id="A-1",
        student_id="S-1",
        attendance_date=date(2025, 1, 6),
        time_in=None,
        time_out=None,
        status=AttendanceStatus.NOT_MARKED,
        remarks="",
    )
    base.update(kwargs)
    return DailyAttendanceRecord(**base)


def test_missing_row_takes_incoming_record():
    incoming = _record(attendance_id="A-2", time_in=time(7, 0), status=AttendanceStatus.PRESENT)

    assert merge_record(None, incoming) == incoming


def test_stored_values_win_and_gaps_are_filled():
    existing = _record(time_in=time(7, 10), status=AttendanceStatus.PRESENT)
    incoming = _record(
        attendance_id="A-2",
        time_in=time(7, 0),
        time_out=time(16, 30),
        status=AttendanceStatus.PRESENT,
        remarks="Full day attendance",
    )

    merged = merge_record(existing, incoming)

    assert merged.attendance_id == "A-1"
    assert merged.time_in == time(7, 10)
    assert merged.time_out == time(16, 30)
    assert merged.status == AttendanceStatus.PRESENT
    assert merged.remarks == "Full day attendance"


def test_not_marked_status_is_replaced():
    merged = merge_record(_record(), _record(status=AttendanceStatus.LATE))

    assert merged.status == AttendanceStatus.LATE


def test_merge_is_idempotent():
    existing = _record(time_in=time(7, 10), status=AttendanceStatus.LATE, remarks="Late arrival")
    incoming = _record(attendance_id="A-2", time_out=time(12, 0), status=AttendanceStatus.HALF_DAY, remarks="x")

    once = merge_record(existing, incoming)

    assert merge_record(once, incoming) == once
