from __future__ import annotations

from datetime import date, datetime, time

import pytest

from school_attendance.attendance.model import DailyAttendanceRecord
from school_attendance.attendance.service import DailyAttendanceService
from school_attendance.core.enums import AttendanceError, AttendanceStatus
from school_attendance.core.exceptions import ValidationError
from school_attendance.sync.model import ConsolidatedRecord
from fakes import InMemoryDailyAttendance

DAY = date(2025, 1, 6)


@pytest.fixture
def repo() -> InMemoryDailyAttendance:
    return InMemoryDailyAttendance()


@pytest.fixture
def service(repo, fixed_now) -> DailyAttendanceService:
    return DailyAttendanceService(repo, clock=lambda: fixed_now)


def test_time_in_at_school_start_is_present(service):
    result = service.time_in("S-1", DAY, time(7, 30, 0))

    assert result.success
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.remarks == ""


def test_time_in_one_second_late_is_late(service):
    result = service.time_in("S-1", DAY, time(7, 30, 1))

    assert result.record.status == AttendanceStatus.LATE
    assert result.record.remarks == "Late arrival"


def test_time_in_defaults_to_clock(service, repo, fixed_now):
    result = service.time_in("S-1")

    assert result.record.attendance_date == fixed_now.date()
    assert result.record.time_in == fixed_now.time()
    assert len(repo.rows) == 1


def test_time_in_uses_subject_schedule(service):
    result = service.time_in("S-1", DAY, "07:45", schedule_start=time(8, 0))

    assert result.record.status == AttendanceStatus.PRESENT


def test_second_time_in_updates_the_same_row(service, repo):
    first = service.time_in("S-1", DAY, time(7, 0))
    second = service.time_in("S-1", DAY, time(7, 40))

    assert second.success
    assert second.record.attendance_id == first.record.attendance_id
    assert len(repo.rows) == 1
    assert repo.rows[first.record.attendance_id].status == AttendanceStatus.LATE


def test_time_out_without_time_in_is_rejected_and_creates_nothing(service, repo):
    result = service.time_out("S-1", DAY, time(16, 0))

    assert not result.success
    assert result.error == AttendanceError.NO_TIME_IN_FOUND
    assert repo.rows == {}


def test_second_time_out_is_rejected_and_leaves_row_unchanged(service, repo):
    service.time_in("S-1", DAY, time(7, 0))
    first = service.time_out("S-1", DAY, time(16, 30))
    stored = dict(repo.rows)

    second = service.time_out("S-1", DAY, time(17, 0))

    assert first.success
    assert second.error == AttendanceError.ALREADY_MARKED
    assert repo.rows == stored


@pytest.mark.parametrize(
    "time_in, time_out, status, remarks",
    [
        (time(7, 0), time(16, 30), AttendanceStatus.WHOLE_DAY, "Whole Day"),
        (time(7, 0), time(12, 0), AttendanceStatus.HALF_DAY, "Half Day"),
        (time(7, 45), time(16, 0), AttendanceStatus.WHOLE_DAY, "Late - Whole Day"),
        (time(9, 0), time(17, 0), AttendanceStatus.HALF_DAY, "Late - Half Day"),
    ],
)
def test_time_out_remarks(service, time_in, time_out, status, remarks):
    service.time_in("S-1", DAY, time_in)

    result = service.time_out("S-1", DAY, time_out)

    assert result.record.status == status
    assert result.record.remarks == remarks
    assert result.record.time_out == time_out


def test_time_in_after_time_out_is_already_marked(service):
    service.time_in("S-1", DAY, time(7, 0))
    service.time_out("S-1", DAY, time(16, 0))

    result = service.time_in("S-1", DAY, time(16, 5))

    assert result.error == AttendanceError.ALREADY_MARKED


def test_duplicate_rows_collapse_to_earliest_created(service, repo):
    for attendance_id, created in [("A-late", 9), ("A-first", 7), ("A-mid", 8)]:
        repo.insert(
            DailyAttendanceRecord(
                attendance_id=attendance_id,
                student_id="S-1",
                attendance_date=DAY,
                time_in=time(created, 0),
                time_out=None,
                status=AttendanceStatus.PRESENT,
                created_at=datetime(2025, 1, 6, created, 0),
            )
        )

    kept = service.record_for("S-1", DAY)

    assert kept.attendance_id == "A-first"
    assert list(repo.rows) == ["A-first"]


def test_daily_status_without_row_is_not_marked(service):
    status = service.daily_status("S-1", DAY)

    assert status.status == AttendanceStatus.NOT_MARKED
    assert status.to_dict()["timeIn"] is None


def test_history_rejects_non_positive_days(service):
    with pytest.raises(ValidationError):
        service.history("S-1", 0)


def test_blank_student_id_is_a_validation_error(service):
    with pytest.raises(ValidationError):
        service.time_in("  ", DAY, time(7, 0))


def test_synced_records_insert_merge_and_repeat_safely(service, repo):
    service.time_in("S-1", DAY, time(7, 10))
    records = [
        ConsolidatedRecord("S-1", DAY, "07:00", "16:30", AttendanceStatus.PRESENT, "Full day attendance"),
        ConsolidatedRecord("S-2", DAY, "07:05", None, AttendanceStatus.PRESENT, "Time in only"),
    ]

    summary = service.apply_synced_records("T-1", records)
    snapshot = dict(repo.rows)
    again = service.apply_synced_records("T-1", records)

    assert summary.success and summary.synced_count == 2
    s1 = service.record_for("S-1", DAY)
    assert s1.time_in == time(7, 10)
    assert s1.time_out == time(16, 30)
    assert service.record_for("S-2", DAY).remarks == "Time in only"
    assert again.synced_count == 2
    assert repo.rows == snapshot


def test_one_bad_synced_record_does_not_block_the_rest(service):
    records = [
        ConsolidatedRecord("S-1", DAY, "25:99", None),
        ConsolidatedRecord("S-2", DAY, "07:05", None),
    ]

    summary = service.apply_synced_records("T-1", records)

    assert summary.synced_count == 1
    assert summary.error_count == 1
    assert not summary.success
    assert service.record_for("S-2", DAY) is not None
