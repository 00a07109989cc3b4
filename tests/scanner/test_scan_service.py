from __future__ import annotations

from datetime import datetime

import pytest

from school_attendance.core.enums import AttendanceError, AttendanceType, ScanDisposition, ValidationReason
from school_attendance.scanner.connectivity import ConnectivityProbe
from school_attendance.identity.model import ActorContext, ScannedIdentity
from school_attendance.scanner.offline_buffer import OfflineBuffer
from school_attendance.scanner.remote_store import StoreResult
from school_attendance.scanner.scan_service import ScanService
from school_attendance.sync.reconciler import SyncReconciler

ACTOR = ActorContext(teacher_id="T-1", school_id="SCH-1", grade_level=11, section="Rizal")
STUDENT = ScannedIdentity("S-1", "Ana Cruz", 11, "Rizal", "SCH-1")


class StubProbe:
    def __init__(self, online=True):
        self.online = online

    def is_online(self):
        return self.online


class StubRemote:
    def __init__(self):
        self.next_result = StoreResult(success=True, message="Time in marked: Present")
        self.calls = []
        self.synced = []

    def time_in(self, student_id, day, at):
        self.calls.append(("in", student_id))
        return self.next_result

    def time_out(self, student_id, day, at):
        self.calls.append(("out", student_id))
        return self.next_result

    def bulk_sync(self, teacher_id, records):
        self.synced.append((teacher_id, list(records)))
        return StoreResult(success=True)

    def login(self, username, password):
        return ACTOR if password == "secret" else None


@pytest.fixture
def parts(tmp_path, fixed_now):
    remote = StubRemote()
    buffer = OfflineBuffer(tmp_path / "offline.db", clock=lambda: fixed_now)
    probe = StubProbe()
    service = ScanService(
        remote,
        buffer,
        probe,
        SyncReconciler(buffer, remote, device_id="DEV_TEST"),
        device_id="DEV_TEST",
        clock=lambda: fixed_now,
    )
    return service, remote, buffer, probe


def test_online_scan_is_recorded(parts):
    service, remote, buffer, _ = parts
    service.start_session(ACTOR)

    outcome = service.scan("S-1|Ana Cruz|11|Rizal|SCH-1", AttendanceType.TIME_IN)

    assert outcome.disposition == ScanDisposition.RECORDED
    assert outcome.accepted
    assert remote.calls == [("in", "S-1")]
    assert buffer.unsynced_events() == []


def test_transport_failure_is_buffered(parts):
    service, remote, buffer, _ = parts
    service.start_session(ACTOR)
    remote.next_result = StoreResult(success=False, message="timed out", transport_failure=True)

    outcome = service.record_or_buffer(STUDENT, AttendanceType.TIME_IN)

    assert outcome.disposition == ScanDisposition.BUFFERED
    assert [e.student_id for e in buffer.unsynced_events()] == ["S-1"]


def test_state_machine_rejection_is_not_buffered(parts):
    service, remote, buffer, _ = parts
    service.start_session(ACTOR)
    remote.next_result = StoreResult(
        success=False,
        message="No time in found for today. Please time in first.",
        error=AttendanceError.NO_TIME_IN_FOUND,
    )

    outcome = service.record_or_buffer(STUDENT, AttendanceType.TIME_OUT)

    assert outcome.disposition == ScanDisposition.REJECTED
    assert outcome.error == AttendanceError.NO_TIME_IN_FOUND
    assert buffer.unsynced_events() == []


def test_offline_scan_is_buffered_with_device_id(parts, fixed_now):
    service, remote, buffer, probe = parts
    probe.online = False
    service.start_session(ACTOR)

    outcome = service.record_or_buffer(STUDENT, AttendanceType.TIME_IN)

    [event] = buffer.unsynced_events()
    assert outcome.disposition == ScanDisposition.BUFFERED
    assert remote.calls == []
    assert event.device_id == "DEV_TEST"
    assert event.scan_time == fixed_now


def test_coming_back_online_syncs_pending_scans(parts):
    service, remote, buffer, probe = parts
    probe.online = False
    service.start_session(ACTOR)
    service.record_or_buffer(STUDENT, AttendanceType.TIME_IN, now=datetime(2025, 1, 6, 7, 0))

    summary = service.on_connectivity_changed(True)

    assert summary.synced_count == 1
    assert remote.synced[0][0] == "T-1"
    assert buffer.unsynced_count() == 0
    assert service.on_connectivity_changed(True) is None


def test_going_offline_does_not_sync(parts):
    service, remote, _, _ = parts

    assert service.on_connectivity_changed(False) is None
    assert remote.synced == []


def test_scan_without_session_is_rejected(parts):
    service, remote, _, _ = parts

    validation = service.validate_scan("S-1")
    outcome = service.scan("S-1", AttendanceType.TIME_IN)

    assert validation.reason == ValidationReason.NO_ACTOR
    assert outcome.disposition == ScanDisposition.REJECTED
    assert remote.calls == []


def test_logout_drops_the_actor(parts):
    service, _, _, _ = parts
    assert service.login("teacher", "secret") is not None

    service.end_session()

    assert service.actor is None
    assert service.validate_scan("S-1").reason == ValidationReason.NO_ACTOR


def test_failed_login_opens_no_session(parts):
    service, _, _, _ = parts

    assert service.login("teacher", "wrong") is None
    assert service.session is None


def test_mismatched_section_is_rejected_before_recording(parts):
    service, remote, _, _ = parts
    service.start_session(ACTOR)

    outcome = service.scan("S-2|Ben Reyes|11|Bonifacio|SCH-1", AttendanceType.TIME_IN)

    assert outcome.disposition == ScanDisposition.REJECTED
    assert "Bonifacio" in outcome.message
    assert remote.calls == []


def test_scans_left_from_an_earlier_run_sync_when_session_opens(parts):
    service, remote, buffer, _ = parts
    buffer.append("S-1", AttendanceType.TIME_IN, device_id="DEV_TEST", scan_time=datetime(2025, 1, 6, 7, 0))

    service.start_session(ACTOR)

    assert remote.synced[0][0] == "T-1"
    assert buffer.unsynced_count() == 0


class HealthyResponse:
    ok = True


class HealthySession:
    def get(self, url, timeout=None):
        return HealthyResponse()


def test_pending_scans_sync_while_device_stays_online(tmp_path, fixed_now):
    remote = StubRemote()
    buffer = OfflineBuffer(tmp_path / "offline.db", clock=lambda: fixed_now)
    buffer.append("S-9", AttendanceType.TIME_IN, scan_time=datetime(2025, 1, 6, 7, 0))
    probe = ConnectivityProbe("http://server", session=HealthySession())
    service = ScanService(
        remote, buffer, probe, SyncReconciler(buffer, remote), device_id="DEV_TEST", clock=lambda: fixed_now
    )
    probe.add_listener(service.on_connectivity_changed)
    probe.is_online()
    buffer.append("S-8", AttendanceType.TIME_IN, scan_time=datetime(2025, 1, 6, 7, 5))

    outcome = service.record_or_buffer(STUDENT, AttendanceType.TIME_IN)

    assert outcome.disposition == ScanDisposition.RECORDED
    assert sorted(r.student_id for _, batch in remote.synced for r in batch) == ["S-8", "S-9"]
    assert buffer.unsynced_count() == 0
