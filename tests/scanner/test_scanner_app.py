import io

from school_attendance.core.enums import AttendanceType
from school_attendance.identity.model import ActorContext
from school_attendance.scanner.app import run_scan_loop
from school_attendance.scanner.offline_buffer import OfflineBuffer
from school_attendance.scanner.remote_store import StoreResult
from school_attendance.scanner.scan_service import ScanService
from school_attendance.sync.reconciler import SyncReconciler


class OfflineProbe:
    def is_online(self):
        return False


class AcceptingRemote:
    def bulk_sync(self, teacher_id, records):
        return StoreResult(success=True)


def test_scan_loop_buffers_offline_and_syncs_on_command(tmp_path, fixed_now):
    remote = AcceptingRemote()
    buffer = OfflineBuffer(tmp_path / "offline.db", clock=lambda: fixed_now)
    service = ScanService(
        remote, buffer, OfflineProbe(), SyncReconciler(buffer, remote), device_id="DEV_1", clock=lambda: fixed_now
    )
    service.start_session(ActorContext(teacher_id="T-1", school_id="SCH-1"))
    out = io.StringIO()

    accepted = run_scan_loop(service, ["S-1\n", "\n", "a|b|c\n", "sync\n"], AttendanceType.TIME_IN, out)

    lines = out.getvalue().splitlines()
    assert accepted == 1
    assert lines[0].startswith("[Buffered]")
    assert lines[1].startswith("[Rejected] Invalid QR code format")
    assert lines[2] == "Synced 1 records with 0 errors"
    assert buffer.unsynced_count() == 0
