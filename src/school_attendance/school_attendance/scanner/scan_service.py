from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceError, AttendanceType, ScanDisposition
from ..identity.model import ActorContext, ScannedIdentity, ValidationResult
from ..identity.validator import validate_scan
from ..sync.model import SyncSummary
from ..sync.reconciler import SyncReconciler
from .connectivity import ConnectivityProbe
from .offline_buffer import OfflineBuffer
from .remote_store import RemoteAttendanceStore
from .session import ScanSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    disposition: ScanDisposition
    message: str
    error: Optional[AttendanceError] = None

    @property
    def accepted(self) -> bool:
        return self.disposition in (ScanDisposition.RECORDED, ScanDisposition.BUFFERED)


class ScanService:
    """Scanner-side coordinator: validate, record online or buffer, then sync."""

    def __init__(
        self,
        remote: RemoteAttendanceStore,
        buffer: OfflineBuffer,
        probe: ConnectivityProbe,
        reconciler: SyncReconciler,
        *,
        device_id: Optional[str] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._remote = remote
        self._buffer = buffer
        self._probe = probe
        self._reconciler = reconciler
        self._device_id = device_id
        self._clock = clock
        self._session: Optional[ScanSession] = None

    @property
    def session(self) -> Optional[ScanSession]:
        return self._session

    @property
    def actor(self) -> Optional[ActorContext]:
        return self._session.actor if self._session else None

    def start_session(self, actor: ActorContext, device_id: Optional[str] = None) -> ScanSession:
        self.end_session()
        self._session = ScanSession.open(actor, device_id or self._device_id)
        # Scans left from an earlier run sync now; the probe only reports later changes.
        self.on_connectivity_changed(self._probe.is_online())
        return self._session

    def login(self, username: str, password: str) -> Optional[ScanSession]:
        actor = self._remote.login(username, password)
        if actor is None:
            return None
        return self.start_session(actor)

    def end_session(self) -> None:
        if self._session is not None:
            self._session.close()
        self._session = None

    def validate_scan(self, raw_text: str) -> ValidationResult:
        return validate_scan(raw_text, self.actor)

    def record_or_buffer(
        self,
        identity: ScannedIdentity,
        attendance_type: AttendanceType,
        now: Optional[datetime] = None,
    ) -> ScanOutcome:
        """Send the scan to the canonical store, or keep it on the device when that fails.

        State-machine rejections (no time-in yet, already marked) are final and
        never buffered.
        """
        attendance_type = AttendanceType(attendance_type)
        now = now or self._clock()
        label = "Time in" if attendance_type == AttendanceType.TIME_IN else "Time out"

        if self._probe.is_online():
            if attendance_type == AttendanceType.TIME_IN:
                result = self._remote.time_in(identity.student_id, now.date(), now.time())
            else:
                result = self._remote.time_out(identity.student_id, now.date(), now.time())

            if result.success:
                self.sync_pending()
                return ScanOutcome(ScanDisposition.RECORDED, result.message or f"{label} recorded")
            if result.error is not None:
                return ScanOutcome(ScanDisposition.REJECTED, result.message, result.error)
            logger.warning("Online %s for %s failed, buffering offline", label.lower(), identity.student_id)

        device_id = self._session.device_id if self._session else None
        if self._buffer.append(identity.student_id, attendance_type, device_id=device_id, scan_time=now):
            return ScanOutcome(ScanDisposition.BUFFERED, f"{label} saved offline; it will sync when online")
        return ScanOutcome(ScanDisposition.FAILED, f"Could not save {label.lower()} for {identity.student_id}")

    def scan(self, raw_text: str, attendance_type: AttendanceType) -> ScanOutcome:
        validation = self.validate_scan(raw_text)
        if not validation.is_valid or validation.identity is None:
            return ScanOutcome(ScanDisposition.REJECTED, validation.message)
        return self.record_or_buffer(validation.identity, attendance_type)

    def sync_offline_data(self) -> SyncSummary:
        actor = self.actor
        return self._reconciler.sync(actor.teacher_id if actor else None)

    def on_connectivity_changed(self, is_online: bool) -> Optional[SyncSummary]:
        if not is_online:
            return None
        return self.sync_pending()

    def sync_pending(self) -> Optional[SyncSummary]:
        """Sync buffered scans, if there are any. Call only while the store is reachable."""
        pending = self._buffer.unsynced_count()
        if not pending:
            return None
        logger.info("Syncing buffered scans of %s students", pending)
        return self.sync_offline_data()
