from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional, Sequence

import requests

from ..core.constants import DATE_FORMAT, DEFAULT_SYNC_TIMEOUT_SECONDS, TIME_WITH_SECONDS_FORMAT
from ..core.enums import AttendanceError
from ..identity.model import ActorContext
from ..sync.model import ConsolidatedRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreResult:
    """Reply of the canonical store.

    ``error`` is set for state-machine rejections, ``transport_failure`` when the
    store could not be reached at all. Neither set on failure means a generic
    server error.
    """

    success: bool
    message: str = ""
    error: Optional[AttendanceError] = None
    transport_failure: bool = False
    payload: dict = field(default_factory=dict)


def _actor_from_payload(payload: dict) -> ActorContext:
    return ActorContext(
        teacher_id=str(payload["teacherId"]),
        school_id=str(payload.get("schoolId") or ""),
        grade_level=int(payload.get("gradeLevel") or 0),
        section=payload.get("section") or "",
        strand=payload.get("strand"),
        full_name=payload.get("fullName") or "",
    )


class RemoteAttendanceStore:
    """HTTP client for the canonical store's attendance API."""

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_SYNC_TIMEOUT_SECONDS,
    ):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = float(timeout)

    def _request(self, method: str, path: str, **kwargs) -> StoreResult:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return StoreResult(success=False, message=str(exc), transport_failure=True)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        message = str(body.get("message") or "")
        if response.ok and body.get("success", True):
            return StoreResult(success=True, message=message, payload=body)

        try:
            error = AttendanceError(body.get("error"))
        except ValueError:
            error = None
        if error is None:
            logger.warning("%s %s returned %s: %s", method, path, response.status_code, message)
        return StoreResult(success=False, message=message, error=error, payload=body)

    def _mark(self, path: str, student_id: str, day: date, at: time) -> StoreResult:
        return self._request(
            "POST",
            path,
            json={
                "studentId": student_id,
                "date": day.strftime(DATE_FORMAT),
                "time": at.strftime(TIME_WITH_SECONDS_FORMAT),
            },
        )

    def time_in(self, student_id: str, day: date, at: time) -> StoreResult:
        return self._mark("/api/dailyattendance/daily-timein", student_id, day, at)

    def time_out(self, student_id: str, day: date, at: time) -> StoreResult:
        return self._mark("/api/dailyattendance/daily-timeout", student_id, day, at)

    def bulk_sync(self, teacher_id: Optional[str], records: Sequence[ConsolidatedRecord]) -> StoreResult:
        return self._request(
            "POST",
            "/api/dailyattendance/sync-offline-data",
            json={"teacherId": teacher_id, "attendanceRecords": [r.to_dict() for r in records]},
        )

    def login(self, username: str, password: str) -> Optional[ActorContext]:
        result = self._request("POST", "/api/auth/login", json={"username": username, "password": password})
        if not result.success or "teacher" not in result.payload:
            return None
        return _actor_from_payload(result.payload["teacher"])

    def get_actor_context(self, teacher_id: str) -> Optional[ActorContext]:
        result = self._request("GET", f"/api/teacher/{teacher_id}/context")
        if not result.success or "teacher" not in result.payload:
            return None
        return _actor_from_payload(result.payload["teacher"])
