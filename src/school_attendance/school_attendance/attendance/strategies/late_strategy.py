from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision, is_whole_day


class LateStrategy(AttendanceStrategy):
    """Late arrival; the lateness is carried into the time-out remarks."""

    def decide_time_in(self, *, at: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, remarks="Late arrival")

    def decide_time_out(self, *, time_in: time, time_out: time) -> StatusDecision:
        if is_whole_day(time_in, time_out):
            return StatusDecision(status=AttendanceStatus.WHOLE_DAY, remarks="Late - Whole Day")
        return StatusDecision(status=AttendanceStatus.HALF_DAY, remarks="Late - Half Day")
