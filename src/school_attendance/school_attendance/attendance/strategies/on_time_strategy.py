from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision, is_whole_day


class OnTimeStrategy(AttendanceStrategy):
    """On-time arrival."""

    def decide_time_in(self, *, at: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, remarks="")

    def decide_time_out(self, *, time_in: time, time_out: time) -> StatusDecision:
        if is_whole_day(time_in, time_out):
            return StatusDecision(status=AttendanceStatus.WHOLE_DAY, remarks="Whole Day")
        return StatusDecision(status=AttendanceStatus.HALF_DAY, remarks="Half Day")
