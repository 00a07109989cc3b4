from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.constants import DEFAULT_SCHOOL_START, TIME_OUT_LATE_FROM
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Note: time-in and time-out use different lateness thresholds, so 07:30:30
    is a late arrival but not "late" in the time-out remarks.
    """

    school_start: time = DEFAULT_SCHOOL_START
    time_out_late_from: time = TIME_OUT_LATE_FROM

    def for_time_in(self, *, at: time, schedule_start: Optional[time] = None) -> AttendanceStrategy:
        start = schedule_start or self.school_start
        if at > start:
            return LateStrategy()
        return OnTimeStrategy()

    def for_time_out(self, *, time_in: time) -> AttendanceStrategy:
        if time_in >= self.time_out_late_from:
            return LateStrategy()
        return OnTimeStrategy()
