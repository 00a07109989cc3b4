from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time

from ...core.constants import WHOLE_DAY_IN_HOUR, WHOLE_DAY_OUT_HOUR
from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    remarks: str = ""


def is_whole_day(time_in: time, time_out: time) -> bool:
    """Arrived by the 7 o'clock hour and left at 16:00 or later."""
    return time_in.hour <= WHOLE_DAY_IN_HOUR and time_out.hour >= WHOLE_DAY_OUT_HOUR


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a daily attendance status."""

    @abstractmethod
    def decide_time_in(self, *, at: time) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_time_out(self, *, time_in: time, time_out: time) -> StatusDecision:
        raise NotImplementedError
