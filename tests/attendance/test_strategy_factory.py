from datetime import time

from school_attendance.attendance.factory import AttendanceStrategyFactory
from school_attendance.attendance.strategies.late_strategy import LateStrategy
from school_attendance.attendance.strategies.on_time_strategy import OnTimeStrategy
from school_attendance.core.enums import AttendanceStatus


def test_time_in_exactly_at_school_start_is_on_time():
    strategy = AttendanceStrategyFactory().for_time_in(at=time(7, 30, 0))

    assert isinstance(strategy, OnTimeStrategy)
    assert strategy.decide_time_in(at=time(7, 30, 0)).status == AttendanceStatus.PRESENT


def test_time_in_one_second_after_school_start_is_late():
    strategy = AttendanceStrategyFactory().for_time_in(at=time(7, 30, 1))

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_time_in(at=time(7, 30, 1))
    assert decision.status == AttendanceStatus.LATE
    assert decision.remarks == "Late arrival"


def test_subject_schedule_overrides_school_start():
    factory = AttendanceStrategyFactory()

    assert isinstance(factory.for_time_in(at=time(7, 55), schedule_start=time(8, 0)), OnTimeStrategy)
    assert isinstance(factory.for_time_in(at=time(8, 0, 1), schedule_start=time(8, 0)), LateStrategy)


def test_configured_school_start():
    factory = AttendanceStrategyFactory(school_start=time(8, 0))

    assert isinstance(factory.for_time_in(at=time(7, 45)), OnTimeStrategy)


def test_time_out_lateness_uses_its_own_threshold():
    factory = AttendanceStrategyFactory()

    assert isinstance(factory.for_time_out(time_in=time(7, 30, 30)), OnTimeStrategy)
    assert isinstance(factory.for_time_out(time_in=time(7, 31)), LateStrategy)


def test_time_out_remarks():
    on_time, late = OnTimeStrategy(), LateStrategy()

    assert on_time.decide_time_out(time_in=time(7, 0), time_out=time(16, 30)).remarks == "Whole Day"
    assert on_time.decide_time_out(time_in=time(7, 0), time_out=time(15, 59)).remarks == "Half Day"
    assert late.decide_time_out(time_in=time(7, 45), time_out=time(16, 0)).remarks == "Late - Whole Day"
    assert late.decide_time_out(time_in=time(9, 0), time_out=time(17, 0)).remarks == "Late - Half Day"
    assert late.decide_time_out(time_in=time(9, 0), time_out=time(17, 0)).status == AttendanceStatus.HALF_DAY
