from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import minutes_between
from ..core.constants import METRIC_TOLERANCE
from ..core.rules import TimekeepingRules
from .factory import ShiftStrategyFactory
from .model import AttendanceMetrics, ProcessedAttendance

logger = logging.getLogger(__name__)


def effective_time_out(row: ProcessedAttendance) -> Optional[datetime]:
    """The time-out that closes the working day (next-day punch for night shifts)."""
    if row.is_nightshift and row.next_day_timeout is not None:
        return row.next_day_timeout
    return row.time_out


def round_down_to_hour(ts: datetime) -> datetime:
    return ts.replace(minute=0, second=0, microsecond=0)


def worked_hours(row: ProcessedAttendance) -> Optional[float]:
    """Hours between time-in and effective time-out minus the recorded break.

    Used after manual edits. Returns None when either end is missing so the
    caller keeps the stored value.
    """
    end = effective_time_out(row)
    if row.time_in is None or end is None:
        return None
    total = minutes_between(row.time_in, end)
    if row.break_out is not None and row.break_in is not None:
        total -= minutes_between(row.break_out, row.break_in)
    return round(max(0, total) / 60, 2)


def hours_from_times(
    time_in: Optional[datetime],
    time_out: Optional[datetime],
    break_out: Optional[datetime],
    break_in: Optional[datetime],
    *,
    default_break_minutes: int = 60,
) -> float:
    if time_in is None or time_out is None:
        return 0.0
    total = minutes_between(time_in, time_out)
    if break_out is not None and break_in is not None and break_in > break_out:
        brk = minutes_between(break_out, break_in)
    else:
        brk = default_break_minutes
    return round(max(0, total - brk) / 60, 2)


def metrics_changed(row: ProcessedAttendance, metrics: AttendanceMetrics) -> bool:
    return (
        abs(float(row.hours_worked or 0) - metrics.hours_worked) > METRIC_TOLERANCE
        or abs(float(row.late_minutes or 0) - metrics.late_minutes) > METRIC_TOLERANCE
        or abs(float(row.undertime_minutes or 0) - metrics.undertime_minutes) > METRIC_TOLERANCE
    )


class HoursCalculator:
    def __init__(self, rules: TimekeepingRules | None = None, *, shift_factory: ShiftStrategyFactory | None = None):
        self._rules = rules or TimekeepingRules()
        self._factory = shift_factory or ShiftStrategyFactory()

    @property
    def rules(self) -> TimekeepingRules:
        return self._rules

    def late_minutes(self, row: ProcessedAttendance) -> float:
        if row.time_in is None:
            return 0.0
        strategy = self._factory.for_time_in(row.time_in)
        decision = strategy.decide(attendance_date=row.attendance_date)
        if row.time_in <= decision.expected_start:
            return 0.0
        return float(minutes_between(decision.expected_start, row.time_in))

    def break_minutes(self, row: ProcessedAttendance, time_out: datetime) -> int:
        """Recorded break, counted only when it lies inside the working day."""
        if row.time_in is None or row.break_out is None or row.break_in is None:
            return 0
        bo, bi = row.break_out, row.break_in
        inside = row.time_in <= bo <= time_out and row.time_in <= bi <= time_out
        if not inside or bi <= bo:
            logger.debug("ignoring break %s-%s for attendance %s", bo, bi, row.attendance_id)
            return 0
        minutes = minutes_between(bo, bi)
        if minutes > self._rules.max_break_minutes:
            logger.warning(
                "break of %s minutes on attendance %s replaced by %s",
                minutes,
                row.attendance_id,
                self._rules.default_break_minutes,
            )
            return self._rules.default_break_minutes
        return minutes

    def compute_metrics(self, row: ProcessedAttendance) -> AttendanceMetrics:
        if row.time_in is None:
            return AttendanceMetrics(hours_worked=0.0, late_minutes=0.0, undertime_minutes=0.0)

        initial_late = self.late_minutes(row)
        hours = 0.0

        time_out = effective_time_out(row)
        if time_out is not None:
            rounded = round_down_to_hour(time_out)
            if row.is_nightshift and rounded < row.time_in:
                rounded += timedelta(days=1)
            total = minutes_between(row.time_in, rounded)
            net = max(0, total - self.break_minutes(row, time_out))
            hours = round(net / 60, 2)

        is_halfday = hours == 0 and row.has_any_punch
        minimum_minutes = self._rules.minimum_work_hours * 60

        if is_halfday or hours >= self._rules.minimum_work_hours:
            late = 0.0
        else:
            late = initial_late

        undertime = 0.0
        if not is_halfday and hours * 60 < minimum_minutes:
            undertime = round(minimum_minutes - hours * 60, 2)

        return AttendanceMetrics(
            hours_worked=hours,
            late_minutes=late,
            undertime_minutes=undertime,
            is_halfday=is_halfday,
        )
