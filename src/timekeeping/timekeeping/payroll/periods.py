from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from ..core.enums import PeriodType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class CutoffPeriod:
    """Semi-monthly pay period: days 1-15 or day 16 to month end."""

    year: int
    month: int
    period_type: PeriodType
    start: date
    end: date

    @property
    def label(self) -> str:
        return f"{self.start.day}-{self.end.day}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def period_dates(year: int, month: int, period_type: PeriodType | str) -> tuple[date, date]:
    try:
        period_type = PeriodType(period_type)
    except ValueError:
        raise ValidationError(f"Unknown period type '{period_type}'")
    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12")

    if period_type == PeriodType.FIRST_HALF:
        return date(year, month, 1), date(year, month, 15)
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 16), date(year, month, last)


def cutoff(year: int, month: int, period_type: PeriodType | str) -> CutoffPeriod:
    start, end = period_dates(year, month, period_type)
    return CutoffPeriod(year=year, month=month, period_type=PeriodType(period_type), start=start, end=end)


def period_for(day: date) -> CutoffPeriod:
    kind = PeriodType.FIRST_HALF if day.day <= 15 else PeriodType.SECOND_HALF
    return cutoff(day.year, day.month, kind)


def period_label(year: int, month: int, period_type: PeriodType | str) -> str:
    return cutoff(year, month, period_type).label
