"""Punch grouping.

Turns a flat list of time-clock punches into one attendance draft per
employee and calendar day. A shift that starts at or after the night time-in
hour stays open into the next morning: every punch before the carry-over
cutoff on the following day belongs to it, the last of them being its
``next_day_timeout`` and the ones in between its break.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from itertools import groupby
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..attendance.hours import HoursCalculator
from ..attendance.model import ProcessedAttendance
from ..core.enums import AttendanceSource
from ..core.rules import TimekeepingRules
from .model import Punch

logger = logging.getLogger(__name__)

DraftKey = Tuple[int, date]


def _slots(row) -> tuple:
    return (row.time_in, row.break_out, row.break_in, row.time_out, row.next_day_timeout, row.is_nightshift)


@dataclass
class _DayDraft:
    employee_id: int
    day: date
    punches: List[datetime] = field(default_factory=list)
    carried: List[datetime] = field(default_factory=list)
    time_in: Optional[datetime] = None
    break_out: Optional[datetime] = None
    break_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    next_day_timeout: Optional[datetime] = None
    is_nightshift: bool = False
    base: Optional[ProcessedAttendance] = None

    @classmethod
    def from_row(cls, row: ProcessedAttendance) -> "_DayDraft":
        """Rebuild a stored row from the punches it holds on its own date.

        Punches after midnight are dropped here; they are read again from the
        punch log and carried back onto the row.
        """
        own = sorted(
            {
                ts
                for ts in (row.time_in, row.break_out, row.break_in, row.time_out)
                if ts is not None and ts.date() == row.attendance_date
            }
        )
        return cls(employee_id=row.employee_id, day=row.attendance_date, punches=own, base=row)


class PunchGrouper:
    def __init__(self, rules: TimekeepingRules | None = None, *, calculator: HoursCalculator | None = None):
        self._rules = rules or TimekeepingRules()
        self._calculator = calculator or HoursCalculator(self._rules)

    def _dedupe(self, stamps: Iterable[datetime]) -> List[datetime]:
        kept: List[datetime] = []
        window = self._rules.duplicate_punch_seconds
        for ts in sorted(stamps):
            if kept and (ts - kept[-1]).total_seconds() < window:
                logger.debug("dropping duplicate punch %s", ts)
                continue
            kept.append(ts)
        return kept

    def _opens_night_shift(self, draft: Optional[_DayDraft]) -> bool:
        return bool(draft and draft.punches and draft.punches[0].hour >= self._rules.night_shift_timein_hour)

    def _assign_slots(self, draft: _DayDraft) -> None:
        stamps = draft.punches
        draft.time_in = stamps[0] if stamps else None
        draft.break_out = draft.break_in = draft.time_out = draft.next_day_timeout = None
        if not stamps:
            return

        if draft.carried:
            shift = stamps + draft.carried
            middle = shift[1:-1]
            draft.next_day_timeout = shift[-1]
            draft.break_out = middle[0] if middle else None
            draft.break_in = middle[1] if len(middle) > 1 else None
            draft.is_nightshift = True
            return

        last = len(stamps) - 1
        if last >= 1:
            draft.time_out = stamps[last]
        for i in range(1, last):
            if stamps[i].hour >= self._rules.break_window_start_hour:
                draft.break_out = stamps[i]
                if i + 1 < last:
                    draft.break_in = stamps[i + 1]
                break

        draft.is_nightshift = draft.time_in.hour >= self._rules.night_shift_timein_hour or (
            draft.time_out is not None and draft.time_out.hour >= self._rules.night_shift_timeout_hour
        )

    def _group_employee(self, employee_id: int, stamps: List[datetime], drafts: Dict[DraftKey, _DayDraft]) -> None:
        cutoff = self._rules.night_carryover_cutoff_hour
        for day, day_stamps in groupby(stamps, key=lambda ts: ts.date()):
            previous = drafts.get((employee_id, day - timedelta(days=1)))
            open_night = self._opens_night_shift(previous)
            own: List[datetime] = []
            for ts in day_stamps:
                if open_night and ts.hour < cutoff:
                    previous.carried.append(ts)
                    logger.debug("punch %s belongs to night shift of %s", ts, previous.day)
                    continue
                own.append(ts)

            if not own:
                continue
            current = drafts.get((employee_id, day))
            if current is None:
                drafts[(employee_id, day)] = _DayDraft(employee_id=employee_id, day=day, punches=own)
            else:
                current.punches = self._dedupe(current.punches + own)

    def _finish(self, draft: _DayDraft) -> ProcessedAttendance:
        base = draft.base or ProcessedAttendance(attendance_id=None, employee_id=draft.employee_id, attendance_date=draft.day)
        row = replace(
            base,
            day=draft.day.strftime("%A"),
            time_in=draft.time_in,
            break_out=draft.break_out,
            break_in=draft.break_in,
            time_out=draft.time_out,
            next_day_timeout=draft.next_day_timeout,
            is_nightshift=draft.is_nightshift,
            source=AttendanceSource.BIOMETRIC,
        )
        metrics = self._calculator.compute_metrics(row)
        return replace(
            row,
            hours_worked=metrics.hours_worked,
            late_minutes=metrics.late_minutes,
            undertime_minutes=metrics.undertime_minutes,
        )

    def group(
        self,
        punches: Iterable[Punch],
        *,
        previous: Optional[Mapping[DraftKey, ProcessedAttendance]] = None,
    ) -> List[ProcessedAttendance]:
        """Group punches into drafts ordered by employee and date.

        ``previous`` holds stored rows (typically the day before the range)
        whose night shift may own the first morning punches of the range.
        Such a row is returned only when its slots changed.
        """
        drafts: Dict[DraftKey, _DayDraft] = {}
        for key, row in (previous or {}).items():
            drafts[key] = _DayDraft.from_row(row)

        ordered = sorted(punches, key=lambda p: (p.employee_id, p.timestamp))
        for employee_id, items in groupby(ordered, key=lambda p: p.employee_id):
            stamps = self._dedupe(p.timestamp for p in items)
            self._group_employee(employee_id, stamps, drafts)

        results: List[ProcessedAttendance] = []
        for key in sorted(drafts):
            draft = drafts[key]
            self._assign_slots(draft)
            if draft.time_in is None:
                continue
            if draft.base is not None and _slots(draft.base) == _slots(draft):
                continue
            results.append(self._finish(draft))
        return results
