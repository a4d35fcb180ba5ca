from __future__ import annotations

from typing import Sequence

from ...attendance.model import ProcessedAttendance
from ...employees.model import Employee
from ..model import TOTAL_FIELDS, PayrollSummary
from ..periods import CutoffPeriod
from .base import SummaryCalculator


def day_credit(row: ProcessedAttendance) -> float:
    """Working-day credit: a punched day minus the leave portion."""
    if row.time_in is None:
        return 0.0
    slvl = float(row.slvl or 0)
    if slvl >= 1:
        return 0.0
    if slvl > 0:
        return 1 - slvl
    return 1.0


class StandardSummaryCalculator(SummaryCalculator):
    def summarize(self, employee: Employee, rows: Sequence[ProcessedAttendance], period: CutoffPeriod) -> PayrollSummary:
        totals = dict.fromkeys(TOTAL_FIELDS, 0.0)
        has_ct = has_cs = has_ob = False

        for r in rows:
            totals["days_worked"] += day_credit(r)
            totals["ot_hours"] += r.overtime
            if r.restday:
                totals["off_days"] += 1
            totals["late_under_minutes"] += r.late_minutes + r.undertime_minutes
            if r.is_nightshift and r.hours_worked > 0:
                totals["nsd_hours"] += r.hours_worked
            totals["slvl_days"] += r.slvl
            totals["retro"] += r.retromultiplier
            totals["travel_order_hours"] += r.travel_order
            totals["holiday_hours"] += r.holiday
            totals["ot_reg_holiday_hours"] += r.ot_reg_holiday
            totals["ot_special_holiday_hours"] += r.ot_special_holiday
            totals["offset_hours"] += r.offset
            totals["trip_count"] += r.trip
            has_ct = has_ct or r.ct
            has_cs = has_cs or r.cs
            has_ob = has_ob or r.ob

        rounded = {k: round(v, 2) for k, v in totals.items()}
        rounded["days_worked"] = round(totals["days_worked"], 1)

        return PayrollSummary(
            summary_id=None,
            employee_id=employee.employee_id,
            employee_no=employee.idno,
            employee_name=employee.full_name,
            department=employee.department,
            cost_center=employee.cost_center,
            line=employee.line,
            period_start=period.start,
            period_end=period.end,
            period_type=period.period_type,
            year=period.year,
            month=period.month,
            has_ct=has_ct,
            has_cs=has_cs,
            has_ob=has_ob,
            **rounded,
        )
