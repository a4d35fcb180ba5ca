from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from itertools import groupby
from typing import Callable, Optional, Sequence

from ..attendance.model import ProcessedAttendance
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import MAX_REPORTED_ERRORS
from ..core.enums import PeriodType, SummaryStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import SummaryCalculator
from .calculator.standard_calculator import StandardSummaryCalculator
from .model import TOTAL_FIELDS, PostingPreview, PostingResult
from .periods import CutoffPeriod, cutoff
from .repository import PayrollSummaryRepository

logger = logging.getLogger(__name__)


class PayrollPostingService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        summaries: PayrollSummaryRepository,
        *,
        calculator: Optional[SummaryCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._summaries = summaries
        self._calculator = calculator or StandardSummaryCalculator()
        self._clock = clock

    def _pending_rows(
        self,
        period: CutoffPeriod,
        department: Optional[str],
        employee_ids: Optional[Sequence[int]],
    ) -> list[tuple[int, list[ProcessedAttendance]]]:
        rows = self._attendance.list_range(
            start_date=period.start,
            end_date=period.end,
            employee_ids=list(employee_ids or []) or None,
            department=department,
            include_posted=False,
        )
        ordered = sorted(rows, key=lambda r: (r.employee_id, r.attendance_date))
        return [(emp_id, list(items)) for emp_id, items in groupby(ordered, key=lambda r: r.employee_id)]

    def _employee(self, employee_id: int):
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ValidationError(f"Employee {employee_id} not found")
        return employee

    def preview(
        self,
        year: int,
        month: int,
        period_type: PeriodType | str,
        *,
        department: Optional[str] = None,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> PostingPreview:
        period = cutoff(year, month, period_type)
        groups = self._pending_rows(period, department, employee_ids)

        totals = dict.fromkeys(TOTAL_FIELDS, 0.0)
        entries: list[dict] = []
        record_count = 0
        for employee_id, rows in groups:
            summary = self._calculator.summarize(self._employee(employee_id), rows, period)
            existing = self._summaries.find(
                employee_id=employee_id, year=period.year, month=period.month, period_type=period.period_type
            )
            entry = summary.to_dict()
            entry["record_count"] = len(rows)
            entry["existing_summary"] = (
                {
                    "id": existing.summary_id,
                    "status": existing.status.value,
                    "posted_at": existing.posted_at.isoformat() if existing.posted_at else None,
                }
                if existing
                else None
            )
            entry["will_update"] = bool(existing and not existing.is_posted)
            entries.append(entry)

            record_count += len(rows)
            for f in TOTAL_FIELDS:
                totals[f] += getattr(summary, f)

        totals = {k: round(v, 2) for k, v in totals.items()}
        totals["period_label"] = period.label
        return PostingPreview(
            summaries=entries,
            totals=totals,
            employee_count=len(entries),
            attendance_count=record_count,
        )

    def post(
        self,
        year: int,
        month: int,
        period_type: PeriodType | str,
        *,
        department: Optional[str] = None,
        employee_ids: Optional[Sequence[int]] = None,
        posted_by: Optional[int] = None,
    ) -> PostingResult:
        period = cutoff(year, month, period_type)
        groups = self._pending_rows(period, department, employee_ids)
        if not groups:
            raise NotFoundError("No attendance records found for the specified criteria")

        logger.info(
            "payroll posting started for %s-%02d %s (%s employees)",
            period.year,
            period.month,
            period.period_type.value,
            len(groups),
        )
        now = self._clock()
        posted = 0
        updated_rows = 0
        errors: list[str] = []
        for employee_id, rows in groups:
            employee = self._employee(employee_id)
            existing = self._summaries.find(
                employee_id=employee_id, year=period.year, month=period.month, period_type=period.period_type
            )
            if existing and existing.is_posted:
                logger.warning("employee %s already has a posted summary for %s", employee.idno, period.label)
                errors.append(f"Employee {employee.idno} already has a posted summary for this period")
                continue

            summary = replace(
                self._calculator.summarize(employee, rows, period),
                summary_id=existing.summary_id if existing else None,
                status=SummaryStatus.POSTED,
                posted_by=posted_by,
                posted_at=now,
            )
            _, locked = self._summaries.save_posting(summary, [int(r.attendance_id) for r in rows])
            updated_rows += locked
            posted += 1
            logger.debug("posted summary for employee %s: %s days", employee.idno, summary.days_worked)

        logger.info("payroll posting finished: %s posted, %s rows locked, %s errors", posted, updated_rows, len(errors))
        return PostingResult(posted_count=posted, updated_count=updated_rows, errors=errors[:MAX_REPORTED_ERRORS])

    def unpost(self, summary_id: int) -> int:
        """Return a posted summary to draft and unlock its attendance rows."""
        summary = self._summaries.get_by_id(summary_id)
        if not summary:
            raise NotFoundError(f"Payroll summary {summary_id} not found")
        if not summary.is_posted:
            raise ValidationError("Payroll summary is not posted")

        unlocked = self._summaries.revert_posting(summary)
        logger.info("payroll summary %s unposted, %s attendance rows unlocked", summary_id, unlocked)
        return unlocked
