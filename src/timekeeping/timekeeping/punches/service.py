from __future__ import annotations

import csv
import io
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Dict, Optional

from ..attendance.model import AttendanceMetrics
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_punch_timestamp
from ..common.validators import require_date_order
from ..core.constants import MAX_REPORTED_ERRORS
from ..core.enums import AttendanceSource
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .grouper import PunchGrouper
from .model import Punch, PunchImportResult
from .repository import PunchRepository

logger = logging.getLogger(__name__)


class PunchService:
    def __init__(
        self,
        punches: PunchRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        grouper: PunchGrouper | None = None,
    ):
        self._punches = punches
        self._attendance = attendance
        self._employees = employees
        self._grouper = grouper or PunchGrouper()

    def import_csv(self, text: str) -> PunchImportResult:
        reader = csv.DictReader(io.StringIO(text))
        if reader.fieldnames:
            reader.fieldnames = [name.strip() for name in reader.fieldnames]

        employees: Dict[str, Optional[Employee]] = {}
        fresh: list[Punch] = []
        seen: set = set()
        skipped = 0
        errors: list[str] = []

        for line_no, row in enumerate(reader, start=2):
            biometric_id = (row.get("BiometricID") or "").strip()
            raw_ts = (row.get("DateTime") or "").strip()
            if not biometric_id or not raw_ts:
                errors.append(f"Line {line_no}: BiometricID and DateTime are required")
                continue

            timestamp = parse_punch_timestamp(raw_ts)
            if timestamp is None:
                errors.append(f"Line {line_no}: Unrecognized date format '{raw_ts}'")
                continue

            if biometric_id not in employees:
                employees[biometric_id] = self._employees.get_by_biometric_id(biometric_id)
            employee = employees[biometric_id]
            if employee is None:
                errors.append(f"Line {line_no}: No employee with biometric ID {biometric_id}")
                continue

            key = (employee.employee_id, biometric_id, timestamp)
            if key in seen or self._punches.exists(
                employee_id=employee.employee_id, biometric_id=biometric_id, timestamp=timestamp
            ):
                skipped += 1
                continue
            seen.add(key)
            fresh.append(
                Punch(
                    employee_id=employee.employee_id,
                    biometric_id=biometric_id,
                    timestamp=timestamp,
                    status=(row.get("Status") or "").strip() or None,
                    type=(row.get("Type") or "").strip() or None,
                )
            )

        saved = self._punches.save_many(fresh)
        created = updated = 0
        if fresh:
            first = min(p.timestamp for p in fresh).date()
            last = max(p.timestamp for p in fresh).date()
            created, updated = self.process_range(first, last)

        logger.info("punch import: %s saved, %s skipped, %s errors", saved, skipped, len(errors))
        return PunchImportResult(
            saved=saved,
            skipped=skipped,
            errors=errors[:MAX_REPORTED_ERRORS],
            created=created,
            updated=updated,
        )

    def process_range(self, start_date: date, end_date: date) -> tuple[int, int]:
        """Rebuild attendance rows for ``start_date..end_date`` from stored punches."""
        require_date_order(start_date, end_date)
        window_start = datetime.combine(start_date, datetime.min.time())
        window_end = datetime.combine(end_date + timedelta(days=2), datetime.min.time())
        punches = self._punches.list_between(window_start, window_end)

        day_before = start_date - timedelta(days=1)
        previous = {
            (r.employee_id, r.attendance_date): r
            for r in self._attendance.list_range(start_date=day_before, end_date=day_before)
            if r.is_nightshift
        }

        created = updated = 0
        metrics: dict[int, AttendanceMetrics] = {}
        for draft in self._grouper.group(punches, previous=previous):
            if not (day_before <= draft.attendance_date <= end_date):
                continue

            existing = self._attendance.get_for_employee_and_date(draft.employee_id, draft.attendance_date)
            if existing is None:
                if draft.attendance_date < start_date:
                    continue
                self._attendance.create(draft)
                created += 1
                continue
            if existing.is_posted or existing.source == AttendanceSource.MANUAL_EDIT:
                logger.warning(
                    "keeping attendance %s (%s) untouched by punch processing",
                    existing.attendance_id,
                    "posted" if existing.is_posted else existing.source.value,
                )
                continue

            row = replace(draft, attendance_id=existing.attendance_id, trip=existing.trip)
            self._attendance.update_times(row)
            metrics[int(existing.attendance_id)] = AttendanceMetrics(
                hours_worked=row.hours_worked,
                late_minutes=row.late_minutes,
                undertime_minutes=row.undertime_minutes,
            )
            updated += 1

        self._attendance.update_metrics(metrics)
        logger.info("processed punches %s..%s: %s created, %s updated", start_date, end_date, created, updated)
        return created, updated
