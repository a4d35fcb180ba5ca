from __future__ import annotations

import csv
import io
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import parse_clock_on
from ..common.validators import require_date_order, require_range
from ..core.constants import (
    HOLIDAY_MULTIPLIER_MAX,
    HOLIDAY_MULTIPLIER_MIN,
    MAX_REPORTED_ERRORS,
    TRIP_MAX,
)
from ..core.enums import AttendanceSource, PostingStatus
from ..core.exceptions import NotFoundError, PostedRecordError, ValidationError
from ..employees.repository import EmployeeRepository
from .hours import HoursCalculator, hours_from_times, metrics_changed, worked_hours
from .model import AttendanceMetrics, DeleteResult, ImportResult, ProcessedAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_IMPORT_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y/%m/%d")


def _parse_import_date(value: str) -> date:
    for fmt in _IMPORT_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"Invalid date '{value}'")


def _cell(row: Sequence[str], index: int, default: str = "") -> str:
    return row[index].strip() if index < len(row) else default


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        calculator: HoursCalculator | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or HoursCalculator()

    def _get_mutable(self, attendance_id: int) -> ProcessedAttendance:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        if record.is_posted:
            raise PostedRecordError("Cannot edit a posted attendance record")
        return record

    def update_record(
        self,
        attendance_id: int,
        *,
        time_in: Optional[datetime] = None,
        time_out: Optional[datetime] = None,
        break_in: Optional[datetime] = None,
        break_out: Optional[datetime] = None,
        next_day_timeout: Optional[datetime] = None,
        is_nightshift: bool = False,
        trip: float = 0.0,
    ) -> ProcessedAttendance:
        record = self._get_mutable(attendance_id)
        trip = require_range(trip or 0, "trip", 0, TRIP_MAX)

        updated = replace(
            record,
            time_in=time_in,
            time_out=time_out,
            break_in=break_in,
            break_out=break_out,
            next_day_timeout=next_day_timeout if is_nightshift else None,
            is_nightshift=bool(is_nightshift),
            trip=trip,
            source=AttendanceSource.MANUAL_EDIT,
        )
        hours = worked_hours(updated)
        if hours is not None:
            updated = replace(updated, hours_worked=hours)

        self._attendance.update_times(updated)
        logger.info("attendance %s edited manually (hours=%s)", attendance_id, updated.hours_worked)
        return updated

    def recalculate_metrics(self, start_date: date, end_date: date, *, department: Optional[str] = None) -> int:
        require_date_order(start_date, end_date)
        rows = self._attendance.list_range(
            start_date=start_date, end_date=end_date, department=department, include_posted=False
        )
        changes: dict[int, AttendanceMetrics] = {}
        for row in rows:
            if row.time_in is None:
                continue
            metrics = self._calculator.compute_metrics(row)
            if metrics_changed(row, metrics):
                logger.debug("metrics changed for attendance %s: %s", row.attendance_id, metrics)
                changes[int(row.attendance_id)] = metrics

        updated = self._attendance.update_metrics(changes)
        logger.info(
            "recalculated metrics %s..%s: %s of %s rows updated", start_date, end_date, updated, len(rows)
        )
        return updated

    def set_holiday(
        self,
        day: date,
        multiplier: float,
        *,
        department: Optional[str] = None,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> int:
        multiplier = require_range(multiplier, "multiplier", HOLIDAY_MULTIPLIER_MIN, HOLIDAY_MULTIPLIER_MAX)
        rows = self._attendance.list_range(
            start_date=day,
            end_date=day,
            employee_ids=list(employee_ids or []) or None,
            department=department,
            include_posted=False,
        )
        eligible = [
            r.attendance_id
            for r in rows
            if not r.overtime and not r.ot_reg_holiday and not r.ot_special_holiday
        ]
        if not eligible:
            raise NotFoundError(f"No eligible attendance records found for {day.isoformat()}")

        count = self._attendance.set_holiday(eligible, multiplier)
        logger.info("holiday x%s set on %s for %s records", multiplier, day, count)
        return count

    def import_csv(self, text: str) -> ImportResult:
        reader = csv.reader(io.StringIO(text))
        next(reader, None)

        imported = 0
        updated = 0
        errors: list[str] = []

        for line_no, row in enumerate(reader, start=2):
            if not any(cell.strip() for cell in row):
                continue
            try:
                created = self._import_row(row)
            except ValidationError as e:
                errors.append(f"Line {line_no}: {e}")
                continue
            if created:
                imported += 1
            else:
                updated += 1

        logger.info("attendance import: %s imported, %s updated, %s errors", imported, updated, len(errors))
        return ImportResult(imported=imported, updated=updated, errors=errors[:MAX_REPORTED_ERRORS])

    def _import_row(self, row: Sequence[str]) -> bool:
        idno = _cell(row, 0)
        raw_date = _cell(row, 3)
        if not idno or not raw_date:
            raise ValidationError("Employee Number and Date are required")

        employee = self._employees.get_by_idno(idno)
        if not employee:
            raise ValidationError(f"Employee with ID {idno} not found")

        day = _parse_import_date(raw_date)
        is_nightshift = _cell(row, 11).lower() in ("yes", "1")
        try:
            trip = float(_cell(row, 12) or 0)
        except ValueError:
            raise ValidationError(f"Invalid trip value '{_cell(row, 12)}'")

        time_in = parse_clock_on(_cell(row, 5), day)
        break_out = parse_clock_on(_cell(row, 6), day)
        break_in = parse_clock_on(_cell(row, 7), day)
        time_out = parse_clock_on(_cell(row, 8), day)
        next_day_timeout = None
        if is_nightshift:
            next_day_timeout = parse_clock_on(_cell(row, 9), day + timedelta(days=1))

        hours = hours_from_times(
            time_in,
            next_day_timeout if is_nightshift else time_out,
            break_out,
            break_in,
            default_break_minutes=self._calculator.rules.import_default_break_minutes,
        )

        existing = self._attendance.get_for_employee_and_date(employee.employee_id, day)
        if existing and existing.is_posted:
            raise ValidationError(f"Attendance for {idno} on {day.isoformat()} is already posted")

        record = ProcessedAttendance(
            attendance_id=existing.attendance_id if existing else None,
            employee_id=employee.employee_id,
            attendance_date=day,
            day=_cell(row, 4) or day.strftime("%A"),
            time_in=time_in,
            break_out=break_out,
            break_in=break_in,
            time_out=time_out,
            next_day_timeout=next_day_timeout,
            is_nightshift=is_nightshift,
            hours_worked=hours,
            trip=trip,
            source=AttendanceSource.IMPORT,
            posting_status=PostingStatus.NOT_POSTED,
        )
        if existing:
            self._attendance.update_times(record)
            return False
        self._attendance.create(record)
        return True

    def bulk_delete(
        self,
        *,
        ids: Optional[Sequence[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> DeleteResult:
        errors: list[str] = []
        if ids:
            candidates = []
            for attendance_id in ids:
                record = self._attendance.get_by_id(int(attendance_id))
                if not record:
                    errors.append(f"Record ID {attendance_id} not found")
                    continue
                candidates.append(record)
        elif start_date and end_date:
            require_date_order(start_date, end_date)
            candidates = list(
                self._attendance.list_range(
                    start_date=start_date,
                    end_date=end_date,
                    employee_ids=[employee_id] if employee_id else None,
                    department=department,
                )
            )
        else:
            raise ValidationError("Either IDs or date range must be provided for deletion")

        deletable = []
        for record in candidates:
            if record.is_posted:
                logger.warning("skipping delete of posted attendance %s", record.attendance_id)
                errors.append(f"Record ID {record.attendance_id} is posted and cannot be deleted")
                continue
            deletable.append(int(record.attendance_id))

        deleted = self._attendance.delete_ids(deletable)
        logger.info("bulk delete: %s deleted, %s errors", deleted, len(errors))
        return DeleteResult(deleted_count=deleted, errors=errors[:MAX_REPORTED_ERRORS])
