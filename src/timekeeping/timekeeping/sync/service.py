from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Optional

from ..approvals.model import SLVL
from ..approvals.repository import ApprovalRepository
from ..attendance.model import ProcessedAttendance
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_date_order
from ..core.constants import (
    MAX_REPORTED_ERRORS,
    SLVL_BREAK_IN,
    SLVL_BREAK_OUT,
    SLVL_FULL_DAY_HOURS,
    SLVL_HALF_DAY_HOURS,
    SLVL_TIME_IN,
    SLVL_TIME_OUT,
)
from ..core.enums import ApprovalStatus, AttendanceSource
from ..core.exceptions import NotFoundError, PostedRecordError
from ..payroll.periods import period_for
from .merger import ApprovalIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    synced_count: int
    created_records: int
    error_count: int
    total_processed: int
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        msg = f"Sync completed successfully. {self.synced_count} records updated"
        if self.created_records:
            msg += f", {self.created_records} new records created"
        if self.error_count:
            msg += f", {self.error_count} errors occurred."
        return msg


def _slvl_row(employee_id: int, day: date, slvl: SLVL) -> ProcessedAttendance:
    return ProcessedAttendance(
        attendance_id=None,
        employee_id=employee_id,
        attendance_date=day,
        day=day.strftime("%A"),
        time_in=datetime.combine(day, SLVL_TIME_IN),
        break_out=datetime.combine(day, SLVL_BREAK_OUT),
        break_in=datetime.combine(day, SLVL_BREAK_IN),
        time_out=datetime.combine(day, SLVL_TIME_OUT),
        hours_worked=float(SLVL_HALF_DAY_HOURS if slvl.half_day else SLVL_FULL_DAY_HOURS),
        slvl=slvl.value,
        source=AttendanceSource.SLVL_SYNC,
        status=ApprovalStatus.APPROVED.value,
    )


class AttendanceSyncService:
    """Reclassifies processed attendance against the approval tables."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        approvals: ApprovalRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._approvals = approvals
        self._clock = clock

    def default_range(self) -> tuple[date, date]:
        period = period_for(self._clock().date())
        return period.start, period.end

    def sync(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> SyncResult:
        if start_date is None or end_date is None:
            start_date, end_date = self.default_range()
        require_date_order(start_date, end_date)
        logger.info("attendance sync started for %s..%s", start_date, end_date)

        bundle = self._approvals.load_approved(start_date=start_date, end_date=end_date)
        index = ApprovalIndex.build(bundle, within=(start_date, end_date))
        rows = self._attendance.list_range(start_date=start_date, end_date=end_date)
        existing = {(r.employee_id, r.attendance_date) for r in rows}

        errors: list[str] = []
        created: list[ProcessedAttendance] = []
        for employee_id, day, slvl in index.slvl_days():
            if (employee_id, day) in existing:
                continue
            seed = _slvl_row(employee_id, day, slvl)
            created.append(index.values_for(employee_id, day).apply_to(seed))
            logger.debug("seeding SLVL row for employee %s on %s", employee_id, day)

        changed: list[ProcessedAttendance] = []
        processed = 0
        for row in rows:
            if row.is_posted:
                continue
            processed += 1
            try:
                values = index.values_for(row.employee_id, row.attendance_date)
                if values.differs_from(row):
                    logger.debug("attendance %s merged: %s", row.attendance_id, values.as_dict())
                    changed.append(values.apply_to(row))
            except Exception as e:
                logger.exception("failed to merge attendance %s", row.attendance_id)
                errors.append(f"Error syncing attendance ID {row.attendance_id}: {e}")

        self._attendance.save_sync(created=created, updated=changed)

        result = SyncResult(
            synced_count=len(changed),
            created_records=len(created),
            error_count=len(errors),
            total_processed=processed + len(created),
            errors=errors[:MAX_REPORTED_ERRORS],
        )
        logger.info(
            "attendance sync finished: synced=%s created=%s errors=%s processed=%s",
            result.synced_count,
            result.created_records,
            result.error_count,
            result.total_processed,
        )
        return result

    def sync_individual(self, attendance_id: int) -> tuple[ProcessedAttendance, bool]:
        row = self._attendance.get_by_id(attendance_id)
        if not row:
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        if row.is_posted:
            raise PostedRecordError("Cannot sync a posted attendance record")

        day = row.attendance_date
        bundle = self._approvals.load_approved(start_date=day, end_date=day, employee_id=row.employee_id)
        values = ApprovalIndex.build(bundle, within=(day, day)).values_for(row.employee_id, day)
        if not values.differs_from(row):
            return row, False

        merged = values.apply_to(row)
        self._attendance.update_approval_fields([merged])
        logger.info("attendance %s synced individually", attendance_id)
        return merged, True
