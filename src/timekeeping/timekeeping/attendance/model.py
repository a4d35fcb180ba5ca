from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceSource, PostingStatus


@dataclass(frozen=True)
class ProcessedAttendance:
    """Domain entity: one reconciled attendance day for one employee.

    Time fields are full datetimes; ``next_day_timeout`` is only meaningful
    when ``is_nightshift`` is set. The numeric/boolean block below the time
    fields is derived from approval tables by the sync job.
    """

    attendance_id: Optional[int]
    employee_id: int
    attendance_date: date
    day: Optional[str] = None
    time_in: Optional[datetime] = None
    break_out: Optional[datetime] = None
    break_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    next_day_timeout: Optional[datetime] = None
    is_nightshift: bool = False

    hours_worked: float = 0.0
    late_minutes: float = 0.0
    undertime_minutes: float = 0.0

    overtime: float = 0.0
    travel_order: float = 0.0
    slvl: float = 0.0
    ct: bool = False
    cs: bool = False
    restday: bool = False
    ob: bool = False
    holiday: float = 0.0
    ot_reg_holiday: float = 0.0
    ot_special_holiday: float = 0.0
    retromultiplier: float = 0.0
    offset: float = 0.0
    trip: float = 0.0

    source: Optional[AttendanceSource] = None
    status: Optional[str] = None
    remarks: Optional[str] = None
    posting_status: PostingStatus = PostingStatus.NOT_POSTED
    posted_at: Optional[datetime] = None
    posted_by: Optional[int] = None

    @property
    def is_posted(self) -> bool:
        return self.posting_status == PostingStatus.POSTED

    @property
    def has_any_punch(self) -> bool:
        return any(
            v is not None
            for v in (self.time_in, self.break_out, self.break_in, self.time_out, self.next_day_timeout)
        )


@dataclass(frozen=True)
class AttendanceMetrics:
    hours_worked: float
    late_minutes: float
    undertime_minutes: float
    is_halfday: bool = False


@dataclass(frozen=True)
class ImportResult:
    imported: int
    updated: int
    errors: list[str]

    @property
    def message(self) -> str:
        msg = f"Import completed. {self.imported} records imported, {self.updated} records updated"
        if self.errors:
            msg += f". {len(self.errors)} errors occurred."
        return msg


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int
    errors: list[str]
