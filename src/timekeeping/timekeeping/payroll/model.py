from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PeriodType, SummaryStatus


@dataclass(frozen=True)
class PayrollSummary:
    """Per-employee totals for one cutoff period."""

    summary_id: Optional[int]
    employee_id: int
    employee_no: str
    employee_name: str
    department: Optional[str]
    cost_center: Optional[str]
    line: Optional[str]
    period_start: date
    period_end: date
    period_type: PeriodType
    year: int
    month: int

    days_worked: float = 0.0
    ot_hours: float = 0.0
    off_days: float = 0.0
    late_under_minutes: float = 0.0
    nsd_hours: float = 0.0
    slvl_days: float = 0.0
    retro: float = 0.0
    travel_order_hours: float = 0.0
    holiday_hours: float = 0.0
    ot_reg_holiday_hours: float = 0.0
    ot_special_holiday_hours: float = 0.0
    offset_hours: float = 0.0
    trip_count: float = 0.0
    has_ct: bool = False
    has_cs: bool = False
    has_ob: bool = False

    status: SummaryStatus = SummaryStatus.DRAFT
    posted_by: Optional[int] = None
    posted_at: Optional[datetime] = None

    @property
    def is_posted(self) -> bool:
        return self.status == SummaryStatus.POSTED

    def to_dict(self) -> dict:
        data = asdict(self)
        data["period_start"] = self.period_start.isoformat()
        data["period_end"] = self.period_end.isoformat()
        data["period_type"] = self.period_type.value
        data["status"] = self.status.value
        data["posted_at"] = self.posted_at.isoformat() if self.posted_at else None
        return data


TOTAL_FIELDS = (
    "days_worked",
    "ot_hours",
    "off_days",
    "late_under_minutes",
    "nsd_hours",
    "slvl_days",
    "retro",
    "travel_order_hours",
    "holiday_hours",
    "ot_reg_holiday_hours",
    "ot_special_holiday_hours",
    "offset_hours",
    "trip_count",
)


@dataclass(frozen=True)
class PostingPreview:
    summaries: list[dict]
    totals: dict
    employee_count: int
    attendance_count: int


@dataclass(frozen=True)
class PostingResult:
    posted_count: int
    updated_count: int
    errors: list[str]

    @property
    def message(self) -> str:
        msg = f"Posted {self.posted_count} payroll summaries ({self.updated_count} updated)"
        if self.errors:
            msg += f". {len(self.errors)} errors occurred."
        return msg
