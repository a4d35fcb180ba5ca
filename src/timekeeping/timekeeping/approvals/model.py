"""Approved-request read models consumed by the attendance sync.

Each record knows which calendar days it covers and which value it
contributes to a processed attendance row on those days.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterator, Optional

from ..common.datetime_utils import daterange
from ..core.enums import ApprovalStatus, OffsetTransaction, OvertimeType, PayType


@dataclass(frozen=True)
class _Approval:
    id: int
    employee_id: int
    status: ApprovalStatus
    updated_at: Optional[datetime]

    @property
    def is_approved(self) -> bool:
        return self.status == ApprovalStatus.APPROVED

    def days(self) -> Iterator[date]:
        raise NotImplementedError


@dataclass(frozen=True)
class TravelOrder(_Approval):
    start_date: date
    end_date: date
    is_full_day: Optional[int] = 1

    def days(self) -> Iterator[date]:
        return daterange(self.start_date, self.end_date)

    @property
    def value(self) -> float:
        if self.is_full_day == 1:
            return 1.0
        if not self.is_full_day:
            return 0.0
        return 0.5


@dataclass(frozen=True)
class SLVL(_Approval):
    """Sick/vacation leave."""

    start_date: date
    end_date: date
    pay_type: PayType = PayType.WITH_PAY
    half_day: bool = False

    def days(self) -> Iterator[date]:
        return daterange(self.start_date, self.end_date)

    @property
    def value(self) -> float:
        if self.half_day:
            return 0.5
        return 1.0 if self.pay_type == PayType.WITH_PAY else 0.0


@dataclass(frozen=True)
class TimeSchedule(_Approval):
    effective_date: date

    def days(self) -> Iterator[date]:
        yield self.effective_date

    @property
    def value(self) -> bool:
        return True


@dataclass(frozen=True)
class ChangeOffSchedule(_Approval):
    requested_date: date

    def days(self) -> Iterator[date]:
        yield self.requested_date

    @property
    def value(self) -> bool:
        return True


@dataclass(frozen=True)
class Overtime(_Approval):
    date: date
    overtime_type: str = OvertimeType.REGULAR.value
    rate_multiplier: float = 0.0

    def days(self) -> Iterator[date]:
        yield self.date

    @property
    def value(self) -> float:
        return float(self.rate_multiplier)

    @property
    def target_field(self) -> str:
        if self.overtime_type == OvertimeType.REGULAR_HOLIDAY.value:
            return "ot_reg_holiday"
        if self.overtime_type == OvertimeType.SPECIAL_HOLIDAY.value:
            return "ot_special_holiday"
        return "overtime"


@dataclass(frozen=True)
class CancelRestDay(_Approval):
    rest_day_date: date

    def days(self) -> Iterator[date]:
        yield self.rest_day_date

    @property
    def value(self) -> bool:
        return True


@dataclass(frozen=True)
class Retro(_Approval):
    retro_date: date
    multiplier_rate: float = 0.0
    hours_days: float = 0.0

    def days(self) -> Iterator[date]:
        yield self.retro_date

    @property
    def value(self) -> float:
        return round(float(self.multiplier_rate) * float(self.hours_days), 2)


@dataclass(frozen=True)
class Offset(_Approval):
    date: date
    transaction_type: OffsetTransaction = OffsetTransaction.DEBIT
    hours: float = 0.0

    def days(self) -> Iterator[date]:
        if self.transaction_type == OffsetTransaction.DEBIT:
            yield self.date

    @property
    def value(self) -> float:
        return float(self.hours)


@dataclass(frozen=True)
class ApprovalBundle:
    travel_orders: list[TravelOrder] = field(default_factory=list)
    slvls: list[SLVL] = field(default_factory=list)
    time_schedules: list[TimeSchedule] = field(default_factory=list)
    change_off_schedules: list[ChangeOffSchedule] = field(default_factory=list)
    overtimes: list[Overtime] = field(default_factory=list)
    cancel_rest_days: list[CancelRestDay] = field(default_factory=list)
    retros: list[Retro] = field(default_factory=list)
    offsets: list[Offset] = field(default_factory=list)
