from __future__ import annotations

from datetime import date, datetime

from src.timekeeping.timekeeping.approvals.model import (
    SLVL,
    ApprovalBundle,
    CancelRestDay,
    Offset,
    Overtime,
    Retro,
    TimeSchedule,
    TravelOrder,
)
from src.timekeeping.timekeeping.attendance.model import ProcessedAttendance
from src.timekeeping.timekeeping.core.enums import ApprovalStatus, OffsetTransaction, OvertimeType, PayType
from src.timekeeping.timekeeping.sync.merger import ApprovalIndex, ApprovalValues

DAY = date(2025, 1, 6)
APPROVED = ApprovalStatus.APPROVED


def test_latest_updated_record_wins_then_highest_id():
    bundle = ApprovalBundle(
        travel_orders=[
            TravelOrder(1, 1, APPROVED, datetime(2025, 1, 2), DAY, DAY, is_full_day=1),
            TravelOrder(2, 1, APPROVED, datetime(2025, 1, 3), DAY, DAY, is_full_day=2),
        ],
        retros=[
            Retro(5, 1, APPROVED, None, DAY, multiplier_rate=1.25, hours_days=2),
            Retro(6, 1, APPROVED, None, DAY, multiplier_rate=2.0, hours_days=1),
        ],
    )

    values = ApprovalIndex.build(bundle).values_for(1, DAY)

    assert values.travel_order == 0.5
    assert values.retromultiplier == 2.0


def test_unapproved_records_and_credit_offsets_are_ignored():
    bundle = ApprovalBundle(
        slvls=[SLVL(1, 1, ApprovalStatus.PENDING, None, DAY, DAY)],
        offsets=[
            Offset(2, 1, APPROVED, None, DAY, transaction_type=OffsetTransaction.CREDIT, hours=4),
        ],
        time_schedules=[TimeSchedule(3, 1, ApprovalStatus.REJECTED, None, DAY)],
    )

    assert ApprovalIndex.build(bundle).values_for(1, DAY) == ApprovalValues()


def test_overtime_routes_by_type_and_values_by_table():
    bundle = ApprovalBundle(
        overtimes=[
            Overtime(1, 1, APPROVED, None, DAY, overtime_type=OvertimeType.REGULAR.value, rate_multiplier=1.25),
            Overtime(2, 1, APPROVED, None, DAY, overtime_type=OvertimeType.REGULAR_HOLIDAY.value, rate_multiplier=2.6),
            Overtime(3, 1, APPROVED, None, DAY, overtime_type=OvertimeType.SPECIAL_HOLIDAY.value, rate_multiplier=1.69),
        ],
        slvls=[SLVL(4, 1, APPROVED, None, DAY, DAY, pay_type=PayType.WITHOUT_PAY)],
        cancel_rest_days=[CancelRestDay(5, 1, APPROVED, None, DAY)],
        offsets=[Offset(6, 1, APPROVED, None, DAY, transaction_type=OffsetTransaction.DEBIT, hours=3)],
    )

    values = ApprovalIndex.build(bundle).values_for(1, DAY)

    assert values.overtime == 1.25
    assert values.ot_reg_holiday == 2.6
    assert values.ot_special_holiday == 1.69
    assert values.slvl == 0.0
    assert values.restday is True
    assert values.offset == 3.0
    assert values.ct is False


def test_multi_day_records_are_clipped_to_window():
    leave = SLVL(1, 1, APPROVED, None, date(2025, 1, 5), date(2025, 1, 8), half_day=True)
    index = ApprovalIndex.build(ApprovalBundle(slvls=[leave]), within=(DAY, date(2025, 1, 7)))

    assert [(e, d) for e, d, _ in index.slvl_days()] == [(1, DAY), (1, date(2025, 1, 7))]
    assert index.values_for(1, DAY).slvl == 0.5
    assert index.values_for(1, date(2025, 1, 8)).slvl == 0.0


def test_missing_approval_resets_stale_field():
    row = ProcessedAttendance(attendance_id=1, employee_id=1, attendance_date=DAY, overtime=1.25, ct=True)
    values = ApprovalValues()

    assert values.differs_from(row)
    merged = values.apply_to(row)
    assert merged.overtime == 0.0 and merged.ct is False
    assert not values.differs_from(merged)


def test_travel_order_without_full_day_flag_counts_as_none():
    assert TravelOrder(1, 1, APPROVED, None, DAY, DAY, is_full_day=None).value == 0.0
    assert TravelOrder(2, 1, APPROVED, None, DAY, DAY, is_full_day=0).value == 0.0
    assert TravelOrder(3, 1, APPROVED, None, DAY, DAY).value == 1.0
