from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.approvals.model import SLVL, ApprovalBundle, Overtime, TravelOrder
from src.timekeeping.timekeeping.attendance.model import ProcessedAttendance
from src.timekeeping.timekeeping.core.enums import ApprovalStatus, AttendanceSource, PostingStatus
from src.timekeeping.timekeeping.core.exceptions import NotFoundError, PostedRecordError
from src.timekeeping.timekeeping.sync.service import AttendanceSyncService

DAY = date(2025, 1, 6)
APPROVED = ApprovalStatus.APPROVED


class StaticApprovalRepo:
    def __init__(self, bundle):
        self.bundle = bundle
        self.calls = []

    def load_approved(self, *, start_date, end_date, employee_id=None):
        self.calls.append((start_date, end_date, employee_id))
        return self.bundle


def _service(attendance_repo, bundle, now):
    return AttendanceSyncService(attendance_repo, StaticApprovalRepo(bundle), clock=lambda: now)


def test_sync_seeds_slvl_rows_with_merged_values(attendance_repo, fixed_now):
    bundle = ApprovalBundle(
        slvls=[SLVL(1, 2, APPROVED, None, DAY, date(2025, 1, 7), half_day=True)],
        travel_orders=[TravelOrder(2, 2, APPROVED, None, DAY, DAY, is_full_day=0)],
    )
    service = _service(attendance_repo, bundle, fixed_now)

    result = service.sync(DAY, date(2025, 1, 7))

    assert result.created_records == 2
    assert result.synced_count == 0
    assert result.total_processed == 2
    assert attendance_repo.save_sync_calls == 1

    seeded = attendance_repo.get_for_employee_and_date(2, DAY)
    assert seeded.source == AttendanceSource.SLVL_SYNC
    assert seeded.time_in == datetime(2025, 1, 6, 8, 0)
    assert seeded.time_out == datetime(2025, 1, 6, 17, 0)
    assert seeded.hours_worked == 4.0
    assert seeded.slvl == 0.5
    assert seeded.status == "approved"
    assert seeded.travel_order == 0.0


def test_second_run_is_a_no_op(attendance_repo, fixed_now):
    bundle = ApprovalBundle(
        slvls=[SLVL(1, 1, APPROVED, None, DAY, DAY)],
        overtimes=[Overtime(2, 2, APPROVED, None, DAY, rate_multiplier=1.25)],
    )
    attendance_repo.create(ProcessedAttendance(attendance_id=None, employee_id=2, attendance_date=DAY))
    service = _service(attendance_repo, bundle, fixed_now)

    first = service.sync(DAY, DAY)
    snapshot = dict(attendance_repo.rows)
    second = service.sync(DAY, DAY)

    assert (first.synced_count, first.created_records) == (1, 1)
    assert (second.synced_count, second.created_records) == (0, 0)
    assert second.total_processed == 2
    assert attendance_repo.rows == snapshot


def test_sync_skips_posted_rows(attendance_repo, fixed_now):
    posted = attendance_repo.create(
        ProcessedAttendance(
            attendance_id=None, employee_id=1, attendance_date=DAY, posting_status=PostingStatus.POSTED
        )
    )
    bundle = ApprovalBundle(overtimes=[Overtime(1, 1, APPROVED, None, DAY, rate_multiplier=1.25)])

    result = _service(attendance_repo, bundle, fixed_now).sync(DAY, DAY)

    assert result.synced_count == 0
    assert result.total_processed == 0
    assert attendance_repo.get_by_id(posted).overtime == 0.0


def test_existing_row_blocks_slvl_seed(attendance_repo, fixed_now):
    rid = attendance_repo.create(
        ProcessedAttendance(attendance_id=None, employee_id=1, attendance_date=DAY, time_in=datetime(2025, 1, 6, 8, 0))
    )
    bundle = ApprovalBundle(slvls=[SLVL(1, 1, APPROVED, None, DAY, DAY)])

    result = _service(attendance_repo, bundle, fixed_now).sync(DAY, DAY)

    assert result.created_records == 0
    assert result.synced_count == 1
    assert len(attendance_repo.rows) == 1
    assert attendance_repo.get_by_id(rid).slvl == 1.0


def test_default_range_is_current_cutoff(attendance_repo, fixed_now):
    repo = StaticApprovalRepo(ApprovalBundle())
    service = AttendanceSyncService(attendance_repo, repo, clock=lambda: fixed_now)

    assert service.default_range() == (date(2025, 1, 16), date(2025, 1, 31))
    service.sync()
    assert repo.calls == [(date(2025, 1, 16), date(2025, 1, 31), None)]


def test_sync_individual(attendance_repo, fixed_now):
    rid = attendance_repo.create(ProcessedAttendance(attendance_id=None, employee_id=1, attendance_date=DAY))
    bundle = ApprovalBundle(overtimes=[Overtime(1, 1, APPROVED, None, DAY, rate_multiplier=1.5)])
    service = _service(attendance_repo, bundle, fixed_now)

    row, updated = service.sync_individual(rid)
    assert updated is True
    assert row.overtime == 1.5
    assert attendance_repo.get_by_id(rid).overtime == 1.5

    _, again = service.sync_individual(rid)
    assert again is False


def test_sync_individual_errors(attendance_repo, fixed_now):
    service = _service(attendance_repo, ApprovalBundle(), fixed_now)
    with pytest.raises(NotFoundError):
        service.sync_individual(404)

    posted = attendance_repo.create(
        ProcessedAttendance(
            attendance_id=None, employee_id=1, attendance_date=DAY, posting_status=PostingStatus.POSTED
        )
    )
    with pytest.raises(PostedRecordError):
        service.sync_individual(posted)
