from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.attendance.model import ProcessedAttendance
from src.timekeeping.timekeeping.core.enums import PostingStatus, SummaryStatus
from src.timekeeping.timekeeping.core.exceptions import NotFoundError, ValidationError
from src.timekeeping.timekeeping.payroll.service import PayrollPostingService


class InMemorySummaryRepo:
    def __init__(self, attendance):
        self._attendance = attendance
        self._next_id = 1
        self.summaries = {}

    def get_by_id(self, summary_id):
        return self.summaries.get(summary_id)

    def find(self, *, employee_id, year, month, period_type):
        for s in self.summaries.values():
            if (s.employee_id, s.year, s.month, s.period_type) == (employee_id, year, month, period_type):
                return s
        return None

    def save_posting(self, summary, attendance_ids):
        sid = summary.summary_id or self._next_id
        if sid == self._next_id:
            self._next_id += 1
        self.summaries[sid] = replace(summary, summary_id=sid)
        for rid in attendance_ids:
            self._attendance._store(
                replace(
                    self._attendance.rows[rid],
                    posting_status=PostingStatus.POSTED,
                    posted_by=summary.posted_by,
                    posted_at=summary.posted_at,
                )
            )
        return sid, len(attendance_ids)

    def revert_posting(self, summary):
        self.summaries[summary.summary_id] = replace(summary, status=SummaryStatus.DRAFT, posted_by=None, posted_at=None)
        count = 0
        for r in list(self._attendance.rows.values()):
            if r.employee_id == summary.employee_id and summary.period_start <= r.attendance_date <= summary.period_end:
                self._attendance._store(replace(r, posting_status=PostingStatus.NOT_POSTED, posted_by=None, posted_at=None))
                count += 1
        return count


def _punched(employee_id, day, **kwargs):
    return ProcessedAttendance(
        attendance_id=None,
        employee_id=employee_id,
        attendance_date=date(2025, 1, day),
        time_in=datetime(2025, 1, day, 8, 0),
        **kwargs,
    )


@pytest.fixture
def summary_repo(attendance_repo):
    return InMemorySummaryRepo(attendance_repo)


@pytest.fixture
def service(attendance_repo, employees_repo, summary_repo, fixed_now):
    return PayrollPostingService(attendance_repo, employees_repo, summary_repo, clock=lambda: fixed_now)


@pytest.fixture
def seeded(attendance_repo):
    attendance_repo.create(_punched(1, 6, overtime=1.0))
    attendance_repo.create(_punched(1, 7))
    attendance_repo.create(_punched(2, 6))
    attendance_repo.create(_punched(2, 20))  # outside the first half
    return attendance_repo


def test_preview_groups_by_employee(service, seeded):
    preview = service.preview(2025, 1, "1st_half")

    assert preview.employee_count == 2
    assert preview.attendance_count == 3
    assert preview.totals["days_worked"] == 3.0
    assert preview.totals["ot_hours"] == 1.0
    assert preview.totals["period_label"] == "1-15"
    first = preview.summaries[0]
    assert first["employee_no"] == "E001"
    assert first["record_count"] == 2
    assert first["existing_summary"] is None
    assert first["will_update"] is False


def test_preview_filters_by_department(service, seeded):
    preview = service.preview(2025, 1, "1st_half", department="HR")
    assert [s["employee_no"] for s in preview.summaries] == ["E002"]


def test_post_locks_rows_and_stores_summaries(service, seeded, summary_repo, fixed_now):
    result = service.post(2025, 1, "1st_half", posted_by=9)

    assert result.posted_count == 2
    assert result.updated_count == 3
    assert result.errors == []
    assert all(s.is_posted and s.posted_at == fixed_now for s in summary_repo.summaries.values())
    locked = [r for r in seeded.rows.values() if r.is_posted]
    assert len(locked) == 3
    assert all(r.posted_by == 9 for r in locked)
    assert seeded.get_for_employee_and_date(2, date(2025, 1, 20)).posting_status == PostingStatus.NOT_POSTED


def test_post_without_rows_raises(service):
    with pytest.raises(NotFoundError):
        service.post(2025, 1, "1st_half")


def test_post_skips_employee_with_posted_summary(service, seeded, summary_repo):
    service.post(2025, 1, "1st_half", employee_ids=[1])
    seeded.create(_punched(1, 8))

    result = service.post(2025, 1, "1st_half")

    assert result.posted_count == 1
    assert len(result.errors) == 1
    assert "E001" in result.errors[0]


def test_unpost_unlocks_rows(service, seeded, summary_repo):
    service.post(2025, 1, "1st_half", employee_ids=[1])
    (summary_id,) = summary_repo.summaries

    unlocked = service.unpost(summary_id)

    assert unlocked == 2
    assert summary_repo.get_by_id(summary_id).status == SummaryStatus.DRAFT
    assert not any(r.is_posted for r in seeded.rows.values())

    # a draft summary is picked up again on the next posting
    preview = service.preview(2025, 1, "1st_half", employee_ids=[1])
    assert preview.summaries[0]["will_update"] is True


def test_unpost_errors(service, seeded, summary_repo):
    with pytest.raises(NotFoundError):
        service.unpost(1)
    service.post(2025, 1, "1st_half", employee_ids=[2])
    (summary_id,) = summary_repo.summaries
    service.unpost(summary_id)
    with pytest.raises(ValidationError):
        service.unpost(summary_id)


def test_invalid_period_type(service):
    with pytest.raises(ValidationError):
        service.preview(2025, 1, "weekly")
