from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.attendance.model import ProcessedAttendance
from src.timekeeping.timekeeping.core.enums import AttendanceSource, PostingStatus
from src.timekeeping.timekeeping.core.exceptions import ValidationError
from src.timekeeping.timekeeping.punches.model import Punch
from src.timekeeping.timekeeping.punches.service import PunchService


class InMemoryPunchRepo:
    def __init__(self, punches=()):
        self.punches = list(punches)

    def exists(self, *, employee_id, biometric_id, timestamp):
        return any(
            p.employee_id == employee_id and p.biometric_id == biometric_id and p.timestamp == timestamp
            for p in self.punches
        )

    def save_many(self, punches):
        self.punches.extend(punches)
        return len(punches)

    def list_between(self, start, end):
        found = [p for p in self.punches if start <= p.timestamp < end]
        return sorted(found, key=lambda p: (p.employee_id, p.timestamp))


@pytest.fixture
def punch_repo():
    return InMemoryPunchRepo()


@pytest.fixture
def service(punch_repo, attendance_repo, employees_repo):
    return PunchService(punch_repo, attendance_repo, employees_repo)


CSV_HEADER = "BiometricID,DateTime,Status,Type"


def test_import_saves_punches_and_builds_attendance(service, punch_repo, attendance_repo):
    text = "\n".join(
        [
            CSV_HEADER,
            "101,2025-01-06 08:10:00,0,FP",
            "101,2025-01-06 17:00:00,1,FP",
            "101,2025-01-06 17:00:00,1,FP",
            "102,01/06/2025 22:00:00,0,FP",
            "102,01/07/2025 06:00:00,1,FP",
            "999,2025-01-06 08:00:00,0,FP",
            "101,yesterday,0,FP",
        ]
    )

    result = service.import_csv(text)

    assert result.saved == 4
    assert result.skipped == 1
    assert len(result.errors) == 2
    assert result.created == 2
    assert len(punch_repo.punches) == 4

    day = attendance_repo.get_for_employee_and_date(1, date(2025, 1, 6))
    assert day.time_in == datetime(2025, 1, 6, 8, 10)
    assert day.late_minutes == 10
    assert day.hours_worked == pytest.approx(8.83)

    night = attendance_repo.get_for_employee_and_date(2, date(2025, 1, 6))
    assert night.is_nightshift is True
    assert night.next_day_timeout == datetime(2025, 1, 7, 6, 0)
    assert attendance_repo.get_for_employee_and_date(2, date(2025, 1, 7)) is None


def test_reimport_skips_stored_punches(service, punch_repo):
    text = f"{CSV_HEADER}\n101,2025-01-06 08:00:00,0,FP\n"
    service.import_csv(text)

    again = service.import_csv(text)

    assert again.saved == 0
    assert again.skipped == 1
    assert len(punch_repo.punches) == 1


def test_process_range_keeps_manual_and_posted_rows(service, punch_repo, attendance_repo):
    manual = attendance_repo.create(
        ProcessedAttendance(
            attendance_id=None,
            employee_id=1,
            attendance_date=date(2025, 1, 6),
            time_in=datetime(2025, 1, 6, 9, 0),
            source=AttendanceSource.MANUAL_EDIT,
        )
    )
    posted = attendance_repo.create(
        ProcessedAttendance(
            attendance_id=None,
            employee_id=2,
            attendance_date=date(2025, 1, 6),
            posting_status=PostingStatus.POSTED,
        )
    )
    punch_repo.save_many(
        [
            Punch(employee_id=1, biometric_id="101", timestamp=datetime(2025, 1, 6, 8, 0)),
            Punch(employee_id=2, biometric_id="102", timestamp=datetime(2025, 1, 6, 8, 0)),
        ]
    )

    assert service.process_range(date(2025, 1, 6), date(2025, 1, 6)) == (0, 0)
    assert attendance_repo.get_by_id(manual).time_in == datetime(2025, 1, 6, 9, 0)
    assert attendance_repo.get_by_id(posted).time_in is None


def test_process_range_updates_biometric_row_and_keeps_trip(service, punch_repo, attendance_repo):
    rid = attendance_repo.create(
        ProcessedAttendance(
            attendance_id=None,
            employee_id=1,
            attendance_date=date(2025, 1, 6),
            time_in=datetime(2025, 1, 6, 8, 0),
            trip=2.0,
            source=AttendanceSource.BIOMETRIC,
        )
    )
    punch_repo.save_many(
        [
            Punch(employee_id=1, biometric_id="101", timestamp=datetime(2025, 1, 6, 8, 0)),
            Punch(employee_id=1, biometric_id="101", timestamp=datetime(2025, 1, 6, 17, 0)),
        ]
    )

    assert service.process_range(date(2025, 1, 6), date(2025, 1, 6)) == (0, 1)
    row = attendance_repo.get_by_id(rid)
    assert row.time_out == datetime(2025, 1, 6, 17, 0)
    assert row.trip == 2.0
    assert row.hours_worked == 9.0
    assert row.undertime_minutes == 0


def test_process_range_closes_stored_night_shift_from_day_before(service, punch_repo, attendance_repo):
    rid = attendance_repo.create(
        ProcessedAttendance(
            attendance_id=None,
            employee_id=2,
            attendance_date=date(2025, 1, 5),
            time_in=datetime(2025, 1, 5, 22, 0),
            is_nightshift=True,
            source=AttendanceSource.BIOMETRIC,
        )
    )
    punch_repo.save_many([Punch(employee_id=2, biometric_id="102", timestamp=datetime(2025, 1, 6, 6, 0))])

    assert service.process_range(date(2025, 1, 6), date(2025, 1, 6)) == (0, 1)
    row = attendance_repo.get_by_id(rid)
    assert row.next_day_timeout == datetime(2025, 1, 6, 6, 0)
    assert row.hours_worked == 8.0


def test_process_range_rejects_reversed_dates(service):
    with pytest.raises(ValidationError):
        service.process_range(date(2025, 1, 7), date(2025, 1, 6))


def test_consecutive_night_imports_do_not_reuse_the_stored_timeout(service, attendance_repo):
    service.import_csv(f"{CSV_HEADER}\n102,2025-01-06 22:00:00,0,FP\n102,2025-01-07 06:00:00,1,FP\n")
    first = attendance_repo.get_for_employee_and_date(2, date(2025, 1, 6))

    result = service.import_csv(f"{CSV_HEADER}\n102,2025-01-07 22:00:00,0,FP\n102,2025-01-08 06:00:00,1,FP\n")

    assert (result.created, result.updated) == (1, 0)
    assert attendance_repo.get_for_employee_and_date(2, date(2025, 1, 6)) == first
    second = attendance_repo.get_for_employee_and_date(2, date(2025, 1, 7))
    assert second.time_in == datetime(2025, 1, 7, 22, 0)
    assert second.next_day_timeout == datetime(2025, 1, 8, 6, 0)
    assert second.hours_worked == 8.0
