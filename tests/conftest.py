from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from src.timekeeping.timekeeping.core.enums import AttendanceSource
from src.timekeeping.timekeeping.employees.model import Employee


class InMemoryAttendanceRepo:
    def __init__(self, rows=(), *, departments=None):
        self._next_id = 1
        self.rows = {}
        self.departments = departments or {}
        self.save_sync_calls = 0
        for r in rows:
            self.create(r)

    def _store(self, row):
        self.rows[row.attendance_id] = row

    def get_by_id(self, attendance_id):
        return self.rows.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, attendance_date):
        for r in self.rows.values():
            if r.employee_id == employee_id and r.attendance_date == attendance_date:
                return r
        return None

    def list_range(self, *, start_date, end_date, employee_ids=None, department=None, include_posted=True):
        out = []
        for r in self.rows.values():
            if not (start_date <= r.attendance_date <= end_date):
                continue
            if employee_ids and r.employee_id not in employee_ids:
                continue
            if department and self.departments.get(r.employee_id) != department:
                continue
            if not include_posted and r.is_posted:
                continue
            out.append(r)
        return sorted(out, key=lambda r: (r.attendance_date, r.employee_id))

    def create(self, record):
        rid = self._next_id
        self._next_id += 1
        self._store(replace(record, attendance_id=rid))
        return rid

    def create_many(self, records):
        for r in records:
            self.create(r)
        return len(records)

    def update_times(self, record):
        current = self.rows.get(record.attendance_id)
        if not current or current.is_posted:
            return False
        self._store(
            replace(
                current,
                day=record.day,
                time_in=record.time_in,
                break_out=record.break_out,
                break_in=record.break_in,
                time_out=record.time_out,
                next_day_timeout=record.next_day_timeout,
                is_nightshift=record.is_nightshift,
                hours_worked=record.hours_worked,
                trip=record.trip,
                source=record.source,
            )
        )
        return True

    def update_approval_fields(self, records):
        for rec in records:
            current = self.rows[rec.attendance_id]
            if current.is_posted:
                continue
            self._store(
                replace(
                    current,
                    travel_order=rec.travel_order,
                    slvl=rec.slvl,
                    ct=rec.ct,
                    cs=rec.cs,
                    ot_reg_holiday=rec.ot_reg_holiday,
                    ot_special_holiday=rec.ot_special_holiday,
                    restday=rec.restday,
                    retromultiplier=rec.retromultiplier,
                    overtime=rec.overtime,
                    offset=rec.offset,
                )
            )
        return len(records)

    def save_sync(self, *, created, updated):
        self.save_sync_calls += 1
        self.create_many(created)
        self.update_approval_fields(updated)

    def update_metrics(self, changes):
        for rid, m in changes.items():
            self._store(
                replace(
                    self.rows[rid],
                    hours_worked=m.hours_worked,
                    late_minutes=m.late_minutes,
                    undertime_minutes=m.undertime_minutes,
                )
            )
        return len(changes)

    def set_holiday(self, attendance_ids, multiplier):
        for rid in attendance_ids:
            self._store(replace(self.rows[rid], holiday=multiplier, source=AttendanceSource.HOLIDAY_SET))
        return len(attendance_ids)

    def delete_ids(self, attendance_ids):
        count = 0
        for rid in attendance_ids:
            if rid in self.rows and not self.rows[rid].is_posted:
                del self.rows[rid]
                count += 1
        return count


class InMemoryEmployeeRepo:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def get_by_idno(self, idno):
        return next((e for e in self._by_id.values() if e.idno == idno), None)

    def get_by_biometric_id(self, biometric_id):
        return next((e for e in self._by_id.values() if e.biometric_id == biometric_id), None)

    def list_ids_by_department(self, department):
        return [e.employee_id for e in self._by_id.values() if e.department == department]


@pytest.fixture
def fixed_now():
    return datetime(2025, 1, 20, 9, 0, 0)


@pytest.fixture
def employees_repo():
    return InMemoryEmployeeRepo(
        [
            Employee(employee_id=1, idno="E001", first_name="Ana", last_name="Cruz", department="Ops", biometric_id="101"),
            Employee(employee_id=2, idno="E002", first_name="Ben", last_name="Reyes", department="HR", biometric_id="102"),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendanceRepo(departments={1: "Ops", 2: "HR"})
