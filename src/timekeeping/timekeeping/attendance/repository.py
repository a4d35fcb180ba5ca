from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from .model import AttendanceMetrics, ProcessedAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[ProcessedAttendance]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, attendance_date: date) -> Optional[ProcessedAttendance]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
        department: Optional[str] = None,
        include_posted: bool = True,
    ) -> Sequence[ProcessedAttendance]:
        raise NotImplementedError

    def create(self, record: ProcessedAttendance) -> int:
        raise NotImplementedError

    def create_many(self, records: Sequence[ProcessedAttendance]) -> int:
        """Insert all rows in one transaction; returns the number inserted."""

        raise NotImplementedError

    def update_times(self, record: ProcessedAttendance) -> bool:
        """Persist time fields, night-shift flag, hours, trip and source."""

        raise NotImplementedError

    def update_approval_fields(self, records: Sequence[ProcessedAttendance]) -> int:
        """Persist sync-derived fields for every row in one transaction."""

        raise NotImplementedError

    def save_sync(self, *, created: Sequence[ProcessedAttendance], updated: Sequence[ProcessedAttendance]) -> None:
        """Insert seeded rows and persist merged approval fields in one transaction."""

        raise NotImplementedError

    def update_metrics(self, changes: Mapping[int, AttendanceMetrics]) -> int:
        raise NotImplementedError

    def set_holiday(self, attendance_ids: Sequence[int], multiplier: float) -> int:
        raise NotImplementedError

    def delete_ids(self, attendance_ids: Sequence[int]) -> int:
        raise NotImplementedError
