from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import ProcessedAttendance
from ...employees.model import Employee
from ..model import PayrollSummary
from ..periods import CutoffPeriod


class SummaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll summaries)."""

    @abstractmethod
    def summarize(self, employee: Employee, rows: Sequence[ProcessedAttendance], period: CutoffPeriod) -> PayrollSummary:
        raise NotImplementedError
