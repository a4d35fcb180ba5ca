from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import PeriodType
from .model import PayrollSummary


class PayrollSummaryRepository(Protocol):
    def get_by_id(self, summary_id: int) -> Optional[PayrollSummary]:
        raise NotImplementedError

    def find(self, *, employee_id: int, year: int, month: int, period_type: PeriodType) -> Optional[PayrollSummary]:
        raise NotImplementedError

    def save_posting(self, summary: PayrollSummary, attendance_ids: Sequence[int]) -> Tuple[int, int]:
        """Upsert the posted summary and lock its attendance rows in one transaction.

        Returns the summary id and the number of rows locked.
        """

        raise NotImplementedError

    def revert_posting(self, summary: PayrollSummary) -> int:
        """Return the summary to draft and unlock its period's rows; returns rows unlocked."""

        raise NotImplementedError
