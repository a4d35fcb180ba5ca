from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import ApprovalBundle


class ApprovalRepository(Protocol):
    def load_approved(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None) -> ApprovalBundle:
        """Approved records of every approval table that overlap the range."""

        raise NotImplementedError
