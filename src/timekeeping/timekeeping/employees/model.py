from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee identity as seen by timekeeping.

    Note: plain data object (no DB access). Employee maintenance lives elsewhere.
    """

    employee_id: int
    idno: str
    first_name: str
    last_name: str
    department: Optional[str] = None
    biometric_id: Optional[str] = None
    job_status: Optional[str] = None
    cost_center: Optional[str] = None
    line: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
