from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_idno(self, idno: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_biometric_id(self, biometric_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_ids_by_department(self, department: str) -> Sequence[int]:
        raise NotImplementedError
