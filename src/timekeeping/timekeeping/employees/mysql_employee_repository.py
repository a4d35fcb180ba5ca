from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    id, idno, biometric_id, first_name, last_name, department,
    job_status, cost_center, line, is_active
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["id"]),
        idno=str(r["idno"]),
        first_name=r.get("first_name") or "",
        last_name=r.get("last_name") or "",
        department=r.get("department"),
        biometric_id=str(r["biometric_id"]) if r.get("biometric_id") is not None else None,
        job_status=r.get("job_status"),
        cost_center=r.get("cost_center"),
        line=r.get("line"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {column}=%s LIMIT 1", (value,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("id", int(employee_id))

    def get_by_idno(self, idno: str) -> Optional[Employee]:
        return self._get_one("idno", str(idno))

    def get_by_biometric_id(self, biometric_id: str) -> Optional[Employee]:
        return self._get_one("biometric_id", str(biometric_id))

    def list_ids_by_department(self, department: str) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM employees WHERE department=%s", (department,))
            return [int(r["id"]) for r in fetchall(cur)]
