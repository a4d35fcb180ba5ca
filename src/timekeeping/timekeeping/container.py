from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .approvals.mysql_approval_repository import MySQLApprovalRepository
from .attendance.factory import ShiftStrategyFactory
from .attendance.hours import HoursCalculator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.rules import TimekeepingRules
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .payroll.calculator.standard_calculator import StandardSummaryCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollSummaryRepository
from .payroll.service import PayrollPostingService
from .punches.grouper import PunchGrouper
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.service import PunchService
from .sync.service import AttendanceSyncService


@dataclass(frozen=True)
class Container:
    attendance_service: AttendanceService
    sync_service: AttendanceSyncService
    punch_service: PunchService
    payroll_service: PayrollPostingService


def build_container(*, db_config: dict, rules: Optional[TimekeepingRules] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    rules = rules or TimekeepingRules()

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    approvals_repo = MySQLApprovalRepository(conn)
    punches_repo = MySQLPunchRepository(conn)
    summaries_repo = MySQLPayrollSummaryRepository(conn)

    calculator = HoursCalculator(rules, shift_factory=ShiftStrategyFactory())

    return Container(
        attendance_service=AttendanceService(attendance_repo, employees_repo, calculator=calculator),
        sync_service=AttendanceSyncService(attendance_repo, approvals_repo),
        punch_service=PunchService(
            punches_repo,
            attendance_repo,
            employees_repo,
            grouper=PunchGrouper(rules, calculator=calculator),
        ),
        payroll_service=PayrollPostingService(
            attendance_repo,
            employees_repo,
            summaries_repo,
            calculator=StandardSummaryCalculator(),
        ),
    )
