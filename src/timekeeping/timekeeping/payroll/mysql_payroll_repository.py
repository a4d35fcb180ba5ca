from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..core.enums import PeriodType, PostingStatus, SummaryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchone, in_clause
from .model import TOTAL_FIELDS, PayrollSummary
from .repository import PayrollSummaryRepository

_IDENTITY = (
    "employee_id",
    "employee_no",
    "employee_name",
    "department",
    "cost_center",
    "line",
    "period_start",
    "period_end",
    "period_type",
    "year",
    "month",
)
_FLAGS = ("has_ct", "has_cs", "has_ob")
_WRITE_COLUMNS = _IDENTITY + TOTAL_FIELDS + _FLAGS + ("status", "posted_by", "posted_at")


def _to_summary(r: dict) -> PayrollSummary:
    return PayrollSummary(
        summary_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        employee_no=str(r.get("employee_no") or ""),
        employee_name=str(r.get("employee_name") or ""),
        department=r.get("department"),
        cost_center=r.get("cost_center"),
        line=r.get("line"),
        period_start=r["period_start"],
        period_end=r["period_end"],
        period_type=PeriodType(r["period_type"]),
        year=int(r["year"]),
        month=int(r["month"]),
        has_ct=bool(r.get("has_ct")),
        has_cs=bool(r.get("has_cs")),
        has_ob=bool(r.get("has_ob")),
        status=SummaryStatus(r["status"]),
        posted_by=r.get("posted_by"),
        posted_at=r.get("posted_at"),
        **{f: as_float(r.get(f)) for f in TOTAL_FIELDS},
    )


def _params(s: PayrollSummary) -> tuple:
    values = []
    for col in _WRITE_COLUMNS:
        v = getattr(s, col)
        if isinstance(v, (PeriodType, SummaryStatus)):
            v = v.value
        elif isinstance(v, bool):
            v = int(v)
        values.append(v)
    return tuple(values)


class MySQLPayrollSummaryRepository(PayrollSummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, summary_id: int) -> Optional[PayrollSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM payroll_summaries WHERE id=%s", (summary_id,))
            r = fetchone(cur)
            return _to_summary(r) if r else None

    def find(self, *, employee_id: int, year: int, month: int, period_type: PeriodType) -> Optional[PayrollSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM payroll_summaries
                WHERE employee_id=%s AND year=%s AND month=%s AND period_type=%s
                """,
                (employee_id, year, month, PeriodType(period_type).value),
            )
            r = fetchone(cur)
            return _to_summary(r) if r else None

    def save_posting(self, summary: PayrollSummary, attendance_ids: Sequence[int]) -> Tuple[int, int]:
        columns = ", ".join(f"`{c}`" for c in _WRITE_COLUMNS)
        placeholders = ", ".join(["%s"] * len(_WRITE_COLUMNS))
        updates = ", ".join(f"`{c}`=VALUES(`{c}`)" for c in _WRITE_COLUMNS if c != "employee_id")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO payroll_summaries({columns}) VALUES({placeholders})
                ON DUPLICATE KEY UPDATE id=LAST_INSERT_ID(id), {updates}
                """,
                _params(summary),
            )
            summary_id = int(cur.lastrowid)
            locked = 0
            if attendance_ids:
                cur.execute(
                    f"""
                    UPDATE processed_attendances
                    SET posting_status=%s, posted_at=%s, posted_by=%s
                    WHERE id IN ({in_clause(attendance_ids)})
                    """,
                    (PostingStatus.POSTED.value, summary.posted_at, summary.posted_by, *attendance_ids),
                )
                locked = int(cur.rowcount)
            return summary_id, locked

    def revert_posting(self, summary: PayrollSummary) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_summaries SET status=%s, posted_by=NULL, posted_at=NULL WHERE id=%s",
                (SummaryStatus.DRAFT.value, summary.summary_id),
            )
            cur.execute(
                """
                UPDATE processed_attendances
                SET posting_status=%s, posted_at=NULL, posted_by=NULL
                WHERE employee_id=%s AND attendance_date BETWEEN %s AND %s
                """,
                (PostingStatus.NOT_POSTED.value, summary.employee_id, summary.period_start, summary.period_end),
            )
            return int(cur.rowcount)
