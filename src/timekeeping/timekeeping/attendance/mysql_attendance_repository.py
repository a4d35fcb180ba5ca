from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import AttendanceSource, PostingStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceMetrics, ProcessedAttendance
from .repository import AttendanceRepository

_COLUMNS = (
    "id, employee_id, attendance_date, day, time_in, break_out, break_in, time_out, next_day_timeout, "
    "is_nightshift, hours_worked, late_minutes, undertime_minutes, overtime, travel_order, slvl, ct, cs, "
    "restday, ob, holiday, ot_reg_holiday, ot_special_holiday, retromultiplier, `offset`, trip, source, "
    "status, remarks, posting_status, posted_at, posted_by"
)

_APPROVAL_FIELDS = (
    "travel_order",
    "slvl",
    "ct",
    "cs",
    "ot_reg_holiday",
    "ot_special_holiday",
    "restday",
    "retromultiplier",
    "overtime",
    "offset",
)


def _to_attendance(r: dict) -> ProcessedAttendance:
    return ProcessedAttendance(
        attendance_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        attendance_date=r["attendance_date"],
        day=r.get("day"),
        time_in=r.get("time_in"),
        break_out=r.get("break_out"),
        break_in=r.get("break_in"),
        time_out=r.get("time_out"),
        next_day_timeout=r.get("next_day_timeout"),
        is_nightshift=bool(r.get("is_nightshift")),
        hours_worked=as_float(r.get("hours_worked")),
        late_minutes=as_float(r.get("late_minutes")),
        undertime_minutes=as_float(r.get("undertime_minutes")),
        overtime=as_float(r.get("overtime")),
        travel_order=as_float(r.get("travel_order")),
        slvl=as_float(r.get("slvl")),
        ct=bool(r.get("ct")),
        cs=bool(r.get("cs")),
        restday=bool(r.get("restday")),
        ob=bool(r.get("ob")),
        holiday=as_float(r.get("holiday")),
        ot_reg_holiday=as_float(r.get("ot_reg_holiday")),
        ot_special_holiday=as_float(r.get("ot_special_holiday")),
        retromultiplier=as_float(r.get("retromultiplier")),
        offset=as_float(r.get("offset")),
        trip=as_float(r.get("trip")),
        source=AttendanceSource(r["source"]) if r.get("source") else None,
        status=r.get("status"),
        remarks=r.get("remarks"),
        posting_status=PostingStatus(r.get("posting_status") or PostingStatus.NOT_POSTED.value),
        posted_at=r.get("posted_at"),
        posted_by=r.get("posted_by"),
    )


def _insert_params(rec: ProcessedAttendance) -> tuple:
    return (
        rec.employee_id,
        rec.attendance_date,
        rec.day,
        rec.time_in,
        rec.break_out,
        rec.break_in,
        rec.time_out,
        rec.next_day_timeout,
        int(rec.is_nightshift),
        rec.hours_worked,
        rec.late_minutes,
        rec.undertime_minutes,
        rec.overtime,
        rec.travel_order,
        rec.slvl,
        int(rec.ct),
        int(rec.cs),
        int(rec.restday),
        int(rec.ob),
        rec.holiday,
        rec.ot_reg_holiday,
        rec.ot_special_holiday,
        rec.retromultiplier,
        rec.offset,
        rec.trip,
        rec.source.value if rec.source else None,
        rec.status,
        rec.remarks,
        rec.posting_status.value,
    )


_INSERT_SQL = """
    INSERT INTO processed_attendances(
        employee_id, attendance_date, day, time_in, break_out, break_in, time_out, next_day_timeout,
        is_nightshift, hours_worked, late_minutes, undertime_minutes, overtime, travel_order, slvl, ct, cs,
        restday, ob, holiday, ot_reg_holiday, ot_special_holiday, retromultiplier, `offset`, trip, source,
        status, remarks, posting_status
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _write_approval_fields(cur, records: Sequence[ProcessedAttendance]) -> None:
    assignments = ", ".join(f"`{f}`=%s" for f in _APPROVAL_FIELDS)
    sql = f"UPDATE processed_attendances SET {assignments} WHERE id=%s AND posting_status<>%s"
    rows = []
    for rec in records:
        values = tuple(int(v) if isinstance(v, bool) else v for v in (getattr(rec, f) for f in _APPROVAL_FIELDS))
        rows.append(values + (rec.attendance_id, PostingStatus.POSTED.value))
    cur.executemany(sql, rows)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[ProcessedAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM processed_attendances WHERE id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, attendance_date: date) -> Optional[ProcessedAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM processed_attendances WHERE employee_id=%s AND attendance_date=%s",
                (employee_id, attendance_date),
            )
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def list_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
        department: Optional[str] = None,
        include_posted: bool = True,
    ) -> Sequence[ProcessedAttendance]:
        sql = f"SELECT {_COLUMNS} FROM processed_attendances WHERE attendance_date BETWEEN %s AND %s"
        params: list = [start_date, end_date]
        if employee_ids:
            sql += f" AND employee_id IN ({in_clause(employee_ids)})"
            params.extend(employee_ids)
        if department:
            sql += " AND employee_id IN (SELECT id FROM employees WHERE department=%s)"
            params.append(department)
        if not include_posted:
            sql += " AND posting_status<>%s"
            params.append(PostingStatus.POSTED.value)
        sql += " ORDER BY attendance_date, employee_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_attendance(r) for r in fetchall(cur)]

    def create(self, record: ProcessedAttendance) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT_SQL, _insert_params(record))
            return int(cur.lastrowid)

    def create_many(self, records: Sequence[ProcessedAttendance]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_INSERT_SQL, [_insert_params(r) for r in records])
            return len(records)

    def update_times(self, record: ProcessedAttendance) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE processed_attendances
                SET day=%s, time_in=%s, break_out=%s, break_in=%s, time_out=%s, next_day_timeout=%s,
                    is_nightshift=%s, hours_worked=%s, trip=%s, source=%s
                WHERE id=%s AND posting_status<>%s
                """,
                (
                    record.day,
                    record.time_in,
                    record.break_out,
                    record.break_in,
                    record.time_out,
                    record.next_day_timeout,
                    int(record.is_nightshift),
                    record.hours_worked,
                    record.trip,
                    record.source.value if record.source else None,
                    record.attendance_id,
                    PostingStatus.POSTED.value,
                ),
            )
            return cur.rowcount > 0

    def update_approval_fields(self, records: Sequence[ProcessedAttendance]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            _write_approval_fields(cur, records)
            return len(records)

    def save_sync(self, *, created: Sequence[ProcessedAttendance], updated: Sequence[ProcessedAttendance]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if created:
                cur.executemany(_INSERT_SQL, [_insert_params(r) for r in created])
            if updated:
                _write_approval_fields(cur, updated)

    def update_metrics(self, changes: Mapping[int, AttendanceMetrics]) -> int:
        if not changes:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                UPDATE processed_attendances
                SET hours_worked=%s, late_minutes=%s, undertime_minutes=%s
                WHERE id=%s AND posting_status<>%s
                """,
                [
                    (m.hours_worked, m.late_minutes, m.undertime_minutes, attendance_id, PostingStatus.POSTED.value)
                    for attendance_id, m in changes.items()
                ],
            )
            return len(changes)

    def set_holiday(self, attendance_ids: Sequence[int], multiplier: float) -> int:
        if not attendance_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE processed_attendances
                SET holiday=%s, source=%s
                WHERE id IN ({in_clause(attendance_ids)}) AND posting_status<>%s
                """,
                (multiplier, AttendanceSource.HOLIDAY_SET.value, *attendance_ids, PostingStatus.POSTED.value),
            )
            return int(cur.rowcount)

    def delete_ids(self, attendance_ids: Sequence[int]) -> int:
        if not attendance_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM processed_attendances WHERE id IN ({in_clause(attendance_ids)}) AND posting_status<>%s",
                (*attendance_ids, PostingStatus.POSTED.value),
            )
            return int(cur.rowcount)
