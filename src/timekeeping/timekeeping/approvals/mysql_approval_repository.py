from __future__ import annotations

from datetime import date
from typing import Callable, Optional, TypeVar

from ..core.enums import ApprovalStatus, OffsetTransaction, PayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall
from .model import (
    SLVL,
    ApprovalBundle,
    CancelRestDay,
    ChangeOffSchedule,
    Offset,
    Overtime,
    Retro,
    TimeSchedule,
    TravelOrder,
)
from .repository import ApprovalRepository

T = TypeVar("T")


def _common(r: dict) -> dict:
    return {
        "id": int(r["id"]),
        "employee_id": int(r["employee_id"]),
        "status": ApprovalStatus(r["status"]),
        "updated_at": r.get("updated_at"),
    }


class MySQLApprovalRepository(ApprovalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(
        self,
        cur,
        *,
        table: str,
        columns: str,
        overlap_sql: str,
        overlap_params: tuple,
        employee_id: Optional[int],
        build: Callable[[dict], T],
    ) -> list[T]:
        sql = f"SELECT id, employee_id, status, updated_at, {columns} FROM {table} WHERE status=%s AND {overlap_sql}"
        params: list = [ApprovalStatus.APPROVED.value, *overlap_params]
        if employee_id is not None:
            sql += " AND employee_id=%s"
            params.append(employee_id)
        sql += " ORDER BY employee_id, id"
        cur.execute(sql, tuple(params))
        return [build(r) for r in fetchall(cur)]

    def load_approved(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None) -> ApprovalBundle:
        span = (start_date, end_date)
        ranged = (end_date, start_date)

        with db_cursor(self._conn_factory) as (_, cur):
            travel_orders = self._select(
                cur,
                table="travel_orders",
                columns="start_date, end_date, is_full_day",
                overlap_sql="start_date<=%s AND end_date>=%s",
                overlap_params=ranged,
                employee_id=employee_id,
                build=lambda r: TravelOrder(
                    **_common(r),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    is_full_day=None if r.get("is_full_day") is None else int(r["is_full_day"]),
                ),
            )
            slvls = self._select(
                cur,
                table="slvls",
                columns="start_date, end_date, pay_type, half_day",
                overlap_sql="start_date<=%s AND end_date>=%s",
                overlap_params=ranged,
                employee_id=employee_id,
                build=lambda r: SLVL(
                    **_common(r),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    pay_type=PayType(r["pay_type"]),
                    half_day=bool(r.get("half_day")),
                ),
            )
            time_schedules = self._select(
                cur,
                table="time_schedules",
                columns="effective_date",
                overlap_sql="effective_date BETWEEN %s AND %s",
                overlap_params=span,
                employee_id=employee_id,
                build=lambda r: TimeSchedule(**_common(r), effective_date=r["effective_date"]),
            )
            change_off_schedules = self._select(
                cur,
                table="change_off_schedules",
                columns="requested_date",
                overlap_sql="requested_date BETWEEN %s AND %s",
                overlap_params=span,
                employee_id=employee_id,
                build=lambda r: ChangeOffSchedule(**_common(r), requested_date=r["requested_date"]),
            )
            overtimes = self._select(
                cur,
                table="overtimes",
                columns="`date`, overtime_type, rate_multiplier",
                overlap_sql="`date` BETWEEN %s AND %s",
                overlap_params=span,
                employee_id=employee_id,
                build=lambda r: Overtime(
                    **_common(r),
                    date=r["date"],
                    overtime_type=str(r.get("overtime_type") or "regular"),
                    rate_multiplier=as_float(r.get("rate_multiplier")),
                ),
            )
            cancel_rest_days = self._select(
                cur,
                table="cancel_rest_days",
                columns="rest_day_date",
                overlap_sql="rest_day_date BETWEEN %s AND %s",
                overlap_params=span,
                employee_id=employee_id,
                build=lambda r: CancelRestDay(**_common(r), rest_day_date=r["rest_day_date"]),
            )
            retros = self._select(
                cur,
                table="retros",
                columns="retro_date, multiplier_rate, hours_days",
                overlap_sql="retro_date BETWEEN %s AND %s",
                overlap_params=span,
                employee_id=employee_id,
                build=lambda r: Retro(
                    **_common(r),
                    retro_date=r["retro_date"],
                    multiplier_rate=as_float(r.get("multiplier_rate")),
                    hours_days=as_float(r.get("hours_days")),
                ),
            )
            offsets = self._select(
                cur,
                table="offsets",
                columns="`date`, transaction_type, hours",
                overlap_sql="`date` BETWEEN %s AND %s AND transaction_type=%s",
                overlap_params=(*span, OffsetTransaction.DEBIT.value),
                employee_id=employee_id,
                build=lambda r: Offset(
                    **_common(r),
                    date=r["date"],
                    transaction_type=OffsetTransaction(r["transaction_type"]),
                    hours=as_float(r.get("hours")),
                ),
            )

        return ApprovalBundle(
            travel_orders=travel_orders,
            slvls=slvls,
            time_schedules=time_schedules,
            change_off_schedules=change_off_schedules,
            overtimes=overtimes,
            cancel_rest_days=cancel_rest_days,
            retros=retros,
            offsets=offsets,
        )
