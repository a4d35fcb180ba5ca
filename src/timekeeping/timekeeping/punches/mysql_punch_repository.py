from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Punch
from .repository import PunchRepository


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, *, employee_id: int, biometric_id: str, timestamp: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id FROM attendance_logs
                WHERE employee_id=%s AND biometric_id=%s AND `timestamp`=%s
                LIMIT 1
                """,
                (employee_id, biometric_id, timestamp),
            )
            return fetchone(cur) is not None

    def save_many(self, punches: Sequence[Punch]) -> int:
        if not punches:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_logs(employee_id, biometric_id, `timestamp`, device_id, status, `type`)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                [(p.employee_id, p.biometric_id, p.timestamp, p.device_id, p.status, p.type) for p in punches],
            )
            return len(punches)

    def list_between(self, start: datetime, end: datetime) -> Sequence[Punch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, biometric_id, `timestamp`, device_id, status, `type`
                FROM attendance_logs
                WHERE `timestamp`>=%s AND `timestamp`<%s
                ORDER BY employee_id, `timestamp`
                """,
                (start, end),
            )
            return [
                Punch(
                    employee_id=int(r["employee_id"]),
                    biometric_id=str(r["biometric_id"]),
                    timestamp=r["timestamp"],
                    device_id=r.get("device_id"),
                    status=r.get("status"),
                    type=r.get("type"),
                )
                for r in fetchall(cur)
            ]
