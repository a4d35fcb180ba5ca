"""Approval merger.

Folds the approval tables into per-employee, per-day values that overwrite
the derived fields of a processed attendance row. Each table owns its own
fields, so the order below never lets one table clobber another; the order
only matters for logging and for the sequence the values are applied in.

When several approved records of one table cover the same employee/day, the
most recently updated record wins, then the highest id.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import date, datetime
from typing import Dict, Iterable, Iterator, Optional, Tuple

from ..approvals.model import SLVL, ApprovalBundle
from ..attendance.model import ProcessedAttendance

APPLICATION_ORDER = (
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

_Key = Tuple[int, date]


@dataclass(frozen=True)
class ApprovalValues:
    travel_order: float = 0.0
    slvl: float = 0.0
    ct: bool = False
    cs: bool = False
    ot_reg_holiday: float = 0.0
    ot_special_holiday: float = 0.0
    restday: bool = False
    retromultiplier: float = 0.0
    overtime: float = 0.0
    offset: float = 0.0

    def apply_to(self, row: ProcessedAttendance) -> ProcessedAttendance:
        return replace(row, **{f: getattr(self, f) for f in APPLICATION_ORDER})

    def differs_from(self, row: ProcessedAttendance) -> bool:
        for f in APPLICATION_ORDER:
            current, merged = getattr(row, f), getattr(self, f)
            if isinstance(merged, bool):
                if bool(current) != merged:
                    return True
            elif abs(float(current or 0) - float(merged)) > 1e-9:
                return True
        return False

    def as_dict(self) -> dict:
        return asdict(self)


def _rank(record) -> tuple:
    return (record.updated_at or datetime.min, record.id)


class ApprovalIndex:
    def __init__(self) -> None:
        self._winners: Dict[str, Dict[_Key, object]] = {f: {} for f in APPLICATION_ORDER}

    def _offer(self, field: str, record, *, within: Optional[Tuple[date, date]]) -> None:
        if not record.is_approved:
            return
        bucket = self._winners[field]
        for day in record.days():
            if within and not (within[0] <= day <= within[1]):
                continue
            key = (record.employee_id, day)
            current = bucket.get(key)
            if current is None or _rank(record) > _rank(current):
                bucket[key] = record

    @classmethod
    def build(cls, bundle: ApprovalBundle, *, within: Optional[Tuple[date, date]] = None) -> "ApprovalIndex":
        index = cls()
        sources: Iterable[Tuple[str, Iterable]] = (
            ("travel_order", bundle.travel_orders),
            ("slvl", bundle.slvls),
            ("ct", bundle.time_schedules),
            ("cs", bundle.change_off_schedules),
            ("restday", bundle.cancel_rest_days),
            ("retromultiplier", bundle.retros),
            ("offset", bundle.offsets),
        )
        for field, records in sources:
            for record in records:
                index._offer(field, record, within=within)
        for ot in bundle.overtimes:
            index._offer(ot.target_field, ot, within=within)
        return index

    def values_for(self, employee_id: int, day: date) -> ApprovalValues:
        key = (employee_id, day)
        values = {}
        for f in APPLICATION_ORDER:
            record = self._winners[f].get(key)
            if record is not None:
                values[f] = record.value
        return ApprovalValues(**values)

    def slvl_days(self) -> Iterator[Tuple[int, date, SLVL]]:
        """Winning SLVL record per employee/day, in employee/date order."""
        for (employee_id, day), record in sorted(self._winners["slvl"].items(), key=lambda kv: kv[0]):
            yield employee_id, day, record
