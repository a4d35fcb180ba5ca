from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import Punch


class PunchRepository(Protocol):
    def exists(self, *, employee_id: int, biometric_id: str, timestamp: datetime) -> bool:
        raise NotImplementedError

    def save_many(self, punches: Sequence[Punch]) -> int:
        raise NotImplementedError

    def list_between(self, start: datetime, end: datetime) -> Sequence[Punch]:
        """Punches with ``start <= timestamp < end``, ordered by employee then time."""

        raise NotImplementedError
