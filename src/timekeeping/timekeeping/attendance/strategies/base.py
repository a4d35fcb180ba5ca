from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time


@dataclass(frozen=True)
class ShiftDecision:
    name: str
    expected_start: datetime


class ShiftStrategy(ABC):
    """Strategy Pattern: encapsulate which shift a time-in belongs to."""

    name: str = "shift"
    start: time = time(8, 0)

    def decide(self, *, attendance_date: date) -> ShiftDecision:
        return ShiftDecision(name=self.name, expected_start=datetime.combine(attendance_date, self.start))

    @abstractmethod
    def matches(self, hour: int) -> bool:
        raise NotImplementedError
