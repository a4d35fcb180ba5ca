from __future__ import annotations

from datetime import time

from .base import ShiftStrategy


class MorningShiftStrategy(ShiftStrategy):
    """Time-in between 06:00 and 10:59, expected at 08:00."""

    name = "morning"
    start = time(8, 0)

    def matches(self, hour: int) -> bool:
        return 6 <= hour <= 10


class AfternoonShiftStrategy(ShiftStrategy):
    name = "afternoon"
    start = time(14, 0)

    def matches(self, hour: int) -> bool:
        return 13 <= hour <= 16


class EveningShiftStrategy(ShiftStrategy):
    name = "evening"
    start = time(18, 0)

    def matches(self, hour: int) -> bool:
        return 17 <= hour <= 20
