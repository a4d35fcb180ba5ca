from __future__ import annotations

from datetime import time

from .base import ShiftStrategy


class NightShiftStrategy(ShiftStrategy):
    """Late-evening or early-morning time-in, expected at 22:00 of the attendance date."""

    name = "night"
    start = time(22, 0)

    def matches(self, hour: int) -> bool:
        return hour >= 21 or hour <= 5
