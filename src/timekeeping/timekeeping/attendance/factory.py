from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from .strategies.base import ShiftStrategy
from .strategies.day_strategy import AfternoonShiftStrategy, EveningShiftStrategy, MorningShiftStrategy
from .strategies.night_strategy import NightShiftStrategy


def _default_strategies() -> list[ShiftStrategy]:
    return [MorningShiftStrategy(), AfternoonShiftStrategy(), EveningShiftStrategy(), NightShiftStrategy()]


@dataclass
class ShiftStrategyFactory:
    """Factory Pattern: choose the shift strategy from the time-in hour."""

    strategies: Sequence[ShiftStrategy] = field(default_factory=_default_strategies)
    fallback: ShiftStrategy = field(default_factory=MorningShiftStrategy)

    def for_time_in(self, time_in: datetime) -> ShiftStrategy:
        for strategy in self.strategies:
            if strategy.matches(time_in.hour):
                return strategy
        # 11:00-12:59 falls through to the morning shift.
        return self.fallback
