from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class TimekeepingRules:
    """Tunable thresholds used by punch grouping and hour calculation."""

    minimum_work_hours: float = constants.MINIMUM_WORK_HOURS
    max_break_minutes: int = constants.MAX_BREAK_MINUTES
    default_break_minutes: int = constants.DEFAULT_BREAK_MINUTES
    import_default_break_minutes: int = constants.IMPORT_DEFAULT_BREAK_MINUTES
    break_window_start_hour: int = constants.BREAK_WINDOW_START_HOUR
    night_shift_timeout_hour: int = constants.NIGHT_SHIFT_TIMEOUT_HOUR
    night_shift_timein_hour: int = constants.NIGHT_SHIFT_TIMEIN_HOUR
    night_carryover_cutoff_hour: int = constants.NIGHT_CARRYOVER_CUTOFF_HOUR
    duplicate_punch_seconds: int = constants.DUPLICATE_PUNCH_SECONDS

    @classmethod
    def from_settings(cls, settings) -> "TimekeepingRules":
        defaults = cls()
        return cls(
            minimum_work_hours=float(getattr(settings, "MINIMUM_WORK_HOURS", defaults.minimum_work_hours)),
            max_break_minutes=int(getattr(settings, "MAX_BREAK_MINUTES", defaults.max_break_minutes)),
            default_break_minutes=int(getattr(settings, "DEFAULT_BREAK_MINUTES", defaults.default_break_minutes)),
            import_default_break_minutes=int(
                getattr(settings, "IMPORT_DEFAULT_BREAK_MINUTES", defaults.import_default_break_minutes)
            ),
            break_window_start_hour=int(getattr(settings, "BREAK_WINDOW_START_HOUR", defaults.break_window_start_hour)),
            night_shift_timeout_hour=int(
                getattr(settings, "NIGHT_SHIFT_TIMEOUT_HOUR", defaults.night_shift_timeout_hour)
            ),
            night_shift_timein_hour=int(getattr(settings, "NIGHT_SHIFT_TIMEIN_HOUR", defaults.night_shift_timein_hour)),
            night_carryover_cutoff_hour=int(
                getattr(settings, "NIGHT_CARRYOVER_CUTOFF_HOUR", defaults.night_carryover_cutoff_hour)
            ),
            duplicate_punch_seconds=int(getattr(settings, "DUPLICATE_PUNCH_SECONDS", defaults.duplicate_punch_seconds)),
        )
