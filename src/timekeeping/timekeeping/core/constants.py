"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Most of them can be overridden per environment through ``TimekeepingRules``.
"""

from datetime import time

MINIMUM_WORK_HOURS = 9
MAX_BREAK_MINUTES = 240
DEFAULT_BREAK_MINUTES = 60
IMPORT_DEFAULT_BREAK_MINUTES = 60

BREAK_WINDOW_START_HOUR = 12
NIGHT_SHIFT_TIMEOUT_HOUR = 20
NIGHT_SHIFT_TIMEIN_HOUR = 21
NIGHT_CARRYOVER_CUTOFF_HOUR = 12
DUPLICATE_PUNCH_SECONDS = 60

SLVL_TIME_IN = time(8, 0)
SLVL_BREAK_OUT = time(12, 0)
SLVL_BREAK_IN = time(13, 0)
SLVL_TIME_OUT = time(17, 0)
SLVL_FULL_DAY_HOURS = 8
SLVL_HALF_DAY_HOURS = 4

MAX_REPORTED_ERRORS = 10
HOLIDAY_MULTIPLIER_MIN = 0.1
HOLIDAY_MULTIPLIER_MAX = 10
TRIP_MAX = 999.99

# Float comparisons on DECIMAL(…,2) columns.
METRIC_TOLERANCE = 0.01
