"""Settings shared by every environment.

Rule tunables default to ``timekeeping.core.constants`` and are read from
the environment so a site can adjust them without code changes.
"""

import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_db"),
}

API_TOKEN = os.getenv("API_TOKEN", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

MINIMUM_WORK_HOURS = float(os.getenv("MINIMUM_WORK_HOURS", "9"))
BREAK_WINDOW_START_HOUR = int(os.getenv("BREAK_WINDOW_START_HOUR", "12"))
NIGHT_SHIFT_TIMEOUT_HOUR = int(os.getenv("NIGHT_SHIFT_TIMEOUT_HOUR", "20"))
NIGHT_SHIFT_TIMEIN_HOUR = int(os.getenv("NIGHT_SHIFT_TIMEIN_HOUR", "21"))
NIGHT_CARRYOVER_CUTOFF_HOUR = int(os.getenv("NIGHT_CARRYOVER_CUTOFF_HOUR", "12"))
DUPLICATE_PUNCH_SECONDS = int(os.getenv("DUPLICATE_PUNCH_SECONDS", "60"))
