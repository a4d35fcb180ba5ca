"""Run the attendance sync job from the command line.

    python scripts/sync_attendance.py                      # current cutoff
    python scripts/sync_attendance.py --start 2025-01-01 --end 2025-01-15
    python scripts/sync_attendance.py --id 42              # one row
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timekeeping.timekeeping.common.datetime_utils import parse_iso_date
from src.timekeeping.timekeeping.container import build_container
from src.timekeeping.timekeeping.core.exceptions import DomainError
from src.timekeeping.timekeeping.core.rules import TimekeepingRules
from src.timekeeping.timekeeping.main import configure_logging


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile processed attendance with approved requests.")
    parser.add_argument("--start", type=parse_iso_date, help="first day (YYYY-MM-DD)")
    parser.add_argument("--end", type=parse_iso_date, help="last day (YYYY-MM-DD)")
    parser.add_argument("--id", type=int, dest="attendance_id", help="sync a single attendance row")
    args = parser.parse_args(argv)
    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")
    if args.attendance_id is not None and args.start is not None:
        parser.error("--id cannot be combined with a date range")
    return args


def main(argv=None) -> int:
    args = _parse_args(argv)
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=dict(settings.DB_CONFIG), rules=TimekeepingRules.from_settings(settings))

    try:
        if args.attendance_id is not None:
            _, updated = container.sync_service.sync_individual(args.attendance_id)
            print(f"Attendance {args.attendance_id}: {'updated' if updated else 'already up to date'}")
            return 0

        result = container.sync_service.sync(args.start, args.end)
    except DomainError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(result.message)
    for error in result.errors:
        print(f"  - {error}")
    return 0 if result.error_count == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
