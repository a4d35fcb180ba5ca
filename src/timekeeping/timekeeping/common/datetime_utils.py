from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

PUNCH_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%d-%m-%Y %H:%M:%S",
)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    v = (value or "").strip()
    if not v:
        return None
    return datetime.fromisoformat(v)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def daterange(start: date, end: date) -> Iterator[date]:
    """Inclusive day iterator."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def parse_clock_on(value: Optional[str], day: date) -> Optional[datetime]:
    """Combine an ``H:MM`` / ``HH:MM:SS`` string with a date; blank or malformed -> None."""
    v = (value or "").strip()
    if not v:
        return None
    m = _CLOCK_RE.match(v)
    if not m:
        return None
    hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        return None
    return datetime.combine(day, time(hour, minute, second))


def parse_punch_timestamp(value: str) -> Optional[datetime]:
    """Device exports use several date orders; the first format that parses wins."""
    v = (value or "").strip()
    for fmt in PUNCH_TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(v, fmt)
        except ValueError:
            continue
    return None


def minutes_between(start: datetime, end: datetime) -> int:
    return int(abs((end - start).total_seconds()) // 60)
