from __future__ import annotations

from datetime import date

import pytest

from src.timekeeping.timekeeping.core.enums import PeriodType
from src.timekeeping.timekeeping.core.exceptions import ValidationError
from src.timekeeping.timekeeping.payroll.periods import cutoff, period_dates, period_for, period_label


@pytest.mark.parametrize(
    "year, month, period_type, expected",
    [
        (2025, 1, "1st_half", (date(2025, 1, 1), date(2025, 1, 15))),
        (2025, 1, "2nd_half", (date(2025, 1, 16), date(2025, 1, 31))),
        (2024, 2, "2nd_half", (date(2024, 2, 16), date(2024, 2, 29))),
        (2025, 2, PeriodType.SECOND_HALF, (date(2025, 2, 16), date(2025, 2, 28))),
        (2025, 4, "2nd_half", (date(2025, 4, 16), date(2025, 4, 30))),
    ],
)
def test_period_dates(year, month, period_type, expected):
    assert period_dates(year, month, period_type) == expected


def test_labels():
    assert period_label(2025, 1, "1st_half") == "1-15"
    assert period_label(2024, 2, "2nd_half") == "16-29"


@pytest.mark.parametrize("day, kind", [(date(2025, 3, 15), "1st_half"), (date(2025, 3, 16), "2nd_half")])
def test_period_for(day, kind):
    period = period_for(day)
    assert period.period_type == PeriodType(kind)
    assert period.contains(day)


def test_cutoff_rejects_bad_input():
    with pytest.raises(ValidationError):
        cutoff(2025, 1, "monthly")
    with pytest.raises(ValidationError):
        cutoff(2025, 13, "1st_half")
