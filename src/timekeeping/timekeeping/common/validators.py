from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_range(value: float, field_name: str, minimum: float, maximum: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < minimum or number > maximum:
        raise ValidationError(f"{field_name} must be between {minimum} and {maximum}")
    return number


def require_date_order(start, end, *, start_name: str = "start_date", end_name: str = "end_date") -> None:
    if end < start:
        raise ValidationError(f"{end_name} must be on or after {start_name}")


def optional_int_list(values: Optional[list]) -> list[int]:
    """Normalize an optional id list coming from JSON (``None`` -> [])."""
    if not values:
        return []
    try:
        return [int(v) for v in values]
    except (TypeError, ValueError):
        raise ValidationError("employee_ids must be a list of integers")
