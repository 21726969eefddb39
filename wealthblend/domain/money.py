"""Shared rounding and percentage rules for monetary fields"""

import math
from typing import Optional

from wealthblend.domain.exceptions import ValidationError


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity"""
    return math.floor(value + 0.5)


def percentage_used(actual: float, budgeted: float) -> int:
    """Whole-number share of `budgeted` consumed by `actual` (0 when nothing is budgeted)"""
    if budgeted == 0:
        return 0
    return round_half_up(actual / budgeted * 100)


def require_finite(field: str, value: Optional[float]) -> None:
    """Reject NaN and infinities, which JSON bodies can carry"""
    if value is not None and not math.isfinite(value):
        raise ValidationError(field, "must be a finite number")


def validate_percentage(field: str, value: Optional[float]) -> None:
    """Reject percentages outside [0, 100]; absent values are allowed"""
    if value is None:
        return
    require_finite(field, value)
    if value < 0 or value > 100:
        raise ValidationError(field, "must be between 0 and 100")
