"""Shared money helpers"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CENT = Decimal("0.01")


def to_finite_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce partially-filled form input to a finite float"""
    if isinstance(value, bool) or value is None:
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def round_money(value: Any) -> float:
    """Round to cents, half away from zero"""
    number = to_finite_number(value)
    return float(Decimal(repr(number)).quantize(CENT, rounding=ROUND_HALF_UP))


def percent_of(amount: float, percent: float) -> float:
    return amount * percent / 100
