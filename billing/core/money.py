"""Money arithmetic helpers shared by pricing and reporting."""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

MONEY_PLACES = 2


def to_amount(value: Any) -> float:
    """Coerce a stored amount to float; missing or non-numeric values count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def round_money(value: float, places: int = MONEY_PLACES) -> float:
    """Round half-up to a fixed number of decimal places."""
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return 0.0


def percentage_of(part: float, whole: float, places: int = MONEY_PLACES) -> float:
    """Apply a percentage rate to an amount, rounded to money precision."""
    return round_money(whole * part / 100, places)


def whole_percentage(part: float, whole: float) -> int:
    """Share of part in whole as a half-up rounded integer percent; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def safe_average(total: float, count: int) -> float:
    """Average that is 0 for an empty population."""
    return total / count if count > 0 else 0.0
