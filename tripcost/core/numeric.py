"""Value coercion helpers shared by the normalizer and the allocation engine."""

import math
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

# Tolerance for floating-point drift when splitting costs
EPSILON = 1e-6


def coerce_cost(value: Any) -> float:
    """
    Coerce a raw cost to a float.

    ``None``, ``NaN``, infinities, booleans and unparseable strings all
    become 0.0. Numeric strings such as ``"450.00"`` are accepted.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    if not isinstance(value, (int, float, str, Decimal)):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def is_payer_list(value: Any) -> bool:
    """Check if a raw payer value is a list of ids (not a string, mapping or scalar)."""
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return False
    return isinstance(value, Iterable)
