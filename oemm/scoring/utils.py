"""
Decimal Utilities
oemm/scoring/utils.py

Provides precision-safe decimal math for scoring calculations.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Optional, Sequence

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Any, places: Optional[int] = None) -> Decimal:
    """
    Convert a raw number to Decimal, optionally with explicit precision.

    Booleans map to 0/1. Floats go through ``str`` so that 0.1 stays 0.1.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        result = Decimal(int(value))
    else:
        result = Decimal(str(value))
    if places is None:
        return result
    return result.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = ZERO,
    max_val: Decimal = HUNDRED,
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def mean(values: Sequence[Decimal]) -> Optional[Decimal]:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values, ZERO) / Decimal(len(values))


def weighted_mean(values: List[Decimal], weights: List[Decimal]) -> Decimal:
    """
    Calculate weighted mean.

    Formula: Σ(value_i × weight_i) / Σ(weight_i)
    Returns Decimal("0") if all weights are zero.
    """
    if len(values) != len(weights):
        raise ValueError("values and weights must have same length")

    total_weight = sum(weights, ZERO)
    if total_weight == 0:
        return ZERO

    numerator = sum((v * w for v, w in zip(values, weights)), ZERO)
    return numerator / total_weight
