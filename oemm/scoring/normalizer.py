"""
Check Normalizer
oemm/scoring/normalizer.py

Turns one raw check answer into a unit contribution in [0, 1]:

    boolean   any non-zero answer -> 1, False / zero / absent -> 0
    scale5    clamp(value, 0, 5) / 5
    scale100  clamp(value, 0, 100) / 100

Out-of-range values are clamped, never propagated. Not-applicable handling
belongs to the ParameterScorer.
"""

from decimal import Decimal
from typing import Any, Union

from oemm.models.enumerations import CheckType
from oemm.models.maturity_model import CheckDefinition
from oemm.scoring.utils import HUNDRED, ONE, ZERO, clamp, to_decimal

FIVE = Decimal("5")


def _raw_to_decimal(raw_value: Any) -> Decimal:
    if raw_value is None:
        return ZERO
    value = to_decimal(raw_value)
    # NaN answers count as unanswered
    if value.is_nan():
        return ZERO
    return value


def normalize(check: Union[CheckDefinition, CheckType, str], raw_value: Any) -> Decimal:
    """
    Normalize a raw answer for the given check (or check type).

    Examples:
        >>> normalize(CheckType.SCALE5, 2.5)
        Decimal('0.5')
        >>> normalize(CheckType.SCALE100, 140)
        Decimal('1')
    """
    check_type = check.type if isinstance(check, CheckDefinition) else CheckType(check)
    value = _raw_to_decimal(raw_value)

    if check_type is CheckType.BOOLEAN:
        return ONE if value != ZERO else ZERO
    if check_type is CheckType.SCALE5:
        return clamp(value, ZERO, FIVE) / FIVE
    if check_type is CheckType.SCALE100:
        return clamp(value, ZERO, HUNDRED) / HUNDRED
    raise ValueError(f"Unsupported check type: {check_type!r}")
