"""
Scale <-> Index Converter
oemm/scoring/scale_converter.py

Bidirectional piecewise-linear mapping between the 0-100 index and the
1-5 maturity scale. Breakpoints:

    index   0    25    50    80    100
    scale   1     2     3     4      5

Both functions clamp their input to the declared domain and pass None
through unchanged (no applicable data).
"""

from decimal import Decimal
from typing import Any, Optional, Tuple

from oemm.scoring.utils import clamp, to_decimal

INDEX_MIN = Decimal("0")
INDEX_MAX = Decimal("100")
SCALE_MIN = Decimal("1")
SCALE_MAX = Decimal("5")

# (index_lo, index_hi, scale_lo, scale_hi) per segment
_SEGMENTS: Tuple[Tuple[Decimal, Decimal, Decimal, Decimal], ...] = (
    (Decimal("0"), Decimal("25"), Decimal("1"), Decimal("2")),
    (Decimal("25"), Decimal("50"), Decimal("2"), Decimal("3")),
    (Decimal("50"), Decimal("80"), Decimal("3"), Decimal("4")),
    (Decimal("80"), Decimal("100"), Decimal("4"), Decimal("5")),
)


def index_to_scale(index: Any) -> Optional[Decimal]:
    """
    Map an index in [0, 100] to a scale in [1, 5].

    Examples:
        >>> index_to_scale(50)
        Decimal('3')
        >>> index_to_scale(90)
        Decimal('4.5')
    """
    if index is None:
        return None
    i = clamp(to_decimal(index), INDEX_MIN, INDEX_MAX)
    for idx_lo, idx_hi, sc_lo, sc_hi in _SEGMENTS:
        if i <= idx_hi:
            return sc_lo + (i - idx_lo) / (idx_hi - idx_lo)
    return SCALE_MAX


def scale_to_index(scale: Any) -> Optional[Decimal]:
    """
    Map a scale in [1, 5] back to an index in [0, 100].

    Examples:
        >>> scale_to_index(3)
        Decimal('50')
        >>> scale_to_index(Decimal("3.5"))
        Decimal('65.0')
    """
    if scale is None:
        return None
    s = clamp(to_decimal(scale), SCALE_MIN, SCALE_MAX)
    for idx_lo, idx_hi, sc_lo, sc_hi in _SEGMENTS:
        if s <= sc_hi:
            return idx_lo + (s - sc_lo) * (idx_hi - idx_lo)
    return INDEX_MAX
