"""
Band Classifier
oemm/scoring/band_classifier.py

Maps a final scale to one of five qualitative maturity bands. The L1/L2
split sits at 2.0 and L2/L3 at 2.5; bands are not evenly spaced.

    scale < 2.0   L1  Traditional
    scale < 2.5   L2  Emerging
    scale <= 3.0  L3  Agile max
    scale <= 4.0  L4  Outcome oriented
    otherwise     L5  Outcome engineered
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from oemm.scoring.utils import to_decimal


class Band(str, Enum):
    """Qualitative maturity band."""
    TRADITIONAL = "L1"
    EMERGING = "L2"
    AGILE_MAX = "L3"
    OUTCOME_ORIENTED = "L4"
    OUTCOME_ENGINEERED = "L5"

    @property
    def level(self) -> int:
        return int(self.value[1:])

    @property
    def label(self) -> str:
        return BAND_LABELS[self]

    @property
    def display_name(self) -> str:
        return f"Level {self.level} - {self.label}"


BAND_LABELS = {
    Band.TRADITIONAL: "Traditional",
    Band.EMERGING: "Emerging",
    Band.AGILE_MAX: "Agile max",
    Band.OUTCOME_ORIENTED: "Outcome oriented",
    Band.OUTCOME_ENGINEERED: "Outcome engineered",
}


def band_of(scale: Any) -> Optional[Band]:
    """
    Classify a scale value.

    Examples:
        >>> band_of(2.4)
        <Band.EMERGING: 'L2'>
        >>> band_of(3.0).label
        'Agile max'
    """
    if scale is None:
        return None
    s = to_decimal(scale)
    if s < Decimal("2"):
        return Band.TRADITIONAL
    if s < Decimal("2.5"):
        return Band.EMERGING
    if s <= Decimal("3"):
        return Band.AGILE_MAX
    if s <= Decimal("4"):
        return Band.OUTCOME_ORIENTED
    return Band.OUTCOME_ENGINEERED


@dataclass(frozen=True)
class LevelTarget:
    """Next maturity level and the index needed to reach it."""
    level: int
    target_index: Decimal


# (index ceiling, next level)
_LEVEL_LADDER = (
    (Decimal("25"), 2),
    (Decimal("50"), 3),
    (Decimal("75"), 4),
    (Decimal("100"), 5),
)


def next_level_target(final_index: Any) -> Optional[LevelTarget]:
    """
    Next level to aim for given the final index.

    At index 100 the target is the index itself at level 5.
    """
    if final_index is None:
        return None
    idx = to_decimal(final_index)
    for ceiling, level in _LEVEL_LADDER:
        if idx < ceiling:
            return LevelTarget(level=level, target_index=ceiling)
    return LevelTarget(level=5, target_index=idx)
