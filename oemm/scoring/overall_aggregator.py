"""
Overall Aggregator
oemm/scoring/overall_aggregator.py

Computes the pre-gate overall index from pillar indices.

Formula (pillars with a non-null index only):
    overall_index = Σ (weight_p × index_p) / Σ weight_p
    overall_scale = index_to_scale(overall_index)

No pillar with data -> (None, None).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping, Optional

from oemm.scoring.scale_converter import index_to_scale
from oemm.scoring.utils import ZERO, to_decimal, weighted_mean


@dataclass(frozen=True)
class OverallScore:
    """Output of score_overall()."""
    index: Optional[Decimal]          # [0, 100] or None
    scale: Optional[Decimal]          # [1, 5] or None
    total_weight: Decimal             # Σ weights of contributing pillars
    contributing_pillars: List[str] = field(default_factory=list)


def score_overall(
    pillar_indices: Mapping[str, Optional[Decimal]],
    pillar_weights: Mapping[str, Decimal],
) -> OverallScore:
    """
    Weighted mean over pillars that have data.

    Pillars missing from ``pillar_weights`` contribute weight 0.

    Examples:
        >>> r = score_overall({"A": Decimal("50"), "B": Decimal("80")},
        ...                   {"A": Decimal("15"), "B": Decimal("20")})
        >>> round(r.index, 4)
        Decimal('67.1429')
    """
    names: List[str] = []
    values: List[Decimal] = []
    weights: List[Decimal] = []
    for name, index in pillar_indices.items():
        if index is None:
            continue
        names.append(name)
        values.append(index)
        weights.append(to_decimal(pillar_weights.get(name, ZERO)))

    total_weight = sum(weights, ZERO)
    if total_weight == 0:
        return OverallScore(index=None, scale=None, total_weight=ZERO, contributing_pillars=names)

    index = weighted_mean(values, weights)
    return OverallScore(
        index=index,
        scale=index_to_scale(index),
        total_weight=total_weight,
        contributing_pillars=names,
    )
