"""
Pillar Aggregator
oemm/scoring/pillar_aggregator.py

Pillar index = unweighted mean of the indices of the pillar's visible,
scored parameters. A pillar with nothing to average is None and drops out
of the overall aggregation (it is not treated as 0).
"""

from decimal import Decimal
from typing import Collection, Dict, Iterable, Mapping, Optional, Sequence

from oemm.models.maturity_model import Pillar
from oemm.scoring.parameter_scorer import ParameterScore
from oemm.scoring.utils import mean


def score_pillar(indices: Iterable[Optional[Decimal]]) -> Optional[Decimal]:
    """Mean of the non-null indices, or None if there are none."""
    return mean([i for i in indices if i is not None])


class PillarAggregator:
    """Average parameter indices per pillar."""

    def aggregate(
        self,
        pillars: Sequence[Pillar],
        parameter_scores: Mapping[str, ParameterScore],
        visible_parameter_ids: Collection[str],
    ) -> Dict[str, Optional[Decimal]]:
        """
        Returns:
            Pillar name -> index (or None), in model pillar order.
        """
        by_pillar: Dict[str, Optional[Decimal]] = {}
        for pillar in pillars:
            indices = [
                parameter_scores[pid].index
                for pid in pillar.parameter_ids
                if pid in visible_parameter_ids and pid in parameter_scores
            ]
            by_pillar[pillar.name] = score_pillar(indices)
        return by_pillar
