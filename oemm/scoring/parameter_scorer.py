"""
Parameter Scorer
oemm/scoring/parameter_scorer.py

Aggregates a parameter's checks into an index in [0, 100] and a scale in [1, 5].

Formula (per applicable check i):
    num += weight_i × normalize(check_i, value_i)
    den += weight_i
    index = num / den × 100   (0 when den == 0)
    scale = index_to_scale(index)

Not-applicable checks are excluded from both num and den. Unanswered
checks contribute 0 but keep their weight in den.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping, Optional

from oemm.core.logging import get_logger
from oemm.models.answers import CheckAnswer
from oemm.models.maturity_model import ParameterDefinition
from oemm.scoring.normalizer import normalize
from oemm.scoring.scale_converter import index_to_scale
from oemm.scoring.utils import HUNDRED, ZERO, to_decimal, weighted_mean

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParameterScore:
    """Output of ParameterScorer.score()."""
    parameter_id: str
    index: Optional[Decimal]      # [0, 100]; None only with all_not_applicable_as_zero=False
    scale: Optional[Decimal]      # [1, 5]
    applicable_weight: Decimal    # Σ weights of checks not marked N/A
    answered_checks: int          # checks with a recorded, applicable value


class ParameterScorer:
    """Score one parameter from its check definitions and recorded answers."""

    def __init__(self, all_not_applicable_as_zero: bool = True):
        """
        Args:
            all_not_applicable_as_zero: When True (default) a parameter with no
                applicable weight scores index 0. When False it is reported as
                unassessed (index and scale None).
        """
        self.all_not_applicable_as_zero = all_not_applicable_as_zero

    def score(
        self,
        parameter_id: str,
        definition: ParameterDefinition,
        answers: Optional[Mapping[int, CheckAnswer]] = None,
    ) -> ParameterScore:
        answers = answers or {}

        contributions: List[Decimal] = []
        weights: List[Decimal] = []
        answered = 0
        for i, check in enumerate(definition.checks):
            answer = answers.get(i)
            if answer is not None and answer.not_applicable:
                continue
            raw_value = answer.value if answer is not None else None
            if raw_value is not None:
                answered += 1
            contributions.append(normalize(check, raw_value))
            weights.append(to_decimal(check.weight))

        applicable_weight = sum(weights, ZERO)
        if applicable_weight == 0 and not self.all_not_applicable_as_zero:
            index = None
        else:
            index = weighted_mean(contributions, weights) * HUNDRED

        result = ParameterScore(
            parameter_id=parameter_id,
            index=index,
            scale=index_to_scale(index),
            applicable_weight=applicable_weight,
            answered_checks=answered,
        )

        logger.debug(
            "parameter_scored",
            parameter_id=parameter_id,
            checks=len(definition.checks),
            answered_checks=answered,
            applicable_weight=float(applicable_weight),
            index=float(index) if index is not None else None,
        )
        return result


def score_parameter(
    definition: ParameterDefinition,
    answers: Optional[Mapping[int, CheckAnswer]] = None,
    parameter_id: str = "",
) -> ParameterScore:
    """Score a single parameter with default options."""
    return ParameterScorer().score(parameter_id, definition, answers)
