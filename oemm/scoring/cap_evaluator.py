"""
Cap Evaluator
oemm/scoring/cap_evaluator.py

A cap triggers when its conditions (``scale <op> value``) hold under its
combinator. A condition on a parameter without a score is False; it never
triggers a cap on its own. Triggered caps compose by minimum:

    final_scale = min(after_gates_scale, cap_scale_1, cap_scale_2, ...)
"""

import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from oemm.core.logging import get_logger
from oemm.models.enumerations import Combinator, ComparisonOperator
from oemm.models.maturity_model import Cap, CapCondition
from oemm.scoring.utils import to_decimal

logger = get_logger(__name__)

_OPERATORS: Dict[ComparisonOperator, Callable[[Decimal, Decimal], bool]] = {
    ComparisonOperator.LT: operator.lt,
    ComparisonOperator.LE: operator.le,
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.GE: operator.ge,
}


@dataclass(frozen=True)
class CapResult:
    """Output of CapEvaluator.evaluate() for one cap."""
    label: str
    triggered: bool
    cap_scale: Decimal
    id: Optional[str] = None


class CapEvaluator:
    """Evaluate caps against already-computed parameter scales."""

    def evaluate(
        self,
        caps: Sequence[Cap],
        parameter_scales: Mapping[str, Optional[Decimal]],
    ) -> List[CapResult]:
        results = []
        for cap in caps:
            outcomes = [self._condition_holds(c, parameter_scales) for c in cap.conditions]
            if cap.combinator is Combinator.AND:
                triggered = all(outcomes)
            else:
                triggered = any(outcomes)
            results.append(CapResult(
                label=cap.label or cap.id or "",
                triggered=triggered,
                cap_scale=to_decimal(cap.cap_scale),
                id=cap.id,
            ))

        triggered_labels = [r.label for r in results if r.triggered]
        if triggered_labels:
            logger.info("caps_triggered", caps=triggered_labels, total=len(results))
        return results

    @staticmethod
    def _condition_holds(
        condition: CapCondition,
        parameter_scales: Mapping[str, Optional[Decimal]],
    ) -> bool:
        scale = parameter_scales.get(condition.parameter_id)
        if scale is None:
            return False
        compare = _OPERATORS[condition.operator]
        return compare(scale, to_decimal(condition.value))


def evaluate_caps(
    caps: Sequence[Cap],
    parameter_scales: Mapping[str, Optional[Decimal]],
) -> List[CapResult]:
    """Evaluate caps with a default CapEvaluator."""
    return CapEvaluator().evaluate(caps, parameter_scales)


def apply_caps(after_gates_scale: Optional[Decimal], cap_results: Sequence[CapResult]) -> Optional[Decimal]:
    """Minimum of the post-gate scale and every triggered cap scale."""
    if after_gates_scale is None:
        return None
    return min([after_gates_scale] + [r.cap_scale for r in cap_results if r.triggered])
