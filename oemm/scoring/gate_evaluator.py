"""
Gate Evaluator
oemm/scoring/gate_evaluator.py

A gate passes when its referenced parameter scales meet the threshold:
    AND -> every scale >= threshold
    OR  -> at least one scale >= threshold

Any referenced parameter without a score fails the gate, whatever the
combinator. If any gate fails the overall scale is clamped once:
    after_gates_scale = min(overall_scale_pre, 3.0)
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping, Optional, Sequence, Tuple

from oemm.core.logging import get_logger
from oemm.models.enumerations import Combinator
from oemm.models.maturity_model import Gate
from oemm.scoring.utils import to_decimal

logger = get_logger(__name__)

GATE_FAIL_SCALE = Decimal("3.0")


@dataclass(frozen=True)
class GateResult:
    """Output of GateEvaluator.evaluate() for one gate."""
    id: str
    label: str
    passed: bool
    threshold: Decimal
    unassessed_parameter_ids: Tuple[str, ...] = ()


class GateEvaluator:
    """Evaluate gates against already-computed parameter scales."""

    def evaluate(
        self,
        gates: Sequence[Gate],
        parameter_scales: Mapping[str, Optional[Decimal]],
    ) -> List[GateResult]:
        results = [self._evaluate_gate(gate, parameter_scales) for gate in gates]
        failed = [r.id for r in results if not r.passed]
        if failed:
            logger.info("gates_failed", failed=failed, total=len(results))
        return results

    def _evaluate_gate(
        self,
        gate: Gate,
        parameter_scales: Mapping[str, Optional[Decimal]],
    ) -> GateResult:
        threshold = to_decimal(gate.threshold)
        scales = [parameter_scales.get(pid) for pid in gate.parameter_ids]
        unassessed = tuple(pid for pid, s in zip(gate.parameter_ids, scales) if s is None)

        if unassessed:
            passed = False
        elif gate.combinator is Combinator.AND:
            passed = all(s >= threshold for s in scales)
        else:
            passed = any(s >= threshold for s in scales)

        return GateResult(
            id=gate.id,
            label=gate.label or gate.id,
            passed=passed,
            threshold=threshold,
            unassessed_parameter_ids=unassessed,
        )


def evaluate_gates(
    gates: Sequence[Gate],
    parameter_scales: Mapping[str, Optional[Decimal]],
) -> Tuple[List[GateResult], bool]:
    """Evaluate gates and return (results, all_pass)."""
    results = GateEvaluator().evaluate(gates, parameter_scales)
    return results, all(r.passed for r in results)


def apply_gate_clamp(overall_scale_pre: Optional[Decimal], all_pass: bool) -> Optional[Decimal]:
    """Clamp to exactly 3.0 when any gate failed; otherwise pass through."""
    if overall_scale_pre is None or all_pass:
        return overall_scale_pre
    return min(overall_scale_pre, GATE_FAIL_SCALE)
