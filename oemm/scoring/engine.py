"""
Maturity Scoring Engine
oemm/scoring/engine.py

Single entry point: compute(model, answers, visible_parameter_ids) -> ScoringResult

Pipeline steps:
  1.  Drop (and log) answers / visible ids that the model does not define
  2.  ParameterScorer    → index + scale per visible parameter
  3.  PillarAggregator   → unweighted mean per pillar
  4.  score_overall      → pillar-weighted pre-gate index + scale
  5.  GateEvaluator      → pass/fail per gate; any fail clamps scale to 3.0
  6.  CapEvaluator       → triggered caps clamp the scale by minimum
  7.  scale_to_index     → final index
  8.  band_of            → qualitative band (derived on the result)

The engine performs no I/O and mutates neither the model nor the answers.
Identical inputs produce equal results.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional

from oemm.core.logging import get_logger
from oemm.models.answers import CheckAnswer
from oemm.models.enumerations import RuleScope
from oemm.models.maturity_model import MaturityModel
from oemm.scoring.band_classifier import Band, LevelTarget, band_of, next_level_target
from oemm.scoring.cap_evaluator import CapEvaluator, CapResult, apply_caps
from oemm.scoring.gate_evaluator import GateEvaluator, GateResult, apply_gate_clamp
from oemm.scoring.overall_aggregator import score_overall
from oemm.scoring.parameter_scorer import ParameterScore, ParameterScorer
from oemm.scoring.pillar_aggregator import PillarAggregator
from oemm.scoring.scale_converter import scale_to_index
from oemm.scoring.utils import to_decimal

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScoringOptions:
    """Behaviour switches for open policy decisions."""
    rule_scope: RuleScope = RuleScope.VISIBLE
    all_not_applicable_as_zero: bool = True


def _as_float(value: Optional[Decimal], places: Optional[int] = None) -> Optional[float]:
    if value is None:
        return None
    if places is None:
        return float(value)
    return float(to_decimal(value, places))


@dataclass(frozen=True)
class ScoringResult:
    """Output of MaturityScoringEngine.compute()."""
    per_parameter: Dict[str, ParameterScore]
    by_pillar: Dict[str, Optional[Decimal]]
    overall_index_pre: Optional[Decimal]
    overall_scale_pre: Optional[Decimal]
    after_gates_scale: Optional[Decimal]
    final_scale: Optional[Decimal]
    final_index: Optional[Decimal]
    gates: List[GateResult] = field(default_factory=list)
    caps: List[CapResult] = field(default_factory=list)

    @property
    def all_gates_pass(self) -> bool:
        return all(g.passed for g in self.gates)

    @property
    def gates_passed(self) -> str:
        """Return "All" when every gate passed, else "passed/total"."""
        if self.all_gates_pass:
            return "All"
        return f"{sum(1 for g in self.gates if g.passed)}/{len(self.gates)}"

    @property
    def band(self) -> Optional[Band]:
        return band_of(self.final_scale)

    @property
    def next_level_target(self) -> Optional[LevelTarget]:
        return next_level_target(self.final_index)

    def to_dict(self, places: Optional[int] = None) -> Dict[str, Any]:
        """
        JSON-ready view for renderers and exporters.

        Args:
            places: Round every number to this many decimals (None = full precision).
        """
        band = self.band
        target = self.next_level_target
        return {
            "perParameter": {
                pid: {"index": _as_float(s.index, places), "scale": _as_float(s.scale, places)}
                for pid, s in self.per_parameter.items()
            },
            "byPillar": {name: _as_float(idx, places) for name, idx in self.by_pillar.items()},
            "overallIndexPre": _as_float(self.overall_index_pre, places),
            "overallScalePre": _as_float(self.overall_scale_pre, places),
            "afterGatesScale": _as_float(self.after_gates_scale, places),
            "finalScale": _as_float(self.final_scale, places),
            "finalIndex": _as_float(self.final_index, places),
            "gates": [{"id": g.id, "label": g.label, "pass": g.passed} for g in self.gates],
            "caps": [
                {"label": c.label, "triggered": c.triggered, "capScale": _as_float(c.cap_scale, places)}
                for c in self.caps
            ],
            "allGatesPass": self.all_gates_pass,
            "gatesPassed": self.gates_passed,
            "band": band.display_name if band else None,
            "nextLevelTarget": (
                {"level": target.level, "targetIndex": _as_float(target.target_index, places)}
                if target else None
            ),
        }


class MaturityScoringEngine:
    """Compute a ScoringResult from a model, answers and the visible parameter set."""

    def __init__(self, options: Optional[ScoringOptions] = None):
        self.options = options or ScoringOptions()
        self.parameter_scorer = ParameterScorer(self.options.all_not_applicable_as_zero)
        self.pillar_aggregator = PillarAggregator()
        self.gate_evaluator = GateEvaluator()
        self.cap_evaluator = CapEvaluator()

    def compute(
        self,
        model: MaturityModel,
        answers: Mapping[str, Mapping[int, CheckAnswer]],
        visible_parameter_ids: Iterable[str],
    ) -> ScoringResult:
        """
        Args:
            model: Validated maturity model (read-only).
            answers: parameter id -> check index -> CheckAnswer (read-only).
            visible_parameter_ids: Parameters in scope for this assessment mode.

        Returns:
            ScoringResult with per-parameter, pillar, overall, gate and cap results.
        """
        visible = set(visible_parameter_ids)
        self._log_unknown(model, visible, answers)

        ordered = self._scoring_order(model, visible)
        per_parameter: Dict[str, ParameterScore] = {
            pid: self.parameter_scorer.score(pid, model.parameters[pid], answers.get(pid))
            for pid in ordered
        }

        by_pillar = self.pillar_aggregator.aggregate(model.pillars, per_parameter, visible)
        overall = score_overall(by_pillar, model.pillar_weights)

        rule_scales = {pid: s.scale for pid, s in self._rule_scores(model, answers, per_parameter).items()}

        gates = self.gate_evaluator.evaluate(model.gates, rule_scales)
        after_gates_scale = apply_gate_clamp(overall.scale, all(g.passed for g in gates))

        caps = self.cap_evaluator.evaluate(model.caps, rule_scales)
        final_scale = apply_caps(after_gates_scale, caps)

        result = ScoringResult(
            per_parameter=per_parameter,
            by_pillar=by_pillar,
            overall_index_pre=overall.index,
            overall_scale_pre=overall.scale,
            after_gates_scale=after_gates_scale,
            final_scale=final_scale,
            final_index=scale_to_index(final_scale),
            gates=gates,
            caps=caps,
        )

        logger.info(
            "maturity_scored",
            parameters_scored=len(per_parameter),
            rule_scope=self.options.rule_scope.value,
            overall_index_pre=_as_float(result.overall_index_pre, 2),
            overall_scale_pre=_as_float(result.overall_scale_pre, 2),
            after_gates_scale=_as_float(result.after_gates_scale, 2),
            final_scale=_as_float(result.final_scale, 2),
            final_index=_as_float(result.final_index, 2),
            gates_passed=result.gates_passed,
            band=result.band.value if result.band else None,
        )
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _scoring_order(model: MaturityModel, visible: Collection[str]) -> List[str]:
        """Visible, defined parameters: pillar order first, then the rest sorted."""
        ordered = [pid for pid in model.all_parameter_ids() if pid in visible]
        placed = set(ordered)
        ordered += sorted(pid for pid in visible if pid in model.parameters and pid not in placed)
        return ordered

    def _rule_scores(
        self,
        model: MaturityModel,
        answers: Mapping[str, Mapping[int, CheckAnswer]],
        per_parameter: Mapping[str, ParameterScore],
    ) -> Dict[str, ParameterScore]:
        """Scores gates and caps are evaluated against, per the rule scope."""
        scores = dict(per_parameter)
        if self.options.rule_scope is RuleScope.GLOBAL:
            for pid, definition in model.parameters.items():
                if pid not in scores:
                    scores[pid] = self.parameter_scorer.score(pid, definition, answers.get(pid))
        return scores

    @staticmethod
    def _log_unknown(
        model: MaturityModel,
        visible: Collection[str],
        answers: Mapping[str, Any],
    ) -> None:
        for pid in sorted(set(visible) - model.parameters.keys()):
            logger.warning("unknown_parameter_skipped", parameter_id=pid, source="visible_parameter_ids")
        for pid in sorted(set(answers) - model.parameters.keys()):
            logger.warning("unknown_parameter_skipped", parameter_id=pid, source="answers")


def compute(
    model: MaturityModel,
    answers: Mapping[str, Mapping[int, CheckAnswer]],
    visible_parameter_ids: Iterable[str],
    options: Optional[ScoringOptions] = None,
) -> ScoringResult:
    """Score an assessment. See MaturityScoringEngine.compute."""
    return MaturityScoringEngine(options).compute(model, answers, visible_parameter_ids)
