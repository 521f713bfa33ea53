# tests/test_engine.py

"""
Engine Tests - end-to-end compute() over models, answers and visible sets
"""

import copy
import logging
from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from oemm.models.answers import parse_answers
from oemm.models.enumerations import AssessmentMode, RuleScope
from oemm.models.maturity_model import MaturityModel
from oemm.scoring import MaturityScoringEngine, ScoringOptions, compute
from oemm.scoring.band_classifier import Band


def _model(parameters, pillars, gates=(), caps=()):
    return MaturityModel.model_validate({
        "pillars": pillars,
        "parameters": parameters,
        "gates": list(gates),
        "caps": list(caps),
    })


def _single(value_type="scale100"):
    return {"checks": [{"type": value_type, "w": 100}]}


# =============================================================================
# SAMPLE MODEL
# =============================================================================

class TestSampleModel:

    def test_strong_assessment(self, sample_model, strong_answers):
        result = compute(sample_model, strong_answers, sample_model.visible_parameter_ids(AssessmentMode.FULL))

        assert result.per_parameter["s1"].index == Decimal("100")
        assert result.per_parameter["d1"].index == Decimal("80")
        assert result.by_pillar == {"Strategy": Decimal("100"), "Delivery": Decimal("90")}
        assert result.overall_index_pre == Decimal(3300) / Decimal(35)
        assert result.all_gates_pass is True
        assert result.gates_passed == "All"
        assert result.caps[0].triggered is False
        assert result.final_scale == result.after_gates_scale == result.overall_scale_pre
        assert result.band is Band.OUTCOME_ENGINEERED

    def test_weak_assessment(self, sample_model, weak_answers):
        result = compute(sample_model, weak_answers, sample_model.visible_parameter_ids(AssessmentMode.FULL))

        assert result.by_pillar == {"Strategy": Decimal("50"), "Delivery": Decimal("50")}
        assert result.overall_scale_pre == Decimal("3")
        assert result.gates[0].passed is False
        assert result.gates_passed == "0/1"
        assert result.after_gates_scale == Decimal("3.0")
        assert result.caps[0].triggered is True
        assert result.final_scale == Decimal("3.0")
        assert result.final_index == Decimal("50")
        assert result.band is Band.AGILE_MAX
        assert result.next_level_target.level == 4

    def test_core_mode_scores_only_visible(self, sample_model, strong_answers):
        visible = sample_model.visible_parameter_ids(AssessmentMode.CORE)
        result = compute(sample_model, strong_answers, visible)

        assert set(result.per_parameter) == {"s1", "d1"}
        assert result.by_pillar == {"Strategy": Decimal("100"), "Delivery": Decimal("80")}


# =============================================================================
# GATES AND CAPS END TO END
# =============================================================================

class TestGateClampEndToEnd:

    def test_only_gate_failing_keeps_lower_pre_scale(self):
        """Gate over scales 3.0 and 2.9 fails; after-gates = min(pre, 3.0)."""
        model = _model(
            {"a": _single(), "b": _single()},
            [{"name": "Ops", "weight": 10, "parameters": ["a", "b"]}],
            gates=[{"id": "g", "params": ["a", "b"], "logical": "AND", "threshold": 3.0}],
        )
        # index 50 -> 3.0, index 47.5 -> 2.9
        answers = parse_answers({"a": {"0": 50}, "b": {"0": 47.5}})
        result = compute(model, answers, ["a", "b"])

        assert result.per_parameter["a"].scale == Decimal("3")
        assert result.per_parameter["b"].scale == Decimal("2.9")
        assert result.gates[0].passed is False
        assert result.after_gates_scale == min(result.overall_scale_pre, Decimal("3.0"))

    def test_failing_gate_clamps_high_score_to_three(self):
        model = _model(
            {"hi": _single(), "lo": _single()},
            [
                {"name": "Main", "weight": 10, "parameters": ["hi"]},
                {"name": "Floor", "weight": 1, "parameters": ["lo"]},
            ],
            gates=[{"id": "floor", "params": ["lo"], "threshold": 3.0}],
        )
        answers = parse_answers({"hi": {"0": 84}, "lo": {"0": 0}})
        visible = ["hi"]
        result = compute(model, answers, visible)

        assert result.overall_scale_pre == Decimal("4.2")
        assert result.after_gates_scale == Decimal("3.0")
        assert result.final_index == Decimal("50")
        assert result.band is Band.AGILE_MAX


class TestCapsEndToEnd:

    CAPS = [
        {"id": "c1", "label": "Soft cap", "conditions": [{"parameter_id": "p", "operator": ">", "value": 4}], "cap_scale": 3.5},
        {"id": "c2", "label": "Hard cap", "conditions": [{"parameter_id": "p", "operator": ">=", "value": 4.2}], "cap_scale": 2.8},
    ]

    @pytest.mark.parametrize("caps", [CAPS, list(reversed(CAPS))])
    def test_caps_compose_by_minimum_in_any_order(self, caps):
        model = _model({"p": _single()}, [{"name": "Main", "weight": 1, "parameters": ["p"]}], caps=caps)
        result = compute(model, parse_answers({"p": {"0": 84}}), ["p"])

        assert result.overall_scale_pre == Decimal("4.2")
        assert all(c.triggered for c in result.caps)
        assert result.final_scale == Decimal("2.8")
        assert result.final_index == Decimal("45")

    def test_gate_then_cap(self):
        caps = [{"conditions": [{"parameter_id": "p", "operator": "<", "value": 5}], "cap_scale": 2.5}]
        gates = [{"id": "g", "params": ["p"], "threshold": 4.5}]
        model = _model({"p": _single()}, [{"name": "Main", "weight": 1, "parameters": ["p"]}], gates, caps)
        result = compute(model, parse_answers({"p": {"0": 84}}), ["p"])

        assert result.after_gates_scale == Decimal("3.0")
        assert result.final_scale == Decimal("2.5")


class TestRuleScope:

    def _model(self):
        return _model(
            {"hi": _single(), "lo": _single()},
            [{"name": "Main", "weight": 1, "parameters": ["hi", "lo"]}],
            gates=[{"id": "g", "params": ["lo"], "threshold": 2.0}],
        )

    def test_visible_scope_fails_gate_on_hidden_parameter(self):
        answers = parse_answers({"hi": {"0": 90}, "lo": {"0": 90}})
        result = compute(self._model(), answers, ["hi"])
        assert result.gates[0].passed is False
        assert result.gates[0].unassessed_parameter_ids == ("lo",)

    def test_global_scope_scores_hidden_parameter_for_rules(self):
        answers = parse_answers({"hi": {"0": 90}, "lo": {"0": 90}})
        options = ScoringOptions(rule_scope=RuleScope.GLOBAL)
        result = compute(self._model(), answers, ["hi"], options)

        assert result.gates[0].passed is True
        # hidden parameter still stays out of the breakdown
        assert set(result.per_parameter) == {"hi"}
        assert result.by_pillar == {"Main": Decimal("90")}


# =============================================================================
# NOT APPLICABLE AND EMPTY INPUT
# =============================================================================

class TestNotApplicable:

    def _model(self):
        return _model(
            {
                "a": {"checks": [{"type": "boolean", "w": 50}, {"type": "boolean", "w": 50}]},
                "b": _single(),
            },
            [{"name": "Main", "weight": 1, "parameters": ["a", "b"]}],
        )

    def test_na_checks_do_not_lower_score(self):
        answers = parse_answers({"a": {"0": True, "1": {"na": True}}, "b": {"0": 100}})
        result = compute(self._model(), answers, ["a", "b"])
        assert result.per_parameter["a"].index == Decimal("100")
        assert result.by_pillar["Main"] == Decimal("100")

    def test_all_na_parameter_counts_zero_by_default(self):
        answers = parse_answers({"a": {"0": {"na": True}, "1": {"na": True}}, "b": {"0": 100}})
        result = compute(self._model(), answers, ["a", "b"])
        assert result.by_pillar["Main"] == Decimal("50")

    def test_all_na_parameter_dropped_when_unassessed(self):
        answers = parse_answers({"a": {"0": {"na": True}, "1": {"na": True}}, "b": {"0": 100}})
        options = ScoringOptions(all_not_applicable_as_zero=False)
        result = compute(self._model(), answers, ["a", "b"], options)
        assert result.per_parameter["a"].index is None
        assert result.by_pillar["Main"] == Decimal("100")


class TestEmptyInput:

    def test_nothing_visible(self, sample_model, strong_answers):
        result = compute(sample_model, strong_answers, [])

        assert result.per_parameter == {}
        assert result.overall_index_pre is None
        assert result.final_scale is None
        assert result.final_index is None
        assert result.band is None
        assert result.next_level_target is None

    def test_no_answers(self, sample_model):
        result = compute(sample_model, {}, sample_model.visible_parameter_ids())
        assert result.overall_index_pre == Decimal("0")
        assert result.overall_scale_pre == Decimal("1")
        assert result.band is Band.TRADITIONAL


# =============================================================================
# PURITY
# =============================================================================

class TestPurity:

    def test_same_inputs_same_result(self, sample_model, weak_answers):
        visible = sample_model.visible_parameter_ids()
        assert compute(sample_model, weak_answers, visible) == compute(sample_model, weak_answers, visible)

    def test_inputs_not_mutated(self, sample_model, strong_answers):
        answers_before = copy.deepcopy(strong_answers)
        model_before = sample_model.model_dump()
        compute(sample_model, strong_answers, sample_model.visible_parameter_ids())
        assert strong_answers == answers_before
        assert sample_model.model_dump() == model_before

    def test_engine_reusable(self, sample_model, strong_answers, weak_answers):
        engine = MaturityScoringEngine()
        visible = sample_model.visible_parameter_ids()
        first = engine.compute(sample_model, strong_answers, visible)
        engine.compute(sample_model, weak_answers, visible)
        assert engine.compute(sample_model, strong_answers, visible) == first


class TestUnknownParameters:

    def test_unknown_ids_skipped_and_logged(self, sample_model, strong_answers):
        answers = dict(strong_answers)
        answers.update(parse_answers({"ghost": {"0": True}}))
        with capture_logs() as logs:
            result = compute(sample_model, answers, ["s1", "phantom"])

        assert set(result.per_parameter) == {"s1"}
        skipped = {e["parameter_id"] for e in logs if e["event"] == "unknown_parameter_skipped"}
        assert skipped == {"ghost", "phantom"}

    def test_summary_event_logged(self, sample_model, strong_answers):
        with capture_logs() as logs:
            compute(sample_model, strong_answers, sample_model.visible_parameter_ids())
        summary = [e for e in logs if e["event"] == "maturity_scored"]
        assert len(summary) == 1
        assert summary[0]["gates_passed"] == "All"


# =============================================================================
# SERIALISATION
# =============================================================================

class TestToDict:

    def test_keys_and_rounding(self, sample_model, strong_answers):
        result = compute(sample_model, strong_answers, sample_model.visible_parameter_ids())
        data = result.to_dict(places=2)

        assert data["overallIndexPre"] == 94.29
        assert data["finalScale"] == 4.71
        assert data["byPillar"] == {"Strategy": 100.0, "Delivery": 90.0}
        assert data["perParameter"]["d1"] == {"index": 80.0, "scale": 4.0}
        assert data["gates"] == [{"id": "delivery_floor", "label": "Delivery floor", "pass": True}]
        assert data["caps"] == [{"label": "Weak automation", "triggered": False, "capScale": 3.5}]
        assert data["allGatesPass"] is True
        assert data["gatesPassed"] == "All"
        assert data["band"] == "Level 5 - Outcome engineered"
        assert data["nextLevelTarget"] == {"level": 5, "targetIndex": 100.0}

    def test_nulls_survive(self, sample_model):
        data = compute(sample_model, {}, []).to_dict()
        assert data["finalScale"] is None
        assert data["band"] is None
        assert data["nextLevelTarget"] is None


class TestLoggingOutput:

    def test_compute_writes_nothing_to_stdout(self, sample_model, strong_answers, capsys):
        """Without configure_logging() the engine stays silent on stdout."""
        compute(sample_model, strong_answers, sample_model.visible_parameter_ids())
        compute(sample_model, parse_answers({"ghost": {"0": True}}), ["phantom"])
        assert capsys.readouterr().out == ""

    def test_events_go_through_stdlib_logging(self, sample_model, strong_answers, caplog):
        caplog.set_level(logging.INFO, logger="oemm.scoring.engine")
        compute(sample_model, strong_answers, sample_model.visible_parameter_ids())
        messages = [r.getMessage() for r in caplog.records if r.name == "oemm.scoring.engine"]
        assert any("maturity_scored" in m for m in messages)

    def test_parameter_events_stay_at_debug(self, sample_model, strong_answers, caplog):
        caplog.set_level(logging.INFO, logger="oemm.scoring.parameter_scorer")
        compute(sample_model, strong_answers, sample_model.visible_parameter_ids())
        assert not [r for r in caplog.records if r.name == "oemm.scoring.parameter_scorer"]
