"""
Maturity model definitions: pillars, parameters, checks, gates and caps.

The model is loaded once per session and treated as immutable by the scoring
engine. Field aliases accept the shapes produced by the assessment front-end
(``w`` for weights, ``params``/``logical`` on gates, legacy cap rules).
"""

import math
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from oemm.models.enumerations import AssessmentMode, CheckType, Combinator, ComparisonOperator

DEFAULT_CORE_LIMIT = 24


def taper_weights(n: int) -> List[int]:
    """
    Default check weights for a parameter whose checks carry none.

    Earlier checks weigh more; the result always sums to 100.

    Examples:
        >>> taper_weights(6)
        [20, 20, 15, 15, 15, 15]
        >>> sum(taper_weights(5))
        100
    """
    if n <= 0:
        return []
    if n == 8:
        return [20, 15, 15, 15, 10, 10, 10, 5]
    if n == 6:
        return [20, 20, 15, 15, 15, 15]

    raw = [max(8, math.floor(100 * 0.88 ** i + 0.5)) for i in range(n)]
    total = sum(raw)
    normalized = [math.floor(100 * w / total + 0.5) for w in raw]
    normalized[0] += 100 - sum(normalized)
    return normalized


def _coerce_combinator(v: Any) -> Any:
    # anything other than "and" (any case) reads as OR
    if isinstance(v, str):
        return Combinator.AND if v.strip().upper() == "AND" else Combinator.OR
    return v


def _has_weight(check: Any) -> bool:
    if not isinstance(check, dict):
        return True
    w = check.get("weight", check.get("w"))
    return isinstance(w, (int, float, Decimal)) and not isinstance(w, bool)


class CheckDefinition(BaseModel):
    """A single question inside a parameter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: CheckType = Field(
        default=CheckType.BOOLEAN,
        description="How the raw answer is normalized (boolean, scale5, scale100)"
    )

    weight: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("weight", "w"),
        description="Relative weight within the parameter"
    )

    label: str = Field(default="", description="Question text shown to the assessor")

    @field_validator("type", mode="before")
    @classmethod
    def map_legacy_type(cls, v: Any) -> Any:
        # the front-end calls boolean checks "check"
        if v == "check":
            return CheckType.BOOLEAN
        return v


class ParameterDefinition(BaseModel):
    """Smallest scored unit, composed of weighted checks."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = Field(default="", description="Display label")
    checks: List[CheckDefinition] = Field(default_factory=list)
    popular: bool = Field(default=False, description="Member of the core question set")
    tier: Optional[int] = Field(default=None, ge=1, description="Low-to-high sequencing tier")

    @model_validator(mode="before")
    @classmethod
    def fill_missing_weights(cls, data: Any) -> Any:
        """
        Backfill check weights.

        No check weighted: apply taper_weights(n). Some weighted: unweighted
        checks count 0.
        """
        if not isinstance(data, dict):
            return data
        checks = data.get("checks")
        if not isinstance(checks, list) or not checks:
            return data

        if any(_has_weight(ch) for ch in checks):
            filled = [
                ch if _has_weight(ch) else {**ch, "weight": 0}
                for ch in checks
            ]
        else:
            taper = taper_weights(len(checks))
            filled = [{**ch, "weight": w} for ch, w in zip(checks, taper)]
        return {**data, "checks": filled}


class Pillar(BaseModel):
    """Named, weighted grouping of parameters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(default=None)
    name: str = Field(..., min_length=1)
    weight: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Relative pillar weight; pillars need not sum to 100"
    )
    parameter_ids: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("parameter_ids", "parameterIds", "parameters"),
    )


class Gate(BaseModel):
    """Pass/fail rule over parameter scales. Any failing gate clamps the scale to 3.0."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    label: str = Field(default="")
    parameter_ids: List[str] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("parameter_ids", "parameterIds", "parameters", "params"),
    )
    combinator: Combinator = Field(
        default=Combinator.AND,
        validation_alias=AliasChoices("combinator", "logical", "logic"),
    )
    threshold: float = Field(..., allow_inf_nan=False, description="Minimum scale a parameter must reach")

    @field_validator("combinator", mode="before")
    @classmethod
    def normalize_combinator(cls, v: Any) -> Any:
        return _coerce_combinator(v)


class CapCondition(BaseModel):
    """``scale(parameter_id) <operator> value``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    parameter_id: str = Field(
        ...,
        validation_alias=AliasChoices("parameter_id", "parameterId", "param"),
    )
    operator: ComparisonOperator
    value: float = Field(..., allow_inf_nan=False)


class Cap(BaseModel):
    """Conditional upper bound on the final scale."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(default=None)
    label: str = Field(default="")
    conditions: List[CapCondition] = Field(..., min_length=1)
    combinator: Combinator = Field(
        default=Combinator.AND,
        validation_alias=AliasChoices("combinator", "logic", "logical"),
    )
    cap_scale: float = Field(
        ...,
        ge=1,
        le=5,
        allow_inf_nan=False,
        validation_alias=AliasChoices("cap_scale", "capScale", "capValue", "cap"),
    )

    @field_validator("combinator", mode="before")
    @classmethod
    def normalize_combinator(cls, v: Any) -> Any:
        return _coerce_combinator(v)

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_rule(cls, data: Any) -> Any:
        """
        Rewrite the older cap shapes into explicit conditions.

          {params: [a], logic: "LE", value: 2, cap: 3.5}
              -> a <= 2
          {params: [a, b], logic: "OR", lt: 2, cap: 3}
              -> a < 2 OR b < 2
          {parameters: [a, b], logic: "AND", conditions: [{operator, value}, ...]}
              -> i-th condition bound to the i-th parameter (first one if fewer)
        """
        if not isinstance(data, dict):
            return data
        params = data.get("params") or data.get("parameters") or []
        logic = data.get("logic", data.get("logical"))
        upgraded = {k: v for k, v in data.items() if k not in ("logic", "logical")}
        if logic is not None and "combinator" not in data:
            upgraded["combinator"] = logic

        if "conditions" not in data:
            if logic == "LE" and params:
                upgraded["conditions"] = [
                    {"parameter_id": params[0], "operator": "<=", "value": data.get("value")}
                ]
                upgraded["combinator"] = Combinator.AND
            elif "lt" in data and params:
                upgraded["conditions"] = [
                    {"parameter_id": pid, "operator": "<", "value": data["lt"]}
                    for pid in params
                ]
                upgraded["combinator"] = Combinator.OR if logic in (None, "OR") else logic
            return upgraded

        conditions = data.get("conditions")
        if params and isinstance(conditions, list):
            bound = []
            for i, cond in enumerate(conditions):
                if isinstance(cond, dict) and not any(
                    k in cond for k in ("parameter_id", "parameterId", "param")
                ):
                    cond = {**cond, "parameter_id": params[i] if i < len(params) else params[0]}
                bound.append(cond)
            upgraded["conditions"] = bound
        return upgraded


class MaturityModel(BaseModel):
    """
    Complete scoring model: pillars, parameter definitions, gates and caps.

    Every pillar, gate, cap and core reference must name a defined parameter.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: Optional[str] = Field(default=None)
    name: Optional[str] = Field(default=None)
    pillars: List[Pillar] = Field(..., min_length=1)
    parameters: Dict[str, ParameterDefinition] = Field(default_factory=dict)
    gates: List[Gate] = Field(default_factory=list)
    caps: List[Cap] = Field(default_factory=list)
    core_parameter_ids: Optional[List[str]] = Field(
        default=None,
        validation_alias=AliasChoices("core_parameter_ids", "coreParameterIds", "core24"),
        description="Explicit parameter list for the core assessment mode"
    )

    @model_validator(mode="after")
    def validate_references(self):
        """Reject unique-name violations and dangling parameter references."""
        names = [p.name for p in self.pillars]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate pillar names: {', '.join(duplicates)}")

        defined = self.parameters.keys()
        dangling: List[str] = []
        for pillar in self.pillars:
            dangling += [f"pillar '{pillar.name}' -> {pid}" for pid in pillar.parameter_ids if pid not in defined]
        for gate in self.gates:
            dangling += [f"gate '{gate.id}' -> {pid}" for pid in gate.parameter_ids if pid not in defined]
        for cap in self.caps:
            dangling += [
                f"cap '{cap.label or cap.id}' -> {c.parameter_id}"
                for c in cap.conditions
                if c.parameter_id not in defined
            ]
        for pid in self.core_parameter_ids or []:
            if pid not in defined:
                dangling.append(f"core -> {pid}")
        if dangling:
            raise ValueError(f"Undefined parameter references: {'; '.join(dangling)}")
        return self

    @property
    def pillar_weights(self) -> Dict[str, Decimal]:
        """Pillar name -> weight as Decimal."""
        return {p.name: Decimal(str(p.weight)) for p in self.pillars}

    def pillar_of(self, parameter_id: str) -> Optional[str]:
        """Name of the first pillar that lists the parameter."""
        for pillar in self.pillars:
            if parameter_id in pillar.parameter_ids:
                return pillar.name
        return None

    def all_parameter_ids(self) -> List[str]:
        """Every pillar parameter in pillar order, without duplicates."""
        seen: Dict[str, None] = {}
        for pillar in self.pillars:
            for pid in pillar.parameter_ids:
                seen.setdefault(pid, None)
        return list(seen)

    def visible_parameter_ids(
        self,
        mode: AssessmentMode = AssessmentMode.FULL,
        core_limit: int = DEFAULT_CORE_LIMIT,
    ) -> List[str]:
        """
        Parameters shown for an assessment mode, in pillar order.

        Core mode uses ``core_parameter_ids`` when set, otherwise the
        parameters flagged popular, otherwise the first ``core_limit``.
        """
        ordered = self.all_parameter_ids()
        if AssessmentMode(mode) is AssessmentMode.FULL:
            return ordered

        if self.core_parameter_ids:
            core = set(self.core_parameter_ids)
        else:
            core = {pid for pid in ordered if self.parameters[pid].popular}
        if not core:
            return ordered[:core_limit]
        return [pid for pid in ordered if pid in core]
