"""
Model Loader - OEMM Scoring Engine
oemm/services/model_loader.py

Reads maturity model definitions and answer sets from JSON files or
already-decoded dicts and validates them into typed objects. This is the
only place in the package that touches the filesystem for scoring input.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from oemm.core.exceptions import AnswerLoadException, ModelLoadException
from oemm.models.answers import AnswerSet, parse_answers
from oemm.models.maturity_model import MaturityModel

logger = logging.getLogger(__name__)

# Placeholder checks for parameters defined without any
GENERIC_CHECKS = (
    {"label": "Practice is defined and documented", "type": "scale5", "weight": 40},
    {"label": "Practice is applied consistently", "type": "scale5", "weight": 30},
    {"label": "Practice is measured and improved", "type": "scale5", "weight": 30},
)


def _read_json(path: Union[str, Path]) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _with_generic_checks(raw: Mapping[str, Any]) -> Dict[str, Any]:
    parameters = raw.get("parameters")
    if not isinstance(parameters, dict):
        return dict(raw)
    filled = {}
    for pid, definition in parameters.items():
        if isinstance(definition, dict) and not definition.get("checks"):
            logger.info(f"Parameter {pid} has no checks; using generic checks")
            definition = {**definition, "checks": [dict(c) for c in GENERIC_CHECKS]}
        filled[pid] = definition
    return {**raw, "parameters": filled}


class ModelLoader:
    """
    Loads and validates maturity models and answer sets.

    Args:
        fill_missing_checks: Give parameters without checks the three
            generic scale5 checks so they can still be scored.
    """

    def __init__(self, fill_missing_checks: bool = True):
        self.fill_missing_checks = fill_missing_checks

    def model_from_dict(self, raw: Mapping[str, Any], source: str = "<dict>") -> MaturityModel:
        """Validate a decoded model definition."""
        if not isinstance(raw, Mapping):
            raise ModelLoadException(source, f"expected a JSON object, got {type(raw).__name__}")
        data = _with_generic_checks(raw) if self.fill_missing_checks else dict(raw)
        try:
            model = MaturityModel.model_validate(data)
        except ValidationError as e:
            raise ModelLoadException(source, str(e)) from e

        logger.info(
            f"Loaded model {model.name or source} "
            f"(version={model.version}, pillars={len(model.pillars)}, "
            f"parameters={len(model.parameters)}, gates={len(model.gates)}, caps={len(model.caps)})"
        )
        return model

    def load_model(self, path: Union[str, Path]) -> MaturityModel:
        """Read and validate a model JSON file."""
        source = str(path)
        try:
            raw = _read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            raise ModelLoadException(source, str(e)) from e
        return self.model_from_dict(raw, source)

    def answers_from_dict(self, raw: Mapping[str, Any], source: str = "<dict>") -> AnswerSet:
        """Validate a decoded answer mapping."""
        if not isinstance(raw, Mapping):
            raise AnswerLoadException(source, f"expected a JSON object, got {type(raw).__name__}")
        try:
            answers = parse_answers(raw)
        except ValidationError as e:
            raise AnswerLoadException(source, str(e)) from e

        logger.info(f"Loaded answers for {len(answers)} parameters from {source}")
        return answers

    def load_answers(self, path: Union[str, Path]) -> AnswerSet:
        """Read and validate an answers JSON file."""
        source = str(path)
        try:
            raw = _read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            raise AnswerLoadException(source, str(e)) from e
        return self.answers_from_dict(raw, source)


def load_model(path: Union[str, Path], fill_missing_checks: bool = True) -> MaturityModel:
    return ModelLoader(fill_missing_checks).load_model(path)


def load_answers(path: Union[str, Path]) -> AnswerSet:
    return ModelLoader().load_answers(path)
