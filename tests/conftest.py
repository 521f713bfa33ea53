# tests/conftest.py

"""
Pytest Fixtures - Shared maturity models and answer sets

SAMPLE MODEL REFERENCE:
- Pillars:    Strategy (weight 15: s1, s2), Delivery (weight 20: d1, d2)
- Parameters: s1 boolean 60/40, s2 scale5 100, d1 scale100 100, d2 boolean (tapered)
- Gates:      delivery_floor  AND [s1, d1] >= 3.0
- Caps:       "Weak automation" legacy LE rule on d2 (<= 2 caps at 3.5)
- Core set:   s1, d1 (popular)
"""

import json

import pytest

from oemm.models.answers import parse_answers
from oemm.models.maturity_model import MaturityModel


# =============================================================================
# MODEL FIXTURES
# =============================================================================

@pytest.fixture
def sample_model_dict():
    """Model definition in the front-end JSON shape (aliases, legacy cap)."""
    return {
        "version": "2024.1",
        "name": "Sample OEMM",
        "pillars": [
            {"id": "P1", "name": "Strategy", "weight": 15, "parameters": ["s1", "s2"]},
            {"id": "P2", "name": "Delivery", "weight": 20, "parameters": ["d1", "d2"]},
        ],
        "parameters": {
            "s1": {
                "label": "Outcome definition",
                "popular": True,
                "checks": [
                    {"label": "Outcomes are written down", "type": "check", "w": 60},
                    {"label": "Outcomes are reviewed", "type": "boolean", "w": 40},
                ],
            },
            "s2": {
                "label": "Portfolio alignment",
                "checks": [{"label": "Alignment level", "type": "scale5", "w": 100}],
            },
            "d1": {
                "label": "Release cadence",
                "popular": True,
                "checks": [{"label": "Share of teams on weekly releases", "type": "scale100", "w": 100}],
            },
            "d2": {
                "label": "Test automation",
                "checks": [
                    {"label": "Unit tests run in CI", "type": "boolean"},
                    {"label": "Integration tests run in CI", "type": "boolean"},
                ],
            },
        },
        "gates": [
            {"id": "delivery_floor", "label": "Delivery floor", "params": ["s1", "d1"], "logical": "AND", "threshold": 3.0},
        ],
        "caps": [
            {"label": "Weak automation", "params": ["d2"], "logic": "LE", "value": 2, "cap": 3.5},
        ],
    }


@pytest.fixture
def sample_model(sample_model_dict):
    """Validated sample model."""
    return MaturityModel.model_validate(sample_model_dict)


# =============================================================================
# ANSWER FIXTURES
# =============================================================================

@pytest.fixture
def strong_answers_raw():
    """
    Every check answered well.

    s1 = 100, s2 = 100, d1 = 80, d2 = 100
    Strategy = 100, Delivery = 90
    """
    return {
        "s1": {"0": True, "1": True},
        "s2": {"0": {"v": 5}},
        "d1": {"0": {"v": 80}},
        "d2": {"0": "yes", "1": "yes"},
    }


@pytest.fixture
def strong_answers(strong_answers_raw):
    return parse_answers(strong_answers_raw)


@pytest.fixture
def weak_answers():
    """
    Gate and cap both fire.

    s1 = 0 (scale 1.0) fails delivery_floor, d2 = 0 (scale 1.0) triggers the cap.
    """
    return parse_answers({
        "s1": {"0": False, "1": False},
        "s2": {"0": {"v": 5}},
        "d1": {"0": {"v": 100}},
        "d2": {"0": "no", "1": "no"},
    })


# =============================================================================
# FILE FIXTURES
# =============================================================================

@pytest.fixture
def model_file(tmp_path, sample_model_dict):
    path = tmp_path / "model.json"
    path.write_text(json.dumps(sample_model_dict), encoding="utf-8")
    return path


@pytest.fixture
def answers_file(tmp_path, strong_answers_raw):
    path = tmp_path / "answers.json"
    path.write_text(json.dumps(strong_answers_raw), encoding="utf-8")
    return path
