"""
scoring/ - OEMM Maturity Scoring Engine

Modules:
    utils.py               - Decimal utilities
    scale_converter.py     - Scale <-> Index piecewise-linear mapping
    normalizer.py          - Raw check answer -> [0, 1] contribution
    parameter_scorer.py    - Weighted check aggregation per parameter
    pillar_aggregator.py   - Unweighted mean of parameter indices per pillar
    overall_aggregator.py  - Pillar-weighted pre-gate overall index
    gate_evaluator.py      - Pass/fail gates and the 3.0 clamp
    cap_evaluator.py       - Conditional caps composed by minimum
    band_classifier.py     - L1..L5 bands and next-level targets
    engine.py              - compute() entry point and ScoringResult
"""

from oemm.scoring.engine import MaturityScoringEngine, ScoringOptions, ScoringResult, compute

__all__ = [
    "MaturityScoringEngine",
    "ScoringOptions",
    "ScoringResult",
    "compute",
]
