#!/usr/bin/env python
"""
Score one assessment against a maturity model and print the result as JSON.

Loads the model and the answers, selects the visible parameter set for the
assessment mode, runs the scoring engine and writes ScoringResult.to_dict()
to stdout. Defaults for mode, rule scope and rounding come from Settings
(environment / .env).

Usage:
    python -m oemm.scripts.score_assessment model.json answers.json
    python -m oemm.scripts.score_assessment model.json answers.json --mode full
    python -m oemm.scripts.score_assessment model.json answers.json --rule-scope global --places 4
    MODEL_PATH=model.json python -m oemm.scripts.score_assessment - answers.json
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from dotenv import load_dotenv

from oemm.config import get_settings
from oemm.core.exceptions import MaturityModelException
from oemm.core.logging import configure_logging
from oemm.models.enumerations import AssessmentMode, RuleScope
from oemm.scoring.engine import MaturityScoringEngine
from oemm.services.model_loader import ModelLoader

load_dotenv()

logger = logging.getLogger(__name__)


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score an OEMM maturity assessment")
    parser.add_argument(
        "model",
        help="Maturity model JSON file ('-' uses MODEL_PATH from settings)",
    )
    parser.add_argument("answers", help="Answers JSON file")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AssessmentMode],
        default=settings.ASSESSMENT_MODE.value,
        help="Assessment mode that decides which parameters are visible",
    )
    parser.add_argument(
        "--rule-scope",
        choices=[s.value for s in RuleScope],
        default=settings.RULE_SCOPE.value,
        help="Parameters gates and caps may see",
    )
    parser.add_argument(
        "--places",
        type=int,
        default=settings.RESULT_DECIMAL_PLACES,
        help="Decimal places in the printed result",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    model_path = settings.MODEL_PATH if args.model == "-" else args.model
    if not model_path:
        logger.error("No model file given and MODEL_PATH is not set")
        return 1

    loader = ModelLoader()
    try:
        model = loader.load_model(model_path)
        answers = loader.load_answers(args.answers)
    except MaturityModelException as e:
        logger.error(str(e))
        return 1

    visible = model.visible_parameter_ids(
        AssessmentMode(args.mode),
        core_limit=settings.CORE_PARAMETER_LIMIT,
    )
    options = replace(settings.scoring_options(), rule_scope=RuleScope(args.rule_scope))
    result = MaturityScoringEngine(options).compute(model, answers, visible)

    json.dump(result.to_dict(places=args.places), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
