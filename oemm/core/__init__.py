"""
Core Package - OEMM Scoring Engine
oemm/core/__init__.py

Core infrastructure: exceptions, logging setup.
"""

from oemm.core.exceptions import (
    AnswerLoadException,
    MaturityModelException,
    ModelLoadException,
)
from oemm.core.logging import configure_logging, get_logger

__all__ = [
    "AnswerLoadException",
    "MaturityModelException",
    "ModelLoadException",
    "configure_logging",
    "get_logger",
]
