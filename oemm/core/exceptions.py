"""
Custom Exceptions - OEMM Scoring Engine
oemm/core/exceptions.py

Exceptions raised by the model and answer providers. The scoring engine
itself raises none of these; it is total over validated input.
"""


class MaturityModelException(Exception):
    """Base exception for provider operations."""

    pass


class ModelLoadException(MaturityModelException):
    """Maturity model could not be read or failed validation."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load maturity model from {source}: {reason}")


class AnswerLoadException(MaturityModelException):
    """Answer set could not be read or failed validation."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load answers from {source}: {reason}")
