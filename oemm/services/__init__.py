"""
Services module for the OEMM Scoring Engine.
"""

from oemm.services.model_loader import ModelLoader, load_answers, load_model

__all__ = ["ModelLoader", "load_answers", "load_model"]
