"""Adjudicator adapters with deterministic fallback verdicts."""

from .base import BaseAdjudicator
from .duplicate import DuplicateAdjudicator, average_similarity
from .parsing import extract_json_object
from .quality import QualityAdjudicator
from .result import Err, Ok, Result

__all__ = [
    "BaseAdjudicator",
    "DuplicateAdjudicator",
    "average_similarity",
    "extract_json_object",
    "QualityAdjudicator",
    "Err",
    "Ok",
    "Result",
]
