"""
Schemas for similarity candidates, verdicts and analysis results.

Scores live in [0, 1] and confidences in [0, 100]; both are clamped on
construction so no caller can produce an out-of-range value.
"""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .document import Document


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into [lower, upper]. NaN maps to ``lower``."""
    if math.isnan(value):
        return lower
    return max(lower, min(upper, value))


class CamelModel(BaseModel):
    """Base model serializing to camelCase for downstream consumers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VerdictFlag(str, Enum):
    """Primary finding of a verdict."""

    DUPLICATE = "duplicate"
    SPAM = "spam"
    LOW_QUALITY = "low_quality"
    SLOP = "slop"
    NONE = "none"


class SuggestedAction(str, Enum):
    """Action recommended to the maintainer."""

    # Duplicate engine
    MARK_DUPLICATE = "mark_duplicate"
    NOT_DUPLICATE = "not_duplicate"
    REVIEW_REQUIRED = "review_required"
    # Spam/quality engine
    BLOCK = "block"
    FLAG = "flag"
    REVIEW = "review"
    APPROVE = "approve"


class VerdictSource(str, Enum):
    """Where a verdict came from."""

    ADJUDICATOR = "adjudicator"
    FALLBACK = "fallback"


class SimilarityCandidate(CamelModel):
    """A corpus document similar to the target. Built by the similarity index."""

    model_config = ConfigDict(frozen=True)

    target_id: int = Field(..., description="Number of the similar document")
    score: float = Field(..., description="Cosine similarity clamped to [0, 1]")
    justification: str = Field(default="", description="Human-readable evidence")
    title: str = Field(default="", description="Title of the similar document")

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return clamp(float(v), 0.0, 1.0)

    @property
    def percent(self) -> float:
        """Score on the 0-100 scale."""
        return self.score * 100


class Verdict(CamelModel):
    """Final classification of one document."""

    flag: VerdictFlag = Field(default=VerdictFlag.NONE)
    confidence: float = Field(..., description="Confidence clamped to [0, 100]")
    reasoning: str = Field(default="")
    suggested_action: SuggestedAction

    is_duplicate: bool = False
    is_spam: bool = False
    is_low_quality: bool = False
    is_slop: bool = False
    suggested_labels: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)
    source: VerdictSource = Field(default=VerdictSource.ADJUDICATOR)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return clamp(float(v), 0.0, 100.0)

    @property
    def is_flagged(self) -> bool:
        """True when any spam/quality category is set."""
        return self.is_spam or self.is_low_quality or self.is_slop

    @property
    def is_fallback(self) -> bool:
        return self.source == VerdictSource.FALLBACK


class AnalysisResult(CamelModel):
    """A document with its ranked candidates and verdict."""

    document: Document
    candidates: list[SimilarityCandidate] = Field(default_factory=list)
    verdict: Verdict

    @property
    def top_candidate(self) -> Optional[SimilarityCandidate]:
        return self.candidates[0] if self.candidates else None
