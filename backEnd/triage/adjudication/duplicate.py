"""Duplicate adjudicator: asks the classifier whether an issue duplicates its candidates."""

from statistics import mean
from typing import Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from ..errors import AdjudicationValidationError
from ..retrieval.evidence import round_half_up, to_percent
from ..schemas.document import Document
from ..schemas.verdict import (
    SimilarityCandidate,
    SuggestedAction,
    Verdict,
    VerdictFlag,
    VerdictSource,
)
from .base import BaseAdjudicator


SYSTEM_PROMPT = (
    "You are an expert at analyzing GitHub issues for duplicates. "
    "Respond only with valid JSON."
)


class DuplicateVerdictPayload(BaseModel):
    """Schema the classifier must answer with."""

    model_config = ConfigDict(extra="ignore")

    is_duplicate: StrictBool = Field(..., alias="isDuplicate")
    confidence: Union[StrictInt, StrictFloat] = Field(..., description="0-100")
    reasoning: StrictStr
    suggested_action: Literal["mark_duplicate", "not_duplicate", "review_required"] = Field(
        ..., alias="suggestedAction"
    )


def average_similarity(candidates: Sequence[SimilarityCandidate]) -> float:
    """Mean candidate score on the 0-100 scale (0 without candidates)."""
    if not candidates:
        return 0.0
    return mean(candidate.percent for candidate in candidates)


class DuplicateAdjudicator(BaseAdjudicator):
    """Adjudicates duplicate candidates found by the similarity index."""

    name = "duplicate_adjudicator"

    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def build_prompt(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
    ) -> str:
        similar_issues = "\n".join(
            f'Issue #{c.target_id}: "{c.title}" ({to_percent(c.score)}% similar)'
            for c in candidates[: self.thresholds.adjudication_candidates]
        )
        content = target.truncated_content(self.thresholds.target_text_limit)

        return f"""
Analyze if issue #{target.id} is a duplicate of any of the following similar issues:

CURRENT ISSUE:
Title: "{target.title}"
Content: "{content}"

SIMILAR ISSUES:
{similar_issues}

Please analyze and respond with a JSON object containing:
{{
  "isDuplicate": boolean,
  "confidence": number (0-100),
  "reasoning": "explanation of your analysis",
  "suggestedAction": "mark_duplicate" | "not_duplicate" | "review_required"
}}

Consider:
- Are they describing the same problem?
- Are they asking for the same solution?
- Could they be resolved by the same fix?
- Are there subtle differences that make them distinct?

Be conservative - only mark as duplicate if you're confident they're truly the same issue.
"""

    def to_verdict(self, data: dict) -> Verdict:
        try:
            payload = DuplicateVerdictPayload.model_validate(data)
        except PydanticValidationError as e:
            raise AdjudicationValidationError(
                f"Invalid duplicate verdict: {e.error_count()} error(s)"
            ) from e

        return Verdict(
            flag=VerdictFlag.DUPLICATE if payload.is_duplicate else VerdictFlag.NONE,
            is_duplicate=payload.is_duplicate,
            confidence=payload.confidence,
            reasoning=payload.reasoning,
            suggested_action=SuggestedAction(payload.suggested_action),
            source=VerdictSource.ADJUDICATOR,
        )

    def fallback(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
    ) -> Verdict:
        """
        Similarity-based verdict, dampened to reflect reduced certainty.

        confidence = round(mean(score * 100) * 0.8)
        """
        thresholds = self.thresholds
        avg = average_similarity(candidates)

        if avg > thresholds.mark_duplicate_above:
            action = SuggestedAction.MARK_DUPLICATE
        elif avg > thresholds.review_required_above:
            action = SuggestedAction.REVIEW_REQUIRED
        else:
            action = SuggestedAction.NOT_DUPLICATE

        is_duplicate = avg > thresholds.mark_duplicate_above
        return Verdict(
            flag=VerdictFlag.DUPLICATE if is_duplicate else VerdictFlag.NONE,
            is_duplicate=is_duplicate,
            confidence=round_half_up(avg * thresholds.fallback_dampening),
            reasoning=(
                f"Fallback analysis: Average similarity of {avg:.1f}% "
                f"with {len(candidates)} similar issues."
            ),
            suggested_action=action,
            source=VerdictSource.FALLBACK,
        )
