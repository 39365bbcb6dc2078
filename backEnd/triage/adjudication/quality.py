"""Spam/quality adjudicator: flags spam, low-quality and AI "slop" contributions."""

from typing import Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from ..errors import AdjudicationValidationError
from ..schemas.document import Document, DocumentKind
from ..schemas.verdict import (
    SimilarityCandidate,
    SuggestedAction,
    Verdict,
    VerdictFlag,
    VerdictSource,
    clamp,
)
from .base import BaseAdjudicator


SYSTEM_PROMPT = (
    "You are an expert open-source maintainer reviewing contributions for spam, "
    "low-quality content and AI-generated slop. Respond only with valid JSON."
)

FALLBACK_REASONING = "Analysis failed, manual review recommended"


class QualityVerdictPayload(BaseModel):
    """Schema the classifier must answer with."""

    model_config = ConfigDict(extra="ignore")

    is_spam: StrictBool = Field(..., alias="isSpam")
    is_low_quality: StrictBool = Field(..., alias="isLowQuality")
    is_slop: StrictBool = Field(..., alias="isSlop")
    confidence: Union[StrictInt, StrictFloat] = Field(..., description="0.0-1.0")
    reasoning: StrictStr
    suggested_action: Literal["block", "flag", "review", "approve"] = Field(
        ..., alias="suggestedAction"
    )
    suggested_labels: list[StrictStr] = Field(default_factory=list, alias="suggestedLabels")
    risk_factors: list[StrictStr] = Field(default_factory=list, alias="riskFactors")


def primary_flag(is_spam: bool, is_low_quality: bool, is_slop: bool) -> VerdictFlag:
    """Most severe category that is set."""
    if is_spam:
        return VerdictFlag.SPAM
    if is_low_quality:
        return VerdictFlag.LOW_QUALITY
    if is_slop:
        return VerdictFlag.SLOP
    return VerdictFlag.NONE


class QualityAdjudicator(BaseAdjudicator):
    """
    Scores every document on its own; similarity candidates are optional
    context and usually empty.

    Confidence stays on the classifier's 0.0-1.0 scale.
    """

    name = "quality_adjudicator"

    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def build_prompt(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
    ) -> str:
        kind = "pull request" if target.kind == DocumentKind.PULL_REQUEST else "issue"
        content = target.truncated_content(self.thresholds.target_text_limit)

        related = ""
        if candidates:
            lines = "\n".join(
                f'#{c.target_id}: "{c.title}" ({c.justification})'
                for c in candidates[: self.thresholds.adjudication_candidates]
            )
            related = f"\nSimilar open items (repetition can indicate spam):\n{lines}\n"

        return f"""
Analyze the following GitHub {kind} for spam, low-quality content, or AI-generated "slop":

Content:
"{content}"
{related}
Evaluate for:
1. SPAM: Promotional content, irrelevant links, copy-paste templates, generic messages
2. LOW QUALITY: Trivial changes, single typo fixes, meaningless contributions, poor descriptions
3. AI SLOP: Generic AI-generated content, repetitive patterns, lack of specific context, boilerplate text

Consider these risk factors:
- Generic or template-like language
- Promotional or marketing content
- Very short, low-effort contributions
- Lack of specific technical details
- Repetitive patterns across multiple items
- Missing context or unclear purpose
- Copy-paste from other sources

Respond in JSON format:
{{
  "isSpam": boolean,
  "isLowQuality": boolean,
  "isSlop": boolean,
  "confidence": 0.0-1.0,
  "reasoning": "Detailed explanation of the analysis",
  "suggestedLabels": ["label1", "label2"],
  "suggestedAction": "block|flag|review|approve",
  "riskFactors": ["factor1", "factor2"]
}}
"""

    def to_verdict(self, data: dict) -> Verdict:
        try:
            payload = QualityVerdictPayload.model_validate(data)
        except PydanticValidationError as e:
            raise AdjudicationValidationError(
                f"Invalid quality verdict: {e.error_count()} error(s)"
            ) from e

        return Verdict(
            flag=primary_flag(payload.is_spam, payload.is_low_quality, payload.is_slop),
            is_spam=payload.is_spam,
            is_low_quality=payload.is_low_quality,
            is_slop=payload.is_slop,
            confidence=clamp(float(payload.confidence), 0.0, 1.0),
            reasoning=payload.reasoning,
            suggested_action=SuggestedAction(payload.suggested_action),
            suggested_labels=payload.suggested_labels,
            risk_factors=payload.risk_factors,
            source=VerdictSource.ADJUDICATOR,
        )

    def fallback(
        self,
        target: Document,
        candidates: Sequence[SimilarityCandidate],
    ) -> Verdict:
        """Conservative verdict: never flags or blocks what was not evaluated."""
        return Verdict(
            flag=VerdictFlag.NONE,
            confidence=self.thresholds.quality_fallback_confidence,
            reasoning=FALLBACK_REASONING,
            suggested_action=SuggestedAction.REVIEW,
            suggested_labels=["needs-review"],
            risk_factors=["Analysis failed"],
            source=VerdictSource.FALLBACK,
        )
