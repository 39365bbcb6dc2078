"""
Decision policy: which results are reported, their order, and the action
record handed downstream.
"""

from typing import Optional, Sequence

from ..config.thresholds import DEFAULT_THRESHOLDS, TriageThresholds
from ..schemas.report import ActionRecord, DocumentState, EngineKind, RunSummary
from ..schemas.verdict import (
    AnalysisResult,
    SimilarityCandidate,
    SuggestedAction,
    Verdict,
)


RELATED_ACTIONS = frozenset({
    SuggestedAction.MARK_DUPLICATE,
    SuggestedAction.REVIEW_REQUIRED,
})


class DecisionPolicy:
    """Maps verdicts and similarity evidence to reported, ranked actions."""

    def __init__(self, thresholds: Optional[TriageThresholds] = None):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def should_adjudicate(
        self,
        engine: EngineKind,
        candidates: Sequence[SimilarityCandidate],
    ) -> bool:
        """Duplicate analysis needs at least one candidate; quality scores everything."""
        if engine == EngineKind.DUPLICATE:
            return len(candidates) > 0
        return True

    def is_reported(self, engine: EngineKind, result: AnalysisResult) -> bool:
        """Reported results appear in the output; the rest are suppressed."""
        if engine == EngineKind.DUPLICATE:
            return len(result.candidates) > 0
        return result.verdict.is_flagged

    def rank(self, results: Sequence[AnalysisResult]) -> list[AnalysisResult]:
        """Confidence descending; equal confidence keeps scan order."""
        return sorted(results, key=lambda r: r.verdict.confidence, reverse=True)

    def final_action(self, engine: EngineKind, verdict: Verdict) -> SuggestedAction:
        """
        Action to recommend for a verdict.

        A fallback verdict never leads to blocking content that was not
        actually evaluated.
        """
        action = verdict.suggested_action
        if (
            engine == EngineKind.QUALITY
            and verdict.is_fallback
            and action == SuggestedAction.BLOCK
        ):
            return SuggestedAction.REVIEW
        return action

    def to_action(self, engine: EngineKind, result: AnalysisResult) -> ActionRecord:
        action = self.final_action(engine, result.verdict)

        related_id = None
        top = result.top_candidate
        if engine == EngineKind.DUPLICATE and top is not None and action in RELATED_ACTIONS:
            related_id = top.target_id

        return ActionRecord(
            document_id=result.document.id,
            suggested_action=action,
            confidence=result.verdict.confidence,
            reasoning=result.verdict.reasoning,
            related_document_id=related_id,
        )

    def summarize(
        self,
        states: dict[int, DocumentState],
        analyzed: Sequence[AnalysisResult],
        failed: int = 0,
        embedding_failures: int = 0,
    ) -> RunSummary:
        """
        Counts for a finished run.

        Every document ends up reported or suppressed; failed documents and
        documents without an embedding count as suppressed.
        """
        reported = [r for r in analyzed if states.get(r.document.id) == DocumentState.REPORTED]
        return RunSummary(
            total_analyzed=len(states),
            reported=len(reported),
            suppressed=sum(1 for s in states.values() if s == DocumentState.SUPPRESSED),
            failed=failed,
            embedding_failures=embedding_failures,
            fallback_count=sum(1 for r in analyzed if r.verdict.is_fallback),
            spam_count=sum(1 for r in reported if r.verdict.is_spam),
            low_quality_count=sum(1 for r in reported if r.verdict.is_low_quality),
            slop_count=sum(1 for r in reported if r.verdict.is_slop),
        )
