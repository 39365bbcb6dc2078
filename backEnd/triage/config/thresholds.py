"""
Decision thresholds for retrieval, evidence and fallback policy.

The values are the ones the triage heuristics have always used; they are
kept as named constants so they can be tuned without touching the engines.
"""

from dataclasses import dataclass


# Similarity retrieval
RETRIEVAL_MIN_SCORE = 0.6  # strict: score must be greater
MAX_CANDIDATES = 5
ADJUDICATION_CANDIDATES = 3

# Evidence phrases (token-set Jaccard)
TITLE_VERY_SIMILAR = 0.7
TITLE_SIMILAR = 0.5
BODY_SIMILAR = 0.6
SAME_TIME_WINDOW_DAYS = 7

# Duplicate decision cutoffs (percent)
MARK_DUPLICATE_ABOVE = 80.0
REVIEW_REQUIRED_ABOVE = 60.0
FALLBACK_DAMPENING = 0.8

# Quality fallback verdict
QUALITY_FALLBACK_CONFIDENCE = 0.3

# Prompt truncation
TARGET_TEXT_LIMIT = 1000


@dataclass(frozen=True)
class TriageThresholds:
    """Configurable thresholds shared by the duplicate and quality engines."""

    retrieval_min_score: float = RETRIEVAL_MIN_SCORE
    max_candidates: int = MAX_CANDIDATES
    adjudication_candidates: int = ADJUDICATION_CANDIDATES

    title_very_similar: float = TITLE_VERY_SIMILAR
    title_similar: float = TITLE_SIMILAR
    body_similar: float = BODY_SIMILAR
    same_time_window_days: float = SAME_TIME_WINDOW_DAYS

    mark_duplicate_above: float = MARK_DUPLICATE_ABOVE
    review_required_above: float = REVIEW_REQUIRED_ABOVE
    fallback_dampening: float = FALLBACK_DAMPENING

    quality_fallback_confidence: float = QUALITY_FALLBACK_CONFIDENCE
    target_text_limit: int = TARGET_TEXT_LIMIT


DEFAULT_THRESHOLDS = TriageThresholds()
