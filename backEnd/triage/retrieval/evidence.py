"""
Lexical and temporal evidence between a document and a similar candidate.

Produces the human-readable justification attached to every similarity
candidate, e.g. ``"very similar titles, created around the same time (92% similar)"``.
"""

import math
from typing import Optional

from ..config.thresholds import DEFAULT_THRESHOLDS, TriageThresholds
from ..schemas.document import Document


SECONDS_PER_DAY = 60 * 60 * 24


def tokenize(text: str) -> set[str]:
    """Lower-cased whitespace token set."""
    return set(text.lower().split())


def jaccard_similarity(text1: str, text2: str) -> float:
    """
    Token-set Jaccard similarity ``|A ∩ B| / |A ∪ B|``.

    Two texts without any tokens have similarity 0.
    """
    set1 = tokenize(text1)
    set2 = tokenize(text2)
    union = set1 | set2
    if not union:
        return 0.0
    return len(set1 & set2) / len(union)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (76.5 -> 77)."""
    return int(math.floor(value + 0.5))


def to_percent(score: float) -> int:
    """Score in [0, 1] as a whole percentage."""
    return round_half_up(score * 100)


def days_between(a: Document, b: Document) -> float:
    """Absolute difference between creation timestamps, in days."""
    return abs((a.created_at - b.created_at).total_seconds()) / SECONDS_PER_DAY


def evidence_phrases(
    target: Document,
    candidate: Document,
    thresholds: Optional[TriageThresholds] = None,
) -> list[str]:
    """Evidence phrases in fixed order, each included only if its threshold is met."""
    if thresholds is None:
        thresholds = DEFAULT_THRESHOLDS

    phrases = []

    title_similarity = jaccard_similarity(target.title, candidate.title)
    if title_similarity > thresholds.title_very_similar:
        phrases.append("very similar titles")
    elif title_similarity > thresholds.title_similar:
        phrases.append("similar titles")

    if target.body and candidate.body:
        body_similarity = jaccard_similarity(target.body, candidate.body)
        if body_similarity > thresholds.body_similar:
            phrases.append("similar content")

    if days_between(target, candidate) < thresholds.same_time_window_days:
        phrases.append("created around the same time")

    return phrases


def justify(
    target: Document,
    candidate: Document,
    score: float,
    thresholds: Optional[TriageThresholds] = None,
) -> str:
    """
    Build the justification string for a similarity candidate.

    Args:
        target: Document being analyzed
        candidate: Similar document from the corpus
        score: Cosine similarity between the two
        thresholds: Optional custom thresholds

    Returns:
        Comma-joined evidence with the similarity percentage, or a
        general-similarity sentence when no evidence qualifies
    """
    phrases = evidence_phrases(target, candidate, thresholds)
    percent = to_percent(score)

    if not phrases:
        return f"General similarity ({percent}%)"

    return f"{', '.join(phrases)} ({percent}% similar)"
