"""Tests for lexical/temporal evidence and justification strings."""

import pytest

from triage.retrieval.evidence import (
    evidence_phrases,
    jaccard_similarity,
    justify,
    round_half_up,
    to_percent,
)


class TestJaccard:
    """Tests for token-set Jaccard similarity."""

    def test_identical(self):
        assert jaccard_similarity("Fix the bug", "fix THE bug") == 1.0

    def test_partial_overlap(self):
        """Test |A & B| / |A | B|."""
        assert jaccard_similarity("a b c", "b c d") == pytest.approx(0.5)

    def test_disjoint(self):
        assert jaccard_similarity("a b", "c d") == 0.0

    def test_both_empty(self):
        """Test two empty texts score 0 rather than dividing by zero."""
        assert jaccard_similarity("", "   ") == 0.0


class TestRounding:
    """Tests for half-up rounding."""

    def test_half_rounds_up(self):
        assert round_half_up(76.5) == 77
        assert round_half_up(0.5) == 1

    def test_percent(self):
        assert to_percent(0.95) == 95
        assert to_percent(1.0) == 100


class TestJustify:
    """Tests for justification strings."""

    def test_identical_titles_different_bodies(self, make_document):
        """Test identical titles with unrelated bodies cite only the titles."""
        target = make_document(1, "App crashes when saving file", "Stack trace points at the writer")
        candidate = make_document(2, "App crashes when saving file", "Happens only on windows machines", days=30)

        phrases = evidence_phrases(target, candidate)

        assert "very similar titles" in phrases
        assert "similar content" not in phrases

    def test_general_similarity(self, make_document):
        """Test the general form when no evidence qualifies."""
        target = make_document(1, "Login broken", "cannot sign in")
        candidate = make_document(2, "Dark mode request", "please add themes", days=60)

        assert justify(target, candidate, 0.72) == "General similarity (72%)"

    def test_fixed_phrase_order(self, make_document):
        """Test phrases appear as titles, content, time."""
        body = "the export button does nothing when clicked"
        target = make_document(1, "Export button broken", body)
        candidate = make_document(2, "Export button broken", body, days=2)

        assert justify(target, candidate, 0.93) == (
            "very similar titles, similar content, created around the same time (93% similar)"
        )

    def test_similar_titles_band(self, make_document):
        """Test titles between the two cutoffs are 'similar titles'."""
        target = make_document(1, "search results are wrong order")
        candidate = make_document(2, "search results are wrong", days=30)

        phrases = evidence_phrases(target, candidate)

        assert phrases == ["very similar titles"]

        candidate = make_document(3, "search results are wrong page", days=30)
        assert evidence_phrases(target, candidate) == ["similar titles"]

    def test_empty_body_skips_content_check(self, make_document):
        """Test content similarity requires both bodies."""
        target = make_document(1, "Alpha", "")
        candidate = make_document(2, "Beta", "", days=30)

        assert evidence_phrases(target, candidate) == []

    def test_same_time_window(self, make_document):
        """Test the time phrase needs fewer than seven days between creation."""
        target = make_document(1, "Alpha")
        assert evidence_phrases(target, make_document(2, "Beta", days=6.9)) == [
            "created around the same time"
        ]
        assert evidence_phrases(target, make_document(3, "Gamma", days=7)) == []
