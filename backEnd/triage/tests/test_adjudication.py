"""Tests for the duplicate and quality adjudicators."""

import asyncio

import pytest

from triage.adjudication import (
    DuplicateAdjudicator,
    Err,
    Ok,
    QualityAdjudicator,
    average_similarity,
    extract_json_object,
)
from triage.errors import AdjudicationValidationError
from triage.schemas.verdict import SimilarityCandidate, SuggestedAction, VerdictFlag, VerdictSource


def candidate(target_id: int, score: float) -> SimilarityCandidate:
    return SimilarityCandidate(target_id=target_id, score=score, title=f"Issue {target_id}")


VALID_DUPLICATE = {
    "isDuplicate": True,
    "confidence": 88,
    "reasoning": "Same crash in the same module",
    "suggestedAction": "mark_duplicate",
}

VALID_QUALITY = {
    "isSpam": True,
    "isLowQuality": False,
    "isSlop": False,
    "confidence": 0.9,
    "reasoning": "Promotional links",
    "suggestedAction": "block",
    "suggestedLabels": ["spam"],
    "riskFactors": ["Promotional or marketing content"],
}


class TestExtractJson:
    """Tests for JSON extraction from classifier text."""

    def test_bare_object(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_code_block(self):
        """Test objects wrapped in a markdown code block."""
        text = 'Here you go:\n```json\n{"a": 1}\n```'
        assert extract_json_object(text) == {"a": 1}

    def test_surrounded_by_prose(self):
        assert extract_json_object('Verdict: {"a": {"b": 2}} done') == {"a": {"b": 2}}

    def test_malformed(self):
        """Test text without an object raises ValueError."""
        with pytest.raises(ValueError):
            extract_json_object("I think it is a duplicate")

    def test_array_is_not_an_object(self):
        with pytest.raises(ValueError):
            extract_json_object("[1, 2, 3]")


class TestDuplicateAdjudicator:
    """Tests for DuplicateAdjudicator."""

    def test_valid_response(self, make_document, stub_classifier):
        """Test a valid response is used as-is."""
        adjudicator = DuplicateAdjudicator(stub_classifier(VALID_DUPLICATE))

        verdict = asyncio.run(adjudicator.adjudicate(make_document(1, "a"), [candidate(2, 0.9)]))

        assert verdict.source == VerdictSource.ADJUDICATOR
        assert verdict.is_duplicate
        assert verdict.flag == VerdictFlag.DUPLICATE
        assert verdict.confidence == 88
        assert verdict.suggested_action == SuggestedAction.MARK_DUPLICATE

    def test_fallback_when_unavailable(self, make_document, stub_classifier):
        """Test a 95% similar pair falls back to 76 / review_required."""
        adjudicator = DuplicateAdjudicator(stub_classifier(ConnectionError("down")))

        verdict = asyncio.run(adjudicator.adjudicate(make_document(1, "a"), [candidate(2, 0.95)]))

        assert verdict.source == VerdictSource.FALLBACK
        assert verdict.confidence == 76
        assert verdict.suggested_action == SuggestedAction.REVIEW_REQUIRED
        assert not verdict.is_duplicate
        assert verdict.reasoning == (
            "Fallback analysis: Average similarity of 95.0% with 1 similar issues."
        )

    def test_fallback_bands(self, make_document):
        """Test fallback actions across the decision cutoffs."""
        adjudicator = DuplicateAdjudicator(client=None)
        doc = make_document(1, "a")

        high = adjudicator.fallback(doc, [candidate(2, 0.9), candidate(3, 0.85)])
        assert high.suggested_action == SuggestedAction.MARK_DUPLICATE
        assert high.is_duplicate
        assert high.confidence == 70

        middle = adjudicator.fallback(doc, [candidate(2, 0.61)])
        assert middle.suggested_action == SuggestedAction.REVIEW_REQUIRED
        assert middle.confidence == 49

        low = adjudicator.fallback(doc, [candidate(2, 0.55)])
        assert low.suggested_action == SuggestedAction.NOT_DUPLICATE
        assert low.confidence == 44

    def test_out_of_enum_action_rejected(self, make_document, stub_classifier):
        """Test an unknown action triggers the fallback."""
        response = dict(VALID_DUPLICATE, suggestedAction="close_issue")
        adjudicator = DuplicateAdjudicator(stub_classifier(response))

        verdict = asyncio.run(adjudicator.adjudicate(make_document(1, "a"), [candidate(2, 0.95)]))

        assert verdict.is_fallback

    def test_wrong_types_rejected(self):
        """Test string booleans are not coerced."""
        adjudicator = DuplicateAdjudicator(client=None)
        with pytest.raises(AdjudicationValidationError):
            adjudicator.to_verdict(dict(VALID_DUPLICATE, isDuplicate="true"))

    def test_missing_field_rejected(self):
        adjudicator = DuplicateAdjudicator(client=None)
        payload = {k: v for k, v in VALID_DUPLICATE.items() if k != "reasoning"}
        with pytest.raises(AdjudicationValidationError):
            adjudicator.to_verdict(payload)

    def test_confidence_clamped(self):
        """Test out-of-range confidence is clamped into [0, 100]."""
        adjudicator = DuplicateAdjudicator(client=None)
        assert adjudicator.to_verdict(dict(VALID_DUPLICATE, confidence=140)).confidence == 100
        assert adjudicator.to_verdict(dict(VALID_DUPLICATE, confidence=-5)).confidence == 0

    def test_prompt_uses_top_three(self, make_document, stub_classifier):
        """Test the prompt lists at most three candidates and truncates content."""
        classifier = stub_classifier(VALID_DUPLICATE)
        adjudicator = DuplicateAdjudicator(classifier)
        target = make_document(7, "Slow search", "x" * 2000)
        candidates = [candidate(i, 0.9 - i / 100) for i in range(1, 6)]

        asyncio.run(adjudicator.adjudicate(target, candidates))

        prompt = classifier.prompts[0]
        assert "Issue #1:" in prompt and "Issue #3:" in prompt
        assert "Issue #4:" not in prompt
        assert "x" * 1001 not in prompt
        assert "..." in prompt

    def test_zero_timeout_skips_call(self, make_document, stub_classifier):
        """Test an exhausted budget falls back without calling the classifier."""
        classifier = stub_classifier(VALID_DUPLICATE)
        adjudicator = DuplicateAdjudicator(classifier)

        verdict = asyncio.run(
            adjudicator.adjudicate(make_document(1, "a"), [candidate(2, 0.95)], timeout=0)
        )

        assert verdict.is_fallback
        assert classifier.prompts == []

    def test_request_returns_result(self, make_document, stub_classifier):
        """Test request captures success and failure as Ok/Err."""
        doc = make_document(1, "a")
        ok = asyncio.run(DuplicateAdjudicator(stub_classifier(VALID_DUPLICATE)).request(doc, []))
        err = asyncio.run(DuplicateAdjudicator(stub_classifier("not json")).request(doc, []))

        assert isinstance(ok, Ok)
        assert isinstance(err, Err)
        assert err.error.error_kind == "provider"

    def test_average_similarity(self):
        assert average_similarity([]) == 0.0
        assert average_similarity([candidate(1, 0.8), candidate(2, 0.6)]) == pytest.approx(70.0)


class TestQualityAdjudicator:
    """Tests for QualityAdjudicator."""

    def test_valid_response(self, make_document, stub_classifier):
        adjudicator = QualityAdjudicator(stub_classifier(VALID_QUALITY))

        verdict = asyncio.run(adjudicator.adjudicate(make_document(1, "Buy now"), []))

        assert verdict.is_spam
        assert verdict.flag == VerdictFlag.SPAM
        assert verdict.confidence == pytest.approx(0.9)
        assert verdict.suggested_action == SuggestedAction.BLOCK
        assert verdict.suggested_labels == ["spam"]

    def test_malformed_json_falls_back(self, make_document, stub_classifier):
        """Test malformed output yields the conservative review verdict."""
        adjudicator = QualityAdjudicator(stub_classifier("{isSpam: maybe"))

        verdict = asyncio.run(adjudicator.adjudicate(make_document(1, "Hello"), []))

        assert verdict.confidence == pytest.approx(0.3)
        assert verdict.suggested_action == SuggestedAction.REVIEW
        assert not (verdict.is_spam or verdict.is_low_quality or verdict.is_slop)
        assert verdict.suggested_labels == ["needs-review"]
        assert verdict.risk_factors == ["Analysis failed"]
        assert verdict.is_fallback

    def test_flag_priority(self, make_document, stub_classifier):
        """Test spam outranks low quality and slop as the primary flag."""
        response = dict(VALID_QUALITY, isSpam=False, isLowQuality=True, isSlop=True)
        adjudicator = QualityAdjudicator(stub_classifier(response))

        verdict = asyncio.run(adjudicator.adjudicate(make_document(1, "typo"), []))

        assert verdict.flag == VerdictFlag.LOW_QUALITY

    def test_duplicate_action_rejected(self):
        """Test duplicate actions are not valid quality actions."""
        adjudicator = QualityAdjudicator(client=None)
        with pytest.raises(AdjudicationValidationError):
            adjudicator.to_verdict(dict(VALID_QUALITY, suggestedAction="mark_duplicate"))

    def test_prompt_names_pull_requests(self, make_document, stub_classifier):
        from triage.schemas.document import DocumentKind

        classifier = stub_classifier(VALID_QUALITY)
        doc = make_document(3, "Update README", kind=DocumentKind.PULL_REQUEST)

        asyncio.run(QualityAdjudicator(classifier).adjudicate(doc, []))

        assert "GitHub pull request" in classifier.prompts[0]
