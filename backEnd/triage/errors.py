"""
Error taxonomy for the triage engine.

- FatalInputError: bad owner/repo or unauthorized corpus access, aborts the run
- CorpusFetchError: corpus could not be loaded, aborts the run
- ProviderError: one embedding/classifier call failed, recovered per document
- AdjudicationValidationError: classifier answered with an invalid verdict
- PartialBatchFailure: unexpected failure inside one document's pipeline
"""

from typing import Optional


class TriageError(Exception):
    """Base exception for all triage errors."""

    error_kind = "triage_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Structured error payload for callers."""
        return {"errorKind": self.error_kind, "message": self.message}


class FatalInputError(TriageError):
    """Invalid request or unauthorized caller. No results are computed."""

    error_kind = "fatal_input"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CorpusFetchError(FatalInputError):
    """The corpus loader failed for a reason other than bad input."""

    error_kind = "corpus_fetch"


class ProviderError(TriageError):
    """An external provider call failed for a single document."""

    error_kind = "provider"

    def __init__(self, message: str, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider


class AdjudicationValidationError(ProviderError):
    """Classifier response was parseable but did not match the verdict schema."""

    error_kind = "validation"

    def __init__(self, message: str):
        super().__init__(message, provider="adjudicator")


class PartialBatchFailure(TriageError):
    """A single document's pipeline raised unexpectedly."""

    error_kind = "partial_batch_failure"

    def __init__(self, document_id: int, cause: BaseException):
        super().__init__(f"Document #{document_id} failed: {cause}")
        self.document_id = document_id
        self.cause = cause
