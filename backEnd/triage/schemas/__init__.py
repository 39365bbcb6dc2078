"""Pydantic schemas for the triage layer."""

from .document import Document, DocumentKind, EmbeddingVector
from .report import (
    ActionRecord,
    AnalysisReport,
    DocumentState,
    EngineKind,
    RunSummary,
)
from .verdict import (
    AnalysisResult,
    SimilarityCandidate,
    SuggestedAction,
    Verdict,
    VerdictFlag,
    VerdictSource,
)

__all__ = [
    "Document",
    "DocumentKind",
    "EmbeddingVector",
    "ActionRecord",
    "AnalysisReport",
    "DocumentState",
    "EngineKind",
    "RunSummary",
    "AnalysisResult",
    "SimilarityCandidate",
    "SuggestedAction",
    "Verdict",
    "VerdictFlag",
    "VerdictSource",
]
