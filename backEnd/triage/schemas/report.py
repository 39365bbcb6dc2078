"""Run-level schemas: action records, summaries and reports."""

from enum import Enum
from typing import Optional

from pydantic import Field

from .verdict import AnalysisResult, CamelModel, SuggestedAction


class EngineKind(str, Enum):
    """Which analysis produced a report."""

    DUPLICATE = "duplicate"
    QUALITY = "quality"


class DocumentState(str, Enum):
    """Per-document lifecycle within one run."""

    PENDING = "pending"
    ANALYZED = "analyzed"
    REPORTED = "reported"
    SUPPRESSED = "suppressed"


class ActionRecord(CamelModel):
    """Recommendation handed to whoever applies labels or comments."""

    document_id: int
    suggested_action: SuggestedAction
    confidence: float
    reasoning: str
    related_document_id: Optional[int] = None


class RunSummary(CamelModel):
    """Counts describing one analysis run."""

    total_analyzed: int = 0
    reported: int = 0
    suppressed: int = 0
    failed: int = 0
    embedding_failures: int = 0
    fallback_count: int = 0
    spam_count: int = 0
    low_quality_count: int = 0
    slop_count: int = 0


class AnalysisReport(CamelModel):
    """Everything one ``analyze`` call returns."""

    engine: EngineKind
    owner: str
    repo: str
    results: list[AnalysisResult] = Field(default_factory=list)
    actions: list[ActionRecord] = Field(default_factory=list)
    summary: RunSummary = Field(default_factory=RunSummary)

    @property
    def message(self) -> str:
        if self.engine == EngineKind.DUPLICATE:
            return (
                f"Analysis complete! Found {len(self.results)} issues "
                "with potential duplicates."
            )
        return f"Analysis complete! Found {len(self.results)} items that may need review."
