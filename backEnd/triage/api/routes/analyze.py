"""Analysis endpoints."""

from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...engine.service import TriageService, build_service
from ...schemas.report import AnalysisReport, EngineKind


router = APIRouter(prefix="/analyze", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    """Request to analyze a repository."""

    owner: Optional[str] = Field(default=None, description="Repository owner")
    repo: Optional[str] = Field(default=None, description="Repository name")
    deadline_seconds: Optional[float] = Field(
        default=None, gt=0.0, description="Time budget for the run"
    )


@lru_cache()
def get_service() -> TriageService:
    """Default service built from settings."""
    return build_service()


def to_response(report: AnalysisReport) -> dict[str, Any]:
    body = report.model_dump(mode="json", by_alias=True)
    body["success"] = True
    body["message"] = report.message
    return body


async def _run(
    request: AnalyzeRequest,
    service: TriageService,
    engine: EngineKind,
) -> dict[str, Any]:
    report = await service.analyze(
        request.owner,
        request.repo,
        engine=engine,
        deadline_seconds=request.deadline_seconds,
    )
    return to_response(report)


@router.post("/duplicates")
async def analyze_duplicates(
    request: AnalyzeRequest,
    service: TriageService = Depends(get_service),
):
    """Find open issues that likely duplicate each other."""
    return await _run(request, service, EngineKind.DUPLICATE)


@router.post("/quality")
async def analyze_quality(
    request: AnalyzeRequest,
    service: TriageService = Depends(get_service),
):
    """Flag spam, low-quality and AI-generated contributions."""
    return await _run(request, service, EngineKind.QUALITY)
