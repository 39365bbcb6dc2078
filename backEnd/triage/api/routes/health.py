"""Health check endpoints."""

from fastapi import APIRouter

from ...config.settings import get_settings


router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic health check."""
    return {"status": "healthy", "service": "repo-triage"}


@router.get("/ready")
async def readiness_check():
    """
    Readiness check - verifies providers are configured.

    Without an LLM provider the engines still run, but every verdict
    comes from the fallback policy.
    """
    settings = get_settings()

    checks = {
        "llm_configured": settings.is_openai_configured(),
        "github_token_configured": settings.github_token is not None,
        "langsmith_configured": settings.is_langsmith_configured(),
    }

    return {
        "status": "ready" if checks["llm_configured"] else "degraded",
        "checks": checks,
    }
