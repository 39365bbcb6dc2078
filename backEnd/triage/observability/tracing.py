"""
LangSmith integration for observability and tracing.

Provides:
- Automatic trace configuration from environment
- Custom tracer for triage run summaries and errors
- Decorator for tracing functions

Every method is a no-op when LangSmith is not configured.
"""

import asyncio
import os
from contextlib import contextmanager
from functools import lru_cache, wraps
from typing import Any, Callable, Optional, TypeVar

from langsmith import Client
from langsmith.run_trees import RunTree

from ..config.settings import get_settings

F = TypeVar("F", bound=Callable[..., Any])


def configure_langsmith() -> Optional[Client]:
    """
    Configure LangSmith from environment variables.

    Required env vars:
    - LANGCHAIN_API_KEY: LangSmith API key
    - LANGCHAIN_PROJECT: Project name (default: "repo-triage")
    - LANGCHAIN_TRACING_V2: Enable tracing (default: true)

    Returns:
        LangSmith client if configured, None otherwise
    """
    settings = get_settings()

    if not settings.is_langsmith_configured():
        return None

    os.environ["LANGCHAIN_TRACING_V2"] = str(settings.langchain_tracing_v2).lower()
    os.environ["LANGCHAIN_PROJECT"] = settings.langchain_project
    os.environ["LANGCHAIN_API_KEY"] = settings.langchain_api_key

    return Client()


class TriageTracer:
    """Structured LangSmith events for triage runs."""

    def __init__(self):
        self._client: Optional[Client] = None
        self._project: str = get_settings().langchain_project

    @property
    def client(self) -> Optional[Client]:
        """Lazy-load LangSmith client."""
        if self._client is None:
            self._client = configure_langsmith()
        return self._client

    @property
    def is_enabled(self) -> bool:
        return self.client is not None

    @contextmanager
    def span(self, name: str, run_type: str = "chain", **metadata):
        """
        Create a trace span with metadata.

        Yields:
            RunTree for the span, or None when tracing is disabled
        """
        if not self.is_enabled:
            yield None
            return

        run = RunTree(
            name=name,
            run_type=run_type,
            extra=metadata,
            project_name=self._project,
        )

        try:
            yield run
            run.end()
            run.post()
        except Exception as e:
            run.end(error=str(e))
            run.post()
            raise

    def log_run_summary(
        self,
        engine: str,
        owner: str,
        repo: str,
        summary: dict[str, Any],
    ) -> None:
        """Record the counts of a finished run."""
        if not self.is_enabled:
            return

        self.client.create_run(
            name=f"{engine}_analysis",
            run_type="chain",
            project_name=self._project,
            inputs={"owner": owner, "repo": repo},
            outputs=summary,
        )

    def log_error(
        self,
        error: Exception,
        context: dict[str, Any],
    ) -> None:
        """Record a fatal run error."""
        if not self.is_enabled:
            return

        self.client.create_run(
            name="error",
            run_type="chain",
            project_name=self._project,
            inputs=context,
            outputs={
                "error_type": type(error).__name__,
                "error_message": str(error),
            },
            error=str(error),
        )


@lru_cache()
def get_tracer() -> TriageTracer:
    """Get singleton tracer instance."""
    return TriageTracer()


def traced(name: Optional[str] = None, run_type: str = "chain"):
    """
    Decorator for tracing functions.

    Example:
        @traced("duplicate_analysis")
        async def analyze(owner: str, repo: str) -> AnalysisReport:
            ...
    """
    def decorator(func: F) -> F:
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            with get_tracer().span(name or func.__name__, run_type=run_type):
                return await func(*args, **kwargs)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with get_tracer().span(name or func.__name__, run_type=run_type):
                return func(*args, **kwargs)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
