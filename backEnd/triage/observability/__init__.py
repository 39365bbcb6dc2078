"""Observability and tracing for the triage layer."""

from .tracing import (
    configure_langsmith,
    get_tracer,
    TriageTracer,
    traced,
)

__all__ = [
    "configure_langsmith",
    "get_tracer",
    "TriageTracer",
    "traced",
]
