"""Configuration module for the triage layer."""

from .settings import Settings, get_settings
from .llm_providers import get_llm, get_openai_client, is_azure_configured
from .thresholds import DEFAULT_THRESHOLDS, TriageThresholds

__all__ = [
    "Settings",
    "get_settings",
    "get_llm",
    "get_openai_client",
    "is_azure_configured",
    "DEFAULT_THRESHOLDS",
    "TriageThresholds",
]
