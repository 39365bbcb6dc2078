"""Tests for configuration module."""

import asyncio
import os
from dataclasses import FrozenInstanceError
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from triage.config.settings import Settings, get_settings
from triage.config.llm_providers import get_llm, get_openai_client, is_azure_configured
from triage.config.thresholds import DEFAULT_THRESHOLDS, TriageThresholds
from triage.providers.embeddings import OpenAIEmbeddingProvider


AZURE_ENV = {
    "AZURE_OPENAI_ENDPOINT": "https://test.openai.azure.com",
    "AZURE_OPENAI_API_KEY": "azure-key",
    "AZURE_OPENAI_DEPLOYMENT_NAME": "gpt-4o-mini",
}


class RecordingEmbeddingsClient:
    """Stands in for the async OpenAI client and records the model requested."""

    def __init__(self):
        self.models: list[str] = []
        self.embeddings = SimpleNamespace(create=self.create)

    async def create(self, model: str, input: str):
        self.models.append(model)
        return SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])])


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self):
        """Test default setting values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.openai_model == "gpt-4o-mini"
            assert settings.openai_embedding_model == "text-embedding-3-small"
            assert settings.langchain_project == "repo-triage"
            assert settings.github_api_url == "https://api.github.com"
            assert settings.adjudication_max_concurrent == 1
            assert settings.quality_min_interval == 1.0
            assert settings.analysis_deadline_seconds is None

    def test_scheduler_from_env(self):
        """Test scheduler knobs are read from the environment."""
        env = {
            "EMBEDDING_MAX_CONCURRENT": "4",
            "QUALITY_MIN_INTERVAL": "0.25",
            "ANALYSIS_DEADLINE_SECONDS": "90",
        }
        with patch.dict(os.environ, env):
            settings = Settings(_env_file=None)
            assert settings.embedding_max_concurrent == 4
            assert settings.quality_min_interval == 0.25
            assert settings.analysis_deadline_seconds == 90

    def test_openai_configured(self):
        """Test OpenAI configuration detection."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}):
            settings = Settings(_env_file=None)
            assert settings.openai_api_key == "sk-test"
            assert settings.is_openai_configured()
            assert not settings.is_azure_configured()

    def test_azure_configured(self):
        """Test Azure configuration detection."""
        with patch.dict(os.environ, AZURE_ENV):
            settings = Settings(_env_file=None)
            assert settings.is_azure_configured()

    def test_embedding_model_defaults_to_openai(self):
        with patch.dict(os.environ, {"OPENAI_EMBEDDING_MODEL": "text-embedding-3-large"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.embedding_model() == "text-embedding-3-large"

    def test_azure_embedding_deployment(self):
        """Test the Azure embeddings deployment is used when Azure is configured."""
        env = {**AZURE_ENV, "AZURE_OPENAI_EMBEDDING_DEPLOYMENT": "embeddings-prod"}
        with patch.dict(os.environ, env):
            settings = Settings(_env_file=None)
            assert settings.azure_openai_embedding_deployment == "embeddings-prod"
            assert settings.embedding_model() == "embeddings-prod"

    def test_embedding_deployment_ignored_without_azure(self):
        """Test a stray deployment name does not leak into OpenAI requests."""
        with patch.dict(os.environ, {"AZURE_OPENAI_EMBEDDING_DEPLOYMENT": "embeddings-prod"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.embedding_model() == "text-embedding-3-small"

    def test_langsmith_configured(self):
        """Test LangSmith configuration detection."""
        with patch.dict(os.environ, {"LANGCHAIN_API_KEY": "ls-test"}):
            settings = Settings(_env_file=None)
            assert settings.is_langsmith_configured()


class TestLLMProviders:
    """Tests for LLM provider functions."""

    def test_is_azure_configured_false(self):
        """Test Azure not configured."""
        with patch.dict(os.environ, {}, clear=True):
            get_settings.cache_clear()
            assert not is_azure_configured()

    def test_get_llm_raises_without_config(self):
        """Test error when no LLM configured."""
        with patch.dict(os.environ, {}, clear=True):
            get_settings.cache_clear()
            with pytest.raises(ValueError, match="No LLM provider configured"):
                get_llm()

    def test_get_openai_client_raises_without_config(self):
        with patch.dict(os.environ, {}, clear=True):
            get_settings.cache_clear()
            with pytest.raises(ValueError, match="No LLM provider configured"):
                get_openai_client()

    def test_embedding_provider_sends_azure_deployment(self):
        """Test embeddings are requested from the Azure deployment, not the OpenAI model name."""
        env = {**AZURE_ENV, "AZURE_OPENAI_EMBEDDING_DEPLOYMENT": "embeddings-prod"}
        with patch.dict(os.environ, env, clear=True):
            get_settings.cache_clear()
            client = RecordingEmbeddingsClient()
            provider = OpenAIEmbeddingProvider(client=client)

            vector = asyncio.run(provider.embed("Crash on save"))

        assert vector == [0.1, 0.2]
        assert client.models == ["embeddings-prod"]


class TestThresholds:
    """Tests for the named decision constants."""

    def test_defaults(self):
        assert DEFAULT_THRESHOLDS.retrieval_min_score == 0.6
        assert DEFAULT_THRESHOLDS.max_candidates == 5
        assert DEFAULT_THRESHOLDS.mark_duplicate_above == 80
        assert DEFAULT_THRESHOLDS.review_required_above == 60
        assert DEFAULT_THRESHOLDS.fallback_dampening == 0.8

    def test_immutable(self):
        """Test thresholds cannot be changed in place."""
        with pytest.raises(FrozenInstanceError):
            DEFAULT_THRESHOLDS.max_candidates = 10

    def test_override(self):
        assert TriageThresholds(max_candidates=3).max_candidates == 3
