"""
Application settings with environment variable support.

Configuration is loaded from environment variables with optional .env file.
Azure OpenAI settings override OpenAI when fully configured.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # OpenAI settings (default provider)
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    openai_embedding_model: str = Field(
        default="text-embedding-3-small", alias="OPENAI_EMBEDDING_MODEL"
    )

    # Azure OpenAI settings (overrides OpenAI if all are set)
    azure_openai_endpoint: Optional[str] = Field(
        default=None, alias="AZURE_OPENAI_ENDPOINT"
    )
    azure_openai_api_key: Optional[str] = Field(
        default=None, alias="AZURE_OPENAI_API_KEY"
    )
    azure_openai_deployment_name: Optional[str] = Field(
        default=None, alias="AZURE_OPENAI_DEPLOYMENT_NAME"
    )
    azure_openai_api_version: str = Field(
        default="2024-02-15-preview", alias="AZURE_OPENAI_API_VERSION"
    )
    azure_openai_embedding_deployment: Optional[str] = Field(
        default=None, alias="AZURE_OPENAI_EMBEDDING_DEPLOYMENT"
    )

    # GitHub corpus settings
    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_api_url: str = Field(
        default="https://api.github.com", alias="GITHUB_API_URL"
    )

    # LangSmith settings
    langchain_api_key: Optional[str] = Field(default=None, alias="LANGCHAIN_API_KEY")
    langchain_project: str = Field(default="repo-triage", alias="LANGCHAIN_PROJECT")
    langchain_tracing_v2: bool = Field(default=True, alias="LANGCHAIN_TRACING_V2")

    # Scheduler settings
    embedding_max_concurrent: int = Field(
        default=8, ge=1, alias="EMBEDDING_MAX_CONCURRENT"
    )
    adjudication_max_concurrent: int = Field(
        default=1, ge=1, alias="ADJUDICATION_MAX_CONCURRENT"
    )
    quality_min_interval: float = Field(
        default=1.0, ge=0.0, alias="QUALITY_MIN_INTERVAL"
    )
    duplicate_min_interval: float = Field(
        default=0.0, ge=0.0, alias="DUPLICATE_MIN_INTERVAL"
    )
    analysis_deadline_seconds: Optional[float] = Field(
        default=None, gt=0.0, alias="ANALYSIS_DEADLINE_SECONDS"
    )

    # LLM behavior settings
    llm_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=1024, ge=1)
    provider_timeout: float = Field(default=60.0, gt=0.0)

    def is_azure_configured(self) -> bool:
        """Check if Azure OpenAI is fully configured."""
        return all([
            self.azure_openai_endpoint,
            self.azure_openai_api_key,
            self.azure_openai_deployment_name,
        ])

    def embedding_model(self) -> str:
        """Model or Azure deployment name passed to the embeddings endpoint."""
        if self.is_azure_configured() and self.azure_openai_embedding_deployment:
            return self.azure_openai_embedding_deployment
        return self.openai_embedding_model

    def is_openai_configured(self) -> bool:
        """Check if any OpenAI-compatible provider is configured."""
        return bool(self.openai_api_key) or self.is_azure_configured()

    def is_langsmith_configured(self) -> bool:
        """Check if LangSmith is configured."""
        return self.langchain_api_key is not None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
