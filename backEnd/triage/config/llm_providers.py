"""
LLM provider abstraction for OpenAI and Azure OpenAI.

Configured via environment variables:
- Default: OpenAI (OPENAI_API_KEY)
- Azure: Set AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_API_KEY, AZURE_OPENAI_DEPLOYMENT_NAME
  (and AZURE_OPENAI_EMBEDDING_DEPLOYMENT for the embeddings deployment)

Azure settings override OpenAI when fully configured. The chat model backs
the adjudicator; the async OpenAI client backs the embedding provider.
"""

from typing import Optional, Union

from langchain_core.language_models import BaseChatModel
from langchain_openai import AzureChatOpenAI, ChatOpenAI
from openai import AsyncAzureOpenAI, AsyncOpenAI

from .settings import get_settings


NO_PROVIDER_MESSAGE = (
    "No LLM provider configured. Set OPENAI_API_KEY or "
    "AZURE_OPENAI_ENDPOINT + AZURE_OPENAI_API_KEY + AZURE_OPENAI_DEPLOYMENT_NAME"
)


def is_azure_configured() -> bool:
    """Check if Azure OpenAI is configured."""
    return get_settings().is_azure_configured()


def get_llm(model_override: Optional[str] = None) -> BaseChatModel:
    """
    Get the chat model used by the adjudicator.

    Priority:
    1. Azure OpenAI if AZURE_OPENAI_* env vars are all set
    2. OpenAI (default)

    Args:
        model_override: Override the default model name

    Returns:
        Configured LLM instance

    Raises:
        ValueError: If no LLM provider is configured
    """
    settings = get_settings()

    if settings.is_azure_configured():
        return AzureChatOpenAI(
            azure_endpoint=settings.azure_openai_endpoint,
            api_key=settings.azure_openai_api_key,
            deployment_name=model_override or settings.azure_openai_deployment_name,
            api_version=settings.azure_openai_api_version,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.provider_timeout,
        )

    if not settings.openai_api_key:
        raise ValueError(NO_PROVIDER_MESSAGE)

    return ChatOpenAI(
        api_key=settings.openai_api_key,
        model=model_override or settings.openai_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.provider_timeout,
    )


def get_openai_client() -> Union[AsyncOpenAI, AsyncAzureOpenAI]:
    """
    Get the async OpenAI client used for embeddings.

    Raises:
        ValueError: If no provider is configured
    """
    settings = get_settings()

    if settings.is_azure_configured():
        return AsyncAzureOpenAI(
            api_key=settings.azure_openai_api_key,
            azure_endpoint=settings.azure_openai_endpoint,
            api_version=settings.azure_openai_api_version,
            timeout=settings.provider_timeout,
        )

    if not settings.openai_api_key:
        raise ValueError(NO_PROVIDER_MESSAGE)

    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.provider_timeout,
    )
