"""OpenAI/Azure OpenAI embedding provider."""

from typing import Optional, Union

from openai import AsyncAzureOpenAI, AsyncOpenAI

from ..config.llm_providers import get_openai_client
from ..config.settings import get_settings
from ..schemas.document import EmbeddingVector
from .base import with_retry


# text-embedding-3-small accepts 8191 tokens
MAX_INPUT_CHARS = 24000


class OpenAIEmbeddingProvider:
    """Embeds document text with the configured OpenAI embedding model."""

    def __init__(
        self,
        client: Optional[Union[AsyncOpenAI, AsyncAzureOpenAI]] = None,
        model: Optional[str] = None,
    ):
        self.model = model or get_settings().embedding_model()
        self._client = client

    @property
    def client(self) -> Union[AsyncOpenAI, AsyncAzureOpenAI]:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    @with_retry()
    async def embed(self, text: str) -> EmbeddingVector:
        """Return the embedding vector for ``text``."""
        response = await self.client.embeddings.create(
            model=self.model,
            input=text[:MAX_INPUT_CHARS] or " ",
        )
        return list(response.data[0].embedding)
