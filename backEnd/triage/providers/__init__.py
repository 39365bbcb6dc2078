"""External collaborators: corpus loader, embedding provider, classifier."""

from .base import (
    BaseAPIClient,
    ClassifierClient,
    CorpusLoader,
    EmbeddingProvider,
    RateLimitError,
)
from .classifier import LangChainClassifier
from .embeddings import OpenAIEmbeddingProvider
from .github import GitHubCorpusLoader

__all__ = [
    "BaseAPIClient",
    "ClassifierClient",
    "CorpusLoader",
    "EmbeddingProvider",
    "RateLimitError",
    "LangChainClassifier",
    "OpenAIEmbeddingProvider",
    "GitHubCorpusLoader",
]
