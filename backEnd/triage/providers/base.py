"""
Provider interfaces consumed by the engines, plus a base HTTP client.

Engines receive these collaborators through their constructors, so tests
can pass deterministic stubs instead of network clients.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Protocol, Sequence, runtime_checkable

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..schemas.document import Document, EmbeddingVector
from ..utils.parallel import is_rate_limit_error

logger = logging.getLogger(__name__)


@runtime_checkable
class CorpusLoader(Protocol):
    """Supplies the open items of a repository."""

    async def list_open_items(self, owner: str, repo: str) -> Sequence[Document]:
        ...


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Maps text to a fixed-dimension vector. May fail per call."""

    async def embed(self, text: str) -> EmbeddingVector:
        ...


@runtime_checkable
class ClassifierClient(Protocol):
    """Remote classifier returning raw (JSON) text for a prompt."""

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        ...


class RateLimitError(Exception):
    """Raised when a provider answers 429."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: Optional[int] = None):
        super().__init__(message)
        self.status_code = 429
        self.retry_after = retry_after


def is_retryable(error: BaseException) -> bool:
    """Only rate limits and timeouts are worth retrying."""
    return isinstance(error, httpx.TimeoutException) or is_rate_limit_error(error)


def with_retry(max_attempts: int = 3):
    """Decorator adding exponential-backoff retry to async provider calls."""
    def decorator(func):
        return retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=30),
            retry=retry_if_exception(is_retryable),
            reraise=True,
            before_sleep=lambda retry_state: logger.warning(
                f"Retrying {func.__name__} after {retry_state.outcome.exception()}"
            ),
        )(func)
    return decorator


class BaseAPIClient(ABC):
    """Base class for HTTP API clients with a lazily created httpx client."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy initialization of HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self._get_headers(),
                transport=self._transport,
            )
        return self._client

    @abstractmethod
    def _get_headers(self) -> dict[str, str]:
        """Return headers for API requests."""
        pass

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseAPIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
