"""Shared fixtures: deterministic stub providers and document builders."""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import pytest

from triage.config.settings import get_settings
from triage.errors import ProviderError
from triage.observability.tracing import get_tracer
from triage.schemas.document import Document, DocumentKind


BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_document(
    id: int,
    title: str,
    body: str = "",
    days: float = 0,
    kind: DocumentKind = DocumentKind.ISSUE,
) -> Document:
    return Document(
        id=id,
        title=title,
        body=body,
        created_at=BASE_TIME + timedelta(days=days),
        kind=kind,
    )


class StubEmbedder:
    """Returns fixed vectors keyed by document title, optionally after a delay."""

    def __init__(
        self,
        vectors: dict[str, list[float]],
        failing: Optional[set[str]] = None,
        delays: Optional[dict[str, float]] = None,
    ):
        self.vectors = vectors
        self.failing = failing or set()
        self.delays = delays or {}
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        title = text.split("\n\n", 1)[0]
        self.calls.append(title)
        if title in self.delays:
            await asyncio.sleep(self.delays[title])
        if title in self.failing:
            raise ProviderError(f"embedding unavailable for {title}", provider="embedding")
        return self.vectors[title]


class StubClassifier:
    """Answers every prompt with a canned response, or raises."""

    def __init__(
        self,
        response: Union[str, dict, Exception, None] = None,
        responder=None,
        delay: float = 0.0,
    ):
        self.response = response
        self.responder = responder
        self.delay = delay
        self.prompts: list[str] = []

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append(user_prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.responder is not None:
            return self.responder(user_prompt)
        if isinstance(self.response, Exception):
            raise self.response
        if isinstance(self.response, dict):
            return json.dumps(self.response)
        if self.response is None:
            raise ProviderError("classifier unavailable", provider="stub")
        return self.response


class StubLoader:
    """Serves a fixed corpus, or raises."""

    def __init__(self, documents=None, error: Optional[Exception] = None):
        self.documents = documents or []
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def list_open_items(self, owner: str, repo: str):
        self.calls.append((owner, repo))
        if self.error is not None:
            raise self.error
        return list(self.documents)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from the developer's environment and cached singletons."""
    for name in ("LANGCHAIN_API_KEY", "OPENAI_API_KEY", "AZURE_OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_tracer.cache_clear()
    yield
    get_settings.cache_clear()
    get_tracer.cache_clear()


@pytest.fixture
def make_document():
    return build_document


@pytest.fixture
def stub_embedder():
    return StubEmbedder


@pytest.fixture
def stub_classifier():
    return StubClassifier


@pytest.fixture
def stub_loader():
    return StubLoader
