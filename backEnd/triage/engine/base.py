"""
Shared machinery for the duplicate and quality engines.

An engine owns no state between runs: every ``run`` call embeds,
retrieves and adjudicates its own corpus and returns an ``EngineRun``.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from ..adjudication.base import BaseAdjudicator
from ..config.thresholds import DEFAULT_THRESHOLDS, TriageThresholds
from ..errors import PartialBatchFailure, ProviderError
from ..providers.base import EmbeddingProvider
from ..schemas.document import Document, EmbeddingVector
from ..schemas.report import ActionRecord, DocumentState, EngineKind, RunSummary
from ..schemas.verdict import AnalysisResult, SimilarityCandidate, Verdict
from ..utils.parallel import CallScheduler, Deadline, parallel_map
from .policy import DecisionPolicy

logger = logging.getLogger(__name__)


PendingItem = tuple[Document, list[SimilarityCandidate]]


@dataclass
class EngineRun:
    """Output of one engine run."""

    results: list[AnalysisResult] = field(default_factory=list)
    actions: list[ActionRecord] = field(default_factory=list)
    summary: RunSummary = field(default_factory=RunSummary)
    states: dict[int, DocumentState] = field(default_factory=dict)


class BaseEngine(ABC):
    """
    Abstract base class for analysis engines.

    Subclasses implement ``run``; this class provides the embedding
    fan-out, the scheduled adjudication and the final ranking.
    """

    kind: EngineKind

    def __init__(
        self,
        adjudicator: BaseAdjudicator,
        embedder: Optional[EmbeddingProvider] = None,
        thresholds: Optional[TriageThresholds] = None,
        policy: Optional[DecisionPolicy] = None,
        embedding_max_concurrent: int = 8,
        adjudication_max_concurrent: int = 1,
        min_interval: float = 0.0,
    ):
        self.adjudicator = adjudicator
        self.embedder = embedder
        self.thresholds = thresholds or DEFAULT_THRESHOLDS
        self.policy = policy or DecisionPolicy(self.thresholds)
        self.embedding_max_concurrent = embedding_max_concurrent
        self.adjudication_max_concurrent = adjudication_max_concurrent
        self.min_interval = min_interval

    @abstractmethod
    async def run(
        self,
        documents: Sequence[Document],
        deadline: Optional[Deadline] = None,
    ) -> EngineRun:
        pass

    async def _embed_one(self, document: Document, deadline: Deadline) -> EmbeddingVector:
        remaining = deadline.remaining()
        if remaining is not None and remaining <= 0:
            raise ProviderError("Deadline reached before embedding", provider="embedding")

        call = self.embedder.embed(document.content)
        try:
            if remaining is None:
                return await call
            return await asyncio.wait_for(call, remaining)
        except asyncio.TimeoutError as e:
            raise ProviderError("Embedding call timed out", provider="embedding") from e

    async def embed_corpus(
        self,
        documents: Sequence[Document],
        deadline: Deadline,
    ) -> tuple[list[tuple[Document, EmbeddingVector]], int]:
        """
        Embed every document concurrently.

        Returns:
            (document, vector) pairs in corpus order for the documents that
            embedded successfully, and the number of failures
        """
        if self.embedder is None:
            raise ValueError(f"{type(self).__name__} requires an embedding provider")

        started = time.perf_counter()
        outcomes = await parallel_map(
            list(documents),
            lambda doc: self._embed_one(doc, deadline),
            max_concurrent=self.embedding_max_concurrent,
            desc="Embedding",
            return_exceptions=True,
        )

        embedded = []
        failures = 0
        for document, outcome in zip(documents, outcomes):
            if isinstance(outcome, BaseException):
                failures += 1
                logger.warning(f"Embedding failed for #{document.id}: {outcome}")
                continue
            embedded.append((document, outcome))

        elapsed = time.perf_counter() - started
        logger.info(
            f"[TIMING] Embedding: {elapsed:.1f}s "
            f"({len(embedded)} ok, {failures} failed)"
        )
        return embedded, failures

    async def adjudicate_all(
        self,
        pending: Sequence[PendingItem],
        deadline: Deadline,
    ) -> list[Union[Verdict, BaseException]]:
        """
        Adjudicate every pending document through a fresh scheduler.

        Each slot holds the Verdict, or the exception that escaped that
        document's pipeline.
        """
        if not pending:
            return []

        scheduler = CallScheduler(
            max_concurrent=self.adjudication_max_concurrent,
            min_interval=self.min_interval,
        )

        async def adjudicate(item: PendingItem) -> Verdict:
            document, candidates = item
            return await scheduler.run(
                lambda: self.adjudicator.adjudicate(
                    document, candidates, timeout=deadline.remaining()
                ),
                deadline,
            )

        started = time.perf_counter()
        outcomes = await parallel_map(
            list(pending),
            adjudicate,
            max_concurrent=len(pending),
            desc="Adjudication",
            return_exceptions=True,
        )
        elapsed = time.perf_counter() - started
        logger.info(f"[TIMING] Adjudication: {elapsed:.1f}s ({len(pending)} documents)")
        return outcomes

    def finalize(
        self,
        states: dict[int, DocumentState],
        pending: Sequence[PendingItem],
        outcomes: Sequence[Union[Verdict, BaseException]],
        failed: int = 0,
        embedding_failures: int = 0,
    ) -> EngineRun:
        """Move each pending document to its terminal state and rank the reported ones."""
        analyzed: list[AnalysisResult] = []

        for (document, candidates), outcome in zip(pending, outcomes):
            if isinstance(outcome, BaseException):
                failure = PartialBatchFailure(document.id, outcome)
                logger.error(failure.message, exc_info=outcome)
                failed += 1
                states[document.id] = DocumentState.SUPPRESSED
                continue

            states[document.id] = DocumentState.ANALYZED
            result = AnalysisResult(
                document=document,
                candidates=list(candidates),
                verdict=outcome,
            )
            analyzed.append(result)
            if self.policy.is_reported(self.kind, result):
                states[document.id] = DocumentState.REPORTED
            else:
                states[document.id] = DocumentState.SUPPRESSED

        reported = self.policy.rank(
            [r for r in analyzed if states[r.document.id] == DocumentState.REPORTED]
        )
        return EngineRun(
            results=reported,
            actions=[self.policy.to_action(self.kind, r) for r in reported],
            summary=self.policy.summarize(states, analyzed, failed, embedding_failures),
            states=states,
        )
