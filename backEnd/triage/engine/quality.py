"""Spam/quality triage engine."""

import logging
from typing import Optional, Sequence

from ..errors import PartialBatchFailure
from ..observability.tracing import traced
from ..retrieval.similarity import SimilarityIndex
from ..schemas.document import Document
from ..schemas.report import DocumentState, EngineKind
from ..schemas.verdict import SimilarityCandidate
from ..utils.parallel import Deadline
from .base import BaseEngine, EngineRun

logger = logging.getLogger(__name__)


class QualityEngine(BaseEngine):
    """
    Scores every document for spam, low quality and slop.

    There is no candidate gate: every document is adjudicated, one call at
    a time with the configured spacing, and only flagged documents are
    reported. When an embedding provider is given, near-identical items are
    passed to the classifier as context; embedding failures never exclude a
    document from scoring.
    """

    kind = EngineKind.QUALITY

    @traced("quality_engine")
    async def run(
        self,
        documents: Sequence[Document],
        deadline: Optional[Deadline] = None,
    ) -> EngineRun:
        deadline = deadline or Deadline()
        states = {doc.id: DocumentState.PENDING for doc in documents}

        candidates_by_id: dict[int, list[SimilarityCandidate]] = {}
        embedding_failures = 0
        if self.embedder is not None:
            embedded, embedding_failures = await self.embed_corpus(documents, deadline)
            index = SimilarityIndex(embedded, self.thresholds)
            for doc, vector in embedded:
                try:
                    candidates_by_id[doc.id] = index.retrieve(doc, vector)
                except Exception as e:
                    # Scored without candidates
                    logger.exception(PartialBatchFailure(doc.id, e).message)

        pending = [(doc, candidates_by_id.get(doc.id, [])) for doc in documents]
        logger.info(
            f"Scoring {len(pending)} documents "
            f"(min interval {self.min_interval:.1f}s between calls)"
        )
        outcomes = await self.adjudicate_all(pending, deadline)
        return self.finalize(states, pending, outcomes, embedding_failures=embedding_failures)
