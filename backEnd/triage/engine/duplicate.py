"""Duplicate-detection engine."""

import logging
from typing import Optional, Sequence

from ..errors import PartialBatchFailure
from ..observability.tracing import traced
from ..retrieval.similarity import SimilarityIndex
from ..schemas.document import Document
from ..schemas.report import DocumentState, EngineKind
from ..utils.parallel import Deadline
from .base import BaseEngine, EngineRun, PendingItem

logger = logging.getLogger(__name__)


class DuplicateEngine(BaseEngine):
    """
    Finds likely duplicates among a corpus.

    Flow: embed every document concurrently, rank the corpus for each
    embedded document, adjudicate only documents that have candidates.
    Documents without candidates are suppressed, not reported as
    "not duplicate". A failed embedding excludes that document only.
    """

    kind = EngineKind.DUPLICATE

    @traced("duplicate_engine")
    async def run(
        self,
        documents: Sequence[Document],
        deadline: Optional[Deadline] = None,
    ) -> EngineRun:
        deadline = deadline or Deadline()
        states = {doc.id: DocumentState.PENDING for doc in documents}

        embedded, embedding_failures = await self.embed_corpus(documents, deadline)
        embedded_ids = {doc.id for doc, _ in embedded}
        for doc in documents:
            if doc.id not in embedded_ids:
                states[doc.id] = DocumentState.SUPPRESSED

        index = SimilarityIndex(embedded, self.thresholds)
        pending: list[PendingItem] = []
        failed = 0

        for doc, vector in embedded:
            try:
                candidates = index.retrieve(doc, vector)
            except Exception as e:
                failure = PartialBatchFailure(doc.id, e)
                logger.exception(failure.message)
                failed += 1
                states[doc.id] = DocumentState.SUPPRESSED
                continue

            if self.policy.should_adjudicate(self.kind, candidates):
                pending.append((doc, candidates))
            else:
                states[doc.id] = DocumentState.SUPPRESSED

        logger.info(
            f"{len(pending)} of {len(documents)} documents have duplicate candidates"
        )

        outcomes = await self.adjudicate_all(pending, deadline)
        return self.finalize(states, pending, outcomes, failed, embedding_failures)
