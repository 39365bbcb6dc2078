"""
In-memory cosine-similarity retrieval over embedding vectors.

The index is built once per run from the documents that were embedded
successfully and then serves ``retrieve`` for every target document.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from ..config.thresholds import DEFAULT_THRESHOLDS, TriageThresholds
from ..schemas.document import Document, EmbeddingVector
from ..schemas.verdict import SimilarityCandidate
from .evidence import justify

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity ``dot(a, b) / (|a| * |b|)``.

    Returns 0.0 when either norm is zero or the vectors differ in length.
    The result is clamped to [-1, 1] and is never NaN.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    if vec_a.ndim != 1 or vec_a.shape != vec_b.shape:
        return 0.0

    norm_a = float(np.linalg.norm(vec_a))
    norm_b = float(np.linalg.norm(vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    value = float(np.dot(vec_a, vec_b)) / (norm_a * norm_b)
    if not math.isfinite(value):
        return 0.0
    return max(-1.0, min(1.0, value))


class SimilarityIndex:
    """
    Cosine-similarity index over a run's embedded documents.

    Documents are kept in corpus order; ranking ties keep that order so
    results are deterministic for identical input.
    """

    def __init__(
        self,
        entries: Sequence[tuple[Document, EmbeddingVector]],
        thresholds: Optional[TriageThresholds] = None,
    ):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS
        self.documents: list[Document] = [doc for doc, _ in entries]
        self._vectors: list[EmbeddingVector] = [list(vec) for _, vec in entries]
        self._positions: dict[int, int] = {
            doc.id: i for i, doc in enumerate(self.documents)
        }

        # Vectorized path only when every vector has the same dimension
        self._matrix: Optional[np.ndarray] = None
        self._norms: Optional[np.ndarray] = None
        dimensions = {len(vec) for vec in self._vectors}
        if len(dimensions) == 1 and 0 not in dimensions:
            self._matrix = np.asarray(self._vectors, dtype=np.float64)
            self._norms = np.linalg.norm(self._matrix, axis=1)
        elif len(dimensions) > 1:
            logger.warning(
                f"Embedding dimensions differ across corpus {sorted(dimensions)}, "
                "falling back to pairwise similarity"
            )

    def __len__(self) -> int:
        return len(self.documents)

    def __contains__(self, document_id: int) -> bool:
        return document_id in self._positions

    def vector_for(self, document_id: int) -> Optional[EmbeddingVector]:
        """Vector of an indexed document, None if it is not indexed."""
        position = self._positions.get(document_id)
        if position is None:
            return None
        return self._vectors[position]

    def scores(self, vector: Sequence[float]) -> list[float]:
        """Cosine similarity of ``vector`` against every indexed document."""
        if self._matrix is None or len(vector) != self._matrix.shape[1]:
            return [cosine_similarity(vector, other) for other in self._vectors]

        query = np.asarray(vector, dtype=np.float64)
        query_norm = float(np.linalg.norm(query))
        if query_norm == 0.0:
            return [0.0] * len(self._vectors)

        denominators = self._norms * query_norm
        dots = self._matrix @ query
        values = np.divide(
            dots,
            denominators,
            out=np.zeros_like(dots),
            where=denominators > 0,
        )
        values = np.nan_to_num(values, nan=0.0, posinf=0.0, neginf=0.0)
        return np.clip(values, -1.0, 1.0).tolist()

    def retrieve(
        self,
        target: Document,
        vector: Optional[Sequence[float]] = None,
    ) -> list[SimilarityCandidate]:
        """
        Rank the corpus against ``target``.

        Args:
            target: Document to find candidates for
            vector: Target embedding; looked up in the index when omitted

        Returns:
            Up to ``max_candidates`` candidates with score above the
            retrieval threshold, descending by score, never including
            the target itself
        """
        if vector is None:
            vector = self.vector_for(target.id)
            if vector is None:
                return []

        scored = [
            (doc, score)
            for doc, score in zip(self.documents, self.scores(vector))
            if doc.id != target.id and score > self.thresholds.retrieval_min_score
        ]
        # sorted() is stable, ties keep corpus order
        scored = sorted(scored, key=lambda pair: pair[1], reverse=True)
        scored = scored[: self.thresholds.max_candidates]

        return [
            SimilarityCandidate(
                target_id=doc.id,
                score=score,
                justification=justify(target, doc, score, self.thresholds),
                title=doc.title,
            )
            for doc, score in scored
        ]


def retrieve(
    target: Document,
    target_vector: Sequence[float],
    corpus: Sequence[tuple[Document, EmbeddingVector]],
    thresholds: Optional[TriageThresholds] = None,
) -> list[SimilarityCandidate]:
    """Pure one-shot retrieval of ``target`` against ``corpus``."""
    return SimilarityIndex(corpus, thresholds).retrieve(target, target_vector)
