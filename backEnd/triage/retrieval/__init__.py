"""Similarity retrieval and evidence aggregation."""

from .evidence import jaccard_similarity, justify, to_percent
from .similarity import SimilarityIndex, cosine_similarity, retrieve

__all__ = [
    "jaccard_similarity",
    "justify",
    "to_percent",
    "SimilarityIndex",
    "cosine_similarity",
    "retrieve",
]
