"""Ranking strategies."""
from .ranking import SimilarityRanker, cosine_similarity

__all__ = [
    "SimilarityRanker",
    "cosine_similarity",
]
