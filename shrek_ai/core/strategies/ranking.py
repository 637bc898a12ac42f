import logging
from typing import Sequence

import numpy as np

from ..models.document import Document, ScoredDocument

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity over the overlapping prefix of two vectors.

    Vectors of different length are compared on ``[0, min(len(a), len(b)))``
    only. A zero norm on either side yields exactly ``0.0``.
    """
    n = min(len(a), len(b))
    if n == 0:
        return 0.0

    va = np.asarray(a[:n], dtype=np.float64)
    vb = np.asarray(b[:n], dtype=np.float64)

    denom = np.sqrt(np.dot(va, va)) * np.sqrt(np.dot(vb, vb))
    if denom == 0:
        return 0.0
    return float(np.dot(va, vb) / denom)


class SimilarityRanker:
    """Rank documents against a query embedding by cosine similarity."""

    def rank(
        self,
        query_embedding: Sequence[float],
        documents: Sequence[Document],
        k: int,
    ) -> list[ScoredDocument]:
        """Return at most ``k`` documents, best first.

        Documents without an embedding are never selected. Equal scores
        keep corpus order.

        Args:
            query_embedding: Query vector.
            documents: Corpus in its original order.
            k: Maximum number of results.

        Returns:
            Scored documents in descending score order.
        """
        if k <= 0:
            return []

        scored = [
            ScoredDocument(document=doc, score=cosine_similarity(query_embedding, doc.embedding))
            for doc in documents
            if doc.embedding is not None
        ]

        skipped = len(documents) - len(scored)
        if skipped:
            logger.debug(f"Ranker: {skipped} documents without embedding excluded")

        # list.sort is stable
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:k]
