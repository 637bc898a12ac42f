"""Context service - retrieval step of the RAG pipeline."""

import asyncio
import logging
from typing import Optional

from ..errors import ContextUnavailable, CorpusLoadError, EmbeddingUnavailable
from ..models.document import ScoredDocument
from ..protocols.embedder import EmbedderProtocol
from ..strategies.ranking import SimilarityRanker
from .document_store import DocumentStore

logger = logging.getLogger(__name__)


class ContextService:
    """Find the corpus documents most relevant to a question."""

    def __init__(
        self,
        store: DocumentStore,
        embedder: EmbedderProtocol,
        ranker: SimilarityRanker | None = None,
        top_k: int = 3,
        timeout: Optional[float] = None,
    ):
        """Initialize context service.

        Args:
            store: Document store.
            embedder: Embedding service, the same one the store uses.
            ranker: Similarity ranker.
            top_k: Default number of documents to return.
            timeout: Seconds allowed for corpus load and query embedding.
        """
        self._store = store
        self._embedder = embedder
        self._ranker = ranker or SimilarityRanker()
        self._top_k = top_k
        self._timeout = timeout

    async def retrieve(self, question: str, k: Optional[int] = None) -> list[ScoredDocument]:
        """Rank the corpus against a question.

        Args:
            question: User question.
            k: Override number of results.

        Returns:
            Scored documents, most relevant first.

        Raises:
            CorpusLoadError: If the corpus cannot be loaded.
            ContextUnavailable: If the question cannot be embedded.
        """
        k = self._top_k if k is None else k

        try:
            documents = await asyncio.wait_for(self._store.load_all(), self._timeout)
        except asyncio.TimeoutError as e:
            raise CorpusLoadError(f"Corpus load timed out after {self._timeout}s") from e

        try:
            query_embedding = await asyncio.wait_for(
                self._embedder.embed(question), self._timeout
            )
        except EmbeddingUnavailable as e:
            raise ContextUnavailable(f"Question could not be embedded: {e}") from e
        except asyncio.TimeoutError as e:
            raise ContextUnavailable(
                f"Question embedding timed out after {self._timeout}s"
            ) from e

        results = self._ranker.rank(query_embedding, documents, k)

        logger.info(
            f"Context: {len(results)}/{k} docs for '{question[:50]}...'"
        )
        return results

    async def get_context(self, question: str, k: Optional[int] = None) -> list[str]:
        """Return the bodies of the most relevant documents, best first."""
        return [result.content for result in await self.retrieve(question, k)]
