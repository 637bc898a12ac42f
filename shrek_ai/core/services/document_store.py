"""Document store - corpus cache with lazily computed embeddings."""

import asyncio
import logging
from typing import Optional

from ..errors import EmbeddingUnavailable
from ..models.document import Document
from ..protocols.corpus import CorpusSourceProtocol
from ..protocols.embedder import EmbedderProtocol

logger = logging.getLogger(__name__)


class DocumentStore:
    """Owns the in-memory corpus for the lifetime of the process.

    The corpus is read and embedded on first use. Concurrent first callers
    share a single load; later calls return the cached documents. A failed
    load is not cached, so the error reaches every caller that waited on it
    and the next call reads the corpus again.
    """

    def __init__(self, source: CorpusSourceProtocol, embedder: EmbedderProtocol):
        """Initialize document store.

        Args:
            source: Corpus source.
            embedder: Embedding service.
        """
        self._source = source
        self._embedder = embedder
        self._documents: Optional[list[Document]] = None
        self._load_task: Optional[asyncio.Future] = None

    @property
    def loaded(self) -> bool:
        return self._documents is not None

    async def load_all(self) -> list[Document]:
        """Return the corpus, loading and embedding it at most once.

        Returns:
            Documents in corpus order.

        Raises:
            CorpusLoadError: If the corpus cannot be read.
        """
        if self._documents is not None:
            return self._documents

        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._load())
        task = self._load_task

        try:
            # A cancelled caller must not cancel the load other callers share
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            raise
        except Exception:
            if self._load_task is task:
                self._load_task = None
            raise

    async def _load(self) -> list[Document]:
        documents = await asyncio.to_thread(self._source.load)

        await asyncio.gather(*(self._embed_document(doc) for doc in documents))

        rankable = sum(1 for doc in documents if doc.rankable)
        logger.info(f"Corpus loaded: {rankable}/{len(documents)} documents embedded")

        self._documents = documents
        return documents

    async def _embed_document(self, doc: Document) -> None:
        if doc.embedding is not None:
            return
        try:
            doc.embedding = await self._embedder.embed(doc.content)
        except EmbeddingUnavailable as e:
            doc.embedding = None
            logger.warning(f"Document '{doc.id}' not embedded, excluded from ranking: {e}")
