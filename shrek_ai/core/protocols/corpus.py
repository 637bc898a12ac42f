"""Corpus source protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.document import Document


@runtime_checkable
class CorpusSourceProtocol(Protocol):
    """Protocol for the static document corpus."""

    def load(self) -> list[Document]:
        """Read all documents, without embeddings.

        Raises:
            CorpusLoadError: If the corpus is missing or malformed.
        """
        ...
