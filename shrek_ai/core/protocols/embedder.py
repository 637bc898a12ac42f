"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable
import numpy as np


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for embedding service."""

    async def embed(self, text: str) -> np.ndarray:
        """Embed a single text.

        Args:
            text: Text to embed.

        Returns:
            Flat embedding vector.

        Raises:
            EmbeddingUnavailable: If the backend fails or returns no vector.
        """
        ...
