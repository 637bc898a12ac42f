import logging

import numpy as np
from openai import AsyncOpenAI, OpenAIError

from ...core.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class GeminiEmbedder:
    """Embedder backed by the Gemini embedding model (OpenAI-compatible API)."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "text-embedding-004",
    ):
        """Initialize embedder.

        Args:
            client: Shared API client.
            model: Embedding model name.
        """
        self._client = client
        self._model = model

    async def embed(self, text: str) -> np.ndarray:
        """Embed text with a single remote call.

        Raises:
            EmbeddingUnavailable: If the call fails or returns no vector.
        """
        try:
            response = await self._client.embeddings.create(model=self._model, input=text)
        except OpenAIError as e:
            raise EmbeddingUnavailable(f"Embedding request failed: {e}") from e

        data = getattr(response, "data", None)
        vector = data[0].embedding if data else None
        if not vector:
            raise EmbeddingUnavailable("Embedding response has no vector")

        return np.asarray(vector, dtype=np.float64)
