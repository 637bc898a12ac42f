import logging

import numpy as np

logger = logging.getLogger(__name__)


class CharCodeEmbedder:
    """Credential-free fallback embedder.

    Maps every character to ``(code point % 100) / 100``, so the vector is as
    long as the text. This is NOT a semantic embedding: rankings built on it
    are close to arbitrary. It only keeps the pipeline runnable for demos and
    tests when no embedding backend is configured.
    """

    def __init__(self):
        logger.warning("Embedding fallback active: character-code vectors in use")

    async def embed(self, text: str) -> np.ndarray:
        return self.encode(text)

    @staticmethod
    def encode(text: str) -> np.ndarray:
        return np.array([(ord(ch) % 100) / 100 for ch in text], dtype=np.float64)
