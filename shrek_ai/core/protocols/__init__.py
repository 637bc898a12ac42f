"""Protocol interfaces for dependency injection."""
from .embedder import EmbedderProtocol
from .corpus import CorpusSourceProtocol
from .llm import LLMProtocol

__all__ = [
    "EmbedderProtocol",
    "CorpusSourceProtocol",
    "LLMProtocol",
]
