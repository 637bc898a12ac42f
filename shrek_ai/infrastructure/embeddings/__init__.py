"""Embedder implementations."""
from .char_code import CharCodeEmbedder
from .gemini import GeminiEmbedder

__all__ = ["CharCodeEmbedder", "GeminiEmbedder"]
