"""Corpus loader implementations."""
from .json_loader import JsonCorpusLoader, parse_documents

__all__ = ["JsonCorpusLoader", "parse_documents"]
