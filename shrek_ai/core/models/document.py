"""Document domain models."""
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class Document:
    """Corpus document.

    The embedding is computed from ``content`` once per process and never
    written back to disk. ``None`` means the document could not be embedded
    and must not be ranked.
    """
    id: str
    title: str
    content: str
    embedding: Optional[np.ndarray] = None

    @property
    def rankable(self) -> bool:
        return self.embedding is not None


@dataclass
class ScoredDocument:
    """Ranker output."""
    document: Document
    score: float

    @property
    def content(self) -> str:
        return self.document.content

    @property
    def title(self) -> str:
        return self.document.title
