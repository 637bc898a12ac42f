"""Domain models."""
from .document import Document, ScoredDocument
from .chat import ChatMessage, ChatHistory
from .stream import AnswerState, StreamEvent

__all__ = [
    "Document",
    "ScoredDocument",
    "ChatMessage",
    "ChatHistory",
    "AnswerState",
    "StreamEvent",
]
