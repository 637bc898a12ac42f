"""Core business services."""
from .document_store import DocumentStore
from .context_service import ContextService
from .answer_service import AnswerService
from .chat_service import ChatService

__all__ = [
    "DocumentStore",
    "ContextService",
    "AnswerService",
    "ChatService",
]
