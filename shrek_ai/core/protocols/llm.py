"""LLM protocol for dependency injection."""
from typing import Protocol, AsyncIterator, runtime_checkable


@runtime_checkable
class LLMProtocol(Protocol):
    """Protocol for LLM client."""

    async def generate(self, prompt: str) -> str:
        """Generate a complete answer for a prompt.

        Args:
            prompt: Full prompt, context included.

        Returns:
            Generated text.

        Raises:
            GenerationFailure: If the backend call fails.
        """
        ...

    def chat_stream(
        self,
        user_message: str,
        context: str | None = None,
        history: list[dict] | None = None,
    ) -> AsyncIterator[str]:
        """Stream chat response from LLM.

        Args:
            user_message: User's message.
            context: RAG context (optional). None means no docs.
            history: Chat history (optional).

        Yields:
            Response tokens.
        """
        ...
