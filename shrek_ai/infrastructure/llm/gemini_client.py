
import logging
from typing import AsyncIterator

from openai import AsyncOpenAI, OpenAIError

from ...core.errors import GenerationFailure

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Shrek-AI, a friendly conversational assistant.

Dialogue:
- Answer the current message. Use the history only when the message follows up on it.
- Keep greetings, thanks and goodbyes short.

Accuracy:
- When document excerpts are provided, base the answer on them.
- If you do not know, say so plainly."""

PROMPT_WITH_CONTEXT = """Relevant document excerpts:

{context}

---
Question: {question}"""


class GeminiClient:
    """LLM client for Gemini (OpenAI-compatible API)."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gemini-2.0-flash",
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ):
        """Initialize Gemini client.

        Args:
            client: Shared API client.
            model: Model name.
            max_tokens: Max response tokens.
            temperature: Sampling temperature.
        """
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate(self, prompt: str) -> str:
        """Generate a complete answer for a single prompt.

        Args:
            prompt: Prompt text.

        Returns:
            Generated text, empty if the model returned none.

        Raises:
            GenerationFailure: If the request fails.
        """
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except OpenAIError as e:
            raise GenerationFailure(str(e)) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def chat_stream(
        self,
        user_message: str,
        context: str | None = None,
        history: list[dict] | None = None,
    ) -> AsyncIterator[str]:
        """Stream chat response.

        Args:
            user_message: User's message.
            context: RAG context.
            history: Chat history.

        Yields:
            Response tokens.

        Raises:
            GenerationFailure: If the request or the stream fails.
        """
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]

        if history:
            messages.extend(history)

        if context:
            prompt = PROMPT_WITH_CONTEXT.format(context=context, question=user_message)
        else:
            prompt = user_message

        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                stream=True,
            )

            async for chunk in response:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except OpenAIError as e:
            logger.error(f"[chat] Stream error: {e}")
            raise GenerationFailure(str(e)) from e
