"""Tests for the Gemini LLM client against a mocked OpenAI-compatible SDK."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from openai import OpenAIError

from shrek_ai.core.errors import GenerationFailure
from shrek_ai.core.protocols.llm import LLMProtocol
from shrek_ai.infrastructure.llm.gemini_client import SYSTEM_PROMPT, GeminiClient


def _completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


async def _stream(*texts, error: Exception | None = None):
    for text in texts:
        yield _chunk(text)
    if error is not None:
        raise error


def _client(return_value=None, side_effect=None) -> Mock:
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=return_value, side_effect=side_effect)
    return client


class TestGenerate:
    """Test single-shot generation."""

    @pytest.mark.asyncio
    async def test_returns_text(self):
        client = _client(_completion("Paris is the capital."))
        llm = GeminiClient(client, model="gemini-2.0-flash", max_tokens=64, temperature=0.2)

        answer = await llm.generate("Capital of France?")

        assert answer == "Paris is the capital."
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash"
        assert kwargs["messages"] == [{"role": "user", "content": "Capital of France?"}]
        assert kwargs["max_tokens"] == 64
        assert kwargs["temperature"] == 0.2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [_completion(None), SimpleNamespace(choices=[])])
    async def test_missing_text_is_empty(self, response):
        assert await GeminiClient(_client(response)).generate("hi") == ""

    @pytest.mark.asyncio
    async def test_sdk_error_is_generation_failure(self):
        client = _client(side_effect=OpenAIError("invalid api key"))

        with pytest.raises(GenerationFailure, match="invalid api key"):
            await GeminiClient(client).generate("hi")

    def test_satisfies_protocol(self):
        assert isinstance(GeminiClient(_client()), LLMProtocol)


class TestChatStream:
    """Test streamed chat replies."""

    @pytest.mark.asyncio
    async def test_yields_non_empty_tokens(self):
        client = _client(_stream("In a ", None, "", "swamp."))

        tokens = [t async for t in GeminiClient(client).chat_stream("Where?")]

        assert tokens == ["In a ", "swamp."]
        assert client.chat.completions.create.await_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    async def test_builds_messages_with_history_and_context(self):
        client = _client(_stream("ok"))
        history = [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]

        _ = [
            t
            async for t in GeminiClient(client).chat_stream(
                "Where?", context="Shrek lives in a swamp.", history=history
            )
        ]

        messages = client.chat.completions.create.await_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1:3] == history
        assert "Shrek lives in a swamp." in messages[-1]["content"]
        assert messages[-1]["content"].endswith("Question: Where?")

    @pytest.mark.asyncio
    async def test_without_context_sends_raw_message(self):
        client = _client(_stream("ok"))

        _ = [t async for t in GeminiClient(client).chat_stream("Where?")]

        messages = client.chat.completions.create.await_args.kwargs["messages"]
        assert messages[-1] == {"role": "user", "content": "Where?"}

    @pytest.mark.asyncio
    async def test_stream_error_is_generation_failure(self):
        client = _client(_stream("partial", error=OpenAIError("stream reset")))
        tokens = []

        with pytest.raises(GenerationFailure, match="stream reset"):
            async for token in GeminiClient(client).chat_stream("Where?"):
                tokens.append(token)

        assert tokens == ["partial"]
