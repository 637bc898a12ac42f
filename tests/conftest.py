"""Shared pytest fixtures for shrek-ai tests.

Provides in-memory corpus sources, counting embedders and a fake LLM so
the pipeline runs without network access.
"""

import asyncio
from collections import Counter
from collections.abc import AsyncGenerator

import numpy as np
import pytest

from shrek_ai.container import Container
from shrek_ai.core.errors import EmbeddingUnavailable, GenerationFailure
from shrek_ai.core.models.document import Document
from shrek_ai.core.protocols.embedder import EmbedderProtocol
from shrek_ai.core.protocols.llm import LLMProtocol
from shrek_ai.core.services.answer_service import AnswerService
from shrek_ai.core.services.chat_service import ChatService
from shrek_ai.core.services.context_service import ContextService
from shrek_ai.core.services.document_store import DocumentStore
from shrek_ai.infrastructure.embeddings import CharCodeEmbedder

SAMPLE_RECORDS = [
    {"id": "swamp", "title": "The Swamp", "content": "Shrek lives in a swamp."},
    {"id": "donkey", "title": "Donkey", "content": "Donkey talks a lot."},
    {"id": "fiona", "title": "Fiona", "content": "Fiona is a princess."},
]


# ============================================================================
# Test doubles
# ============================================================================


class InMemoryCorpus:
    """Corpus source returning fresh documents on every load."""

    def __init__(self, records: list[dict] | None = None, error: Exception | None = None):
        self.records = records if records is not None else SAMPLE_RECORDS
        self.error = error
        self.load_count = 0

    def load(self) -> list[Document]:
        self.load_count += 1
        if self.error is not None:
            raise self.error
        return [Document(id=r["id"], title=r["title"], content=r["content"]) for r in self.records]


class CountingEmbedder:
    """Character-code embedder that counts calls and can fail on demand."""

    def __init__(self, fail_on: set[str] | None = None, delay: float = 0.0):
        self.calls: Counter[str] = Counter()
        self.fail_on = fail_on or set()
        self.delay = delay

    async def embed(self, text: str) -> np.ndarray:
        self.calls[text] += 1
        # Yield so concurrent callers interleave
        await asyncio.sleep(self.delay)
        if text in self.fail_on:
            raise EmbeddingUnavailable(f"no vector for {text!r}")
        return CharCodeEmbedder.encode(text)


class FakeLLM:
    """LLM double returning a fixed answer or raising."""

    def __init__(
        self,
        answer: str = "",
        error: Exception | None = None,
        tokens: list[str] | None = None,
        delay: float = 0.0,
    ):
        self.answer = answer
        self.error = error
        self.tokens = tokens or []
        self.delay = delay
        self.prompts: list[str] = []
        self.chat_calls: list[dict] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.answer

    async def chat_stream(
        self,
        user_message: str,
        context: str | None = None,
        history: list[dict] | None = None,
    ) -> AsyncGenerator[str, None]:
        self.chat_calls.append(
            {"user_message": user_message, "context": context, "history": history}
        )
        for token in self.tokens:
            if self.delay:
                await asyncio.sleep(self.delay)
            yield token
        if self.error is not None:
            raise self.error


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def corpus() -> InMemoryCorpus:
    return InMemoryCorpus()


@pytest.fixture
def embedder() -> CountingEmbedder:
    return CountingEmbedder()


@pytest.fixture
def store(corpus, embedder) -> DocumentStore:
    return DocumentStore(source=corpus, embedder=embedder)


@pytest.fixture
def context_service(store, embedder) -> ContextService:
    return ContextService(store=store, embedder=embedder, top_k=3)


@pytest.fixture
def fake_llm_class() -> type[FakeLLM]:
    return FakeLLM


@pytest.fixture
def generation_failure() -> GenerationFailure:
    return GenerationFailure("quota exceeded")


def build_container(
    corpus: InMemoryCorpus | None = None,
    embedder: CountingEmbedder | None = None,
    llm: FakeLLM | None = None,
) -> Container:
    """Container wired with test doubles instead of network clients."""
    c = Container()
    corpus = corpus or InMemoryCorpus()
    embedder = embedder or CountingEmbedder()

    c.register(EmbedderProtocol, lambda: embedder, singleton=True)
    c.register(LLMProtocol, lambda: llm, singleton=True)
    c.register(
        DocumentStore,
        lambda: DocumentStore(source=corpus, embedder=c.resolve(EmbedderProtocol)),
        singleton=True,
    )
    c.register(
        ContextService,
        lambda: ContextService(
            store=c.resolve(DocumentStore), embedder=c.resolve(EmbedderProtocol)
        ),
        singleton=True,
    )
    c.register(
        AnswerService,
        lambda: AnswerService(
            context_service=c.resolve(ContextService), llm=c.resolve(LLMProtocol), timeout=5
        ),
        singleton=True,
    )
    c.register(
        ChatService,
        lambda: ChatService(
            llm=c.resolve(LLMProtocol), context_service=c.resolve(ContextService), timeout=5
        ),
        singleton=True,
    )
    return c


@pytest.fixture
def container_factory():
    """Provide build_container for tests that need custom wiring."""
    return build_container


@pytest.fixture
def corpus_class() -> type[InMemoryCorpus]:
    return InMemoryCorpus


@pytest.fixture
def embedder_class() -> type[CountingEmbedder]:
    return CountingEmbedder
