import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def configure_container(settings: Settings, target: Container | None = None) -> Container:
    """Configure container with all dependencies.

    Without a Gemini credential the fallback embedder is used and no LLM is
    registered, which puts the answer and chat services in echo mode.

    Args:
        settings: Application settings.
        target: Container to fill, the module-level one by default.

    Returns:
        Configured container.
    """
    from openai import AsyncOpenAI

    from .core.protocols.corpus import CorpusSourceProtocol
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.llm import LLMProtocol
    from .core.services.answer_service import AnswerService
    from .core.services.chat_service import ChatService
    from .core.services.context_service import ContextService
    from .core.services.document_store import DocumentStore
    from .infrastructure.document_loaders import JsonCorpusLoader
    from .infrastructure.embeddings import CharCodeEmbedder, GeminiEmbedder
    from .infrastructure.llm.gemini_client import GeminiClient

    c = target if target is not None else container

    if settings.llm_configured:
        c.register(
            AsyncOpenAI,
            lambda: AsyncOpenAI(
                base_url=settings.llm_base_url,
                api_key=settings.gemini_api_key,
                timeout=settings.request_timeout,
            ),
            singleton=True,
        )
        c.register(
            EmbedderProtocol,
            lambda: GeminiEmbedder(c.resolve(AsyncOpenAI), model=settings.embedding_model),
            singleton=True,
        )
        c.register(
            LLMProtocol,
            lambda: GeminiClient(
                c.resolve(AsyncOpenAI),
                model=settings.llm_model,
                max_tokens=settings.llm_max_tokens,
                temperature=settings.llm_temperature,
            ),
            singleton=True,
        )
    else:
        logger.warning("GEMINI_API_KEY not set: echo answers and fallback embeddings")
        c.register(EmbedderProtocol, CharCodeEmbedder, singleton=True)
        c.register(LLMProtocol, lambda: None, singleton=True)

    c.register(
        CorpusSourceProtocol,
        lambda: JsonCorpusLoader(settings.corpus_path),
        singleton=True,
    )

    c.register(
        DocumentStore,
        lambda: DocumentStore(
            source=c.resolve(CorpusSourceProtocol),
            embedder=c.resolve(EmbedderProtocol),
        ),
        singleton=True,
    )

    c.register(
        ContextService,
        lambda: ContextService(
            store=c.resolve(DocumentStore),
            embedder=c.resolve(EmbedderProtocol),
            top_k=settings.rag_top_k,
            timeout=settings.request_timeout,
        ),
        singleton=True,
    )

    c.register(
        AnswerService,
        lambda: AnswerService(
            context_service=c.resolve(ContextService),
            llm=c.resolve(LLMProtocol),
            timeout=settings.request_timeout,
        ),
        singleton=True,
    )

    c.register(
        ChatService,
        lambda: ChatService(
            llm=c.resolve(LLMProtocol),
            context_service=c.resolve(ContextService),
            history_limit=settings.chat_history_limit,
            timeout=settings.request_timeout,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return c
