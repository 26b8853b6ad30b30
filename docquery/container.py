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


def _build_embedder(settings: Settings):
    if settings.embedding_provider == "sentence_transformer":
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.local_embedding_model)

    if settings.embedding_provider == "openai":
        from .infrastructure.embeddings.openai_embedder import OpenAIEmbedder

        return OpenAIEmbedder(
            model=settings.embedding_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            max_retries=settings.openai_max_retries,
        )

    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider}")


def configure_container(settings: Settings, target: Container | None = None) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.
        target: Container to configure, defaults to the module container.

    Returns:
        Configured container.
    """
    from .core.models.history import QueryHistory
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.llm import LLMProtocol
    from .core.services.analysis_service import AnalysisService
    from .core.services.answer_service import AnswerService
    from .core.services.embedding_cache import EmbeddingCache
    from .core.services.query_service import QueryService
    from .core.services.retrieval_service import RetrievalService
    from .core.strategies.chunking import Chunker
    from .infrastructure.llm.openai_client import OpenAIClient

    c = target if target is not None else container

    c.register(EmbedderProtocol, lambda: _build_embedder(settings), singleton=True)

    c.register(
        LLMProtocol,
        lambda: OpenAIClient(
            model=settings.llm_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            max_retries=settings.openai_max_retries,
        ),
        singleton=True,
    )

    c.register(QueryHistory, QueryHistory, singleton=True)

    c.register(
        RetrievalService,
        lambda: RetrievalService(
            embedder=c.resolve(EmbedderProtocol),
            chunker=Chunker(settings.chunk_size),
            top_k=settings.rag_top_k,
            max_concurrency=settings.embed_concurrency,
            timeout=settings.request_timeout,
            cache=EmbeddingCache() if settings.embedding_cache_enabled else None,
        ),
        singleton=True,
    )

    c.register(
        AnswerService,
        lambda: AnswerService(
            llm=c.resolve(LLMProtocol),
            snippet_length=settings.snippet_length,
            temperature=settings.llm_temperature,
            timeout=settings.request_timeout,
        ),
        singleton=True,
    )

    c.register(
        QueryService,
        lambda: QueryService(
            retrieval_service=c.resolve(RetrievalService),
            answer_service=c.resolve(AnswerService),
            history=c.resolve(QueryHistory),
            top_k=settings.rag_top_k,
        ),
        singleton=True,
    )

    c.register(
        AnalysisService,
        lambda: AnalysisService(llm=c.resolve(LLMProtocol)),
        singleton=True,
    )

    logger.info("Container configured")
    return c
