"""Retrieval service - brute-force semantic search over a document set."""

import asyncio
import logging
from typing import Optional, Sequence

import numpy as np

from ..errors import EmbeddingFailure
from ..models.document import Chunk, Document, ScoredChunk
from ..protocols.embedder import EmbedderProtocol
from ..strategies.chunking import Chunker
from ..strategies.scoring import SimilarityRanker, cosine_similarity
from .embedding_cache import EmbeddingCache

logger = logging.getLogger(__name__)


class RetrievalService:
    """Chunks, embeds and ranks documents against a query."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        chunker: Chunker | None = None,
        ranker: SimilarityRanker | None = None,
        top_k: int = 5,
        max_concurrency: int = 8,
        timeout: float | None = 30.0,
        cache: EmbeddingCache | None = None,
    ):
        """Initialize retrieval service.

        Args:
            embedder: Embedding service.
            chunker: Document chunker.
            ranker: Similarity ranker.
            top_k: Default number of results to return.
            max_concurrency: Max in-flight embedding calls per query.
            timeout: Per-call embedding timeout in seconds, None to disable.
            cache: Optional chunk embedding cache shared across queries.
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")

        self._embedder = embedder
        self._chunker = chunker or Chunker()
        self._ranker = ranker or SimilarityRanker()
        self._top_k = top_k
        self._max_concurrency = max_concurrency
        self._timeout = timeout
        self._cache = cache

    async def _embed(self, text: str) -> np.ndarray:
        """Embed text, normalising every failure to EmbeddingFailure."""
        try:
            vector = await asyncio.wait_for(self._embedder.embed(text), self._timeout)
        except EmbeddingFailure:
            raise
        except asyncio.TimeoutError as e:
            raise EmbeddingFailure(
                f"Embedding timed out after {self._timeout}s"
            ) from e
        except Exception as e:
            raise EmbeddingFailure(f"Failed to generate text embedding: {e}") from e

        vector = np.asarray(vector, dtype=np.float64).ravel()
        if vector.size == 0:
            raise EmbeddingFailure("Embedding service returned an empty vector")
        if not np.all(np.isfinite(vector)):
            raise EmbeddingFailure("Embedding service returned non-finite values")
        return vector

    async def _embed_chunk(
        self, chunk: Chunk, semaphore: asyncio.Semaphore, dimension: int
    ) -> np.ndarray:
        vector = self._cache.get(chunk) if self._cache is not None else None

        if vector is None:
            async with semaphore:
                vector = await self._embed(chunk.content)
            if self._cache is not None and vector.shape[0] == dimension:
                self._cache.put(chunk, vector)

        if vector.shape[0] != dimension:
            raise EmbeddingFailure(
                f"Embedding dimension mismatch: expected {dimension}, "
                f"got {vector.shape[0]}"
            )
        return vector

    async def retrieve(
        self,
        query: str,
        documents: Sequence[Document],
        top_k: Optional[int] = None,
    ) -> list[ScoredChunk]:
        """Return the chunks most similar to the query.

        Args:
            query: Search query.
            documents: Documents to search, in caller order.
            top_k: Override number of results.

        Returns:
            Up to top_k scored chunks, best first. Empty when no document
            has content.

        Raises:
            EmbeddingFailure: If any embedding call fails. The whole
                retrieval is aborted.
            ValueError: If top_k is not positive.
        """
        top_k = self._top_k if top_k is None else top_k
        if top_k < 1:
            raise ValueError(f"top_k must be positive, got {top_k}")

        query_embedding = await self._embed(query)

        chunks: list[Chunk] = []
        for document in documents:
            if not document.content:
                continue
            chunks.extend(self._chunker.chunk_document(document))

        if not chunks:
            logger.info(f"Retrieve: no chunks to score for '{query[:50]}...'")
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)
        tasks = [
            asyncio.ensure_future(
                self._embed_chunk(chunk, semaphore, query_embedding.shape[0])
            )
            for chunk in chunks
        ]
        try:
            embeddings = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        pool = [
            ScoredChunk(chunk=chunk, score=cosine_similarity(query_embedding, vector))
            for chunk, vector in zip(chunks, embeddings)
        ]

        results = self._ranker.rank(pool, top_k)

        logger.info(
            f"Retrieve: returned {len(results)}/{len(pool)} chunks "
            f"from {len(documents)} docs for '{query[:50]}...'"
        )
        return results
