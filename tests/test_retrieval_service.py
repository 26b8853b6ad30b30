"""
Tests for the retrieval service.
"""
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest

from docquery.core.errors import EmbeddingFailure
from docquery.core.models.document import Document
from docquery.core.services.embedding_cache import EmbeddingCache
from docquery.core.services.retrieval_service import RetrievalService
from docquery.core.strategies.chunking import Chunker
from docquery.core.strategies.scoring import cosine_similarity

from .conftest import FakeEmbedder, letter_vector


@pytest.fixture
def documents():
    return [
        Document(
            id=1,
            name="Auth Spec",
            content="The system supports SSO. It requires OAuth2. Mobile support is planned.",
        ),
        Document(
            id=2,
            name="Billing Spec",
            content="Invoices are sent monthly. Payments use cards. Refunds take five days.",
        ),
    ]


class TestRetrieve:

    @pytest.mark.asyncio
    async def test_single_document_single_chunk(self, fake_embedder, auth_document):
        service = RetrievalService(fake_embedder)

        results = await service.retrieve("What auth does it require?", [auth_document])

        assert len(results) == 1
        assert results[0].document_id == 1
        assert results[0].document_name == "Auth Spec"
        assert results[0].rank == 1
        assert results[0].content == (
            "The system supports SSO. It requires OAuth2. Mobile support is planned"
        )

    @pytest.mark.asyncio
    async def test_top_score_is_max_similarity_across_documents(self, fake_embedder, documents):
        service = RetrievalService(fake_embedder, chunker=Chunker(30))
        query = "How are refunds paid?"

        results = await service.retrieve(query, documents, top_k=1)

        chunker = Chunker(30)
        all_scores = [
            cosine_similarity(letter_vector(query), letter_vector(c.content))
            for d in documents
            for c in chunker.chunk_document(d)
        ]
        assert len(results) == 1
        assert results[0].score == pytest.approx(max(all_scores))

    @pytest.mark.asyncio
    async def test_results_sorted_and_limited(self, fake_embedder, documents):
        service = RetrievalService(fake_embedder, chunker=Chunker(30), top_k=4)

        results = await service.retrieve("payments", documents)

        assert len(results) == 4
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_empty_corpus(self, fake_embedder):
        service = RetrievalService(fake_embedder)

        assert await service.retrieve("anything", [], top_k=5) == []
        assert fake_embedder.calls == ["anything"]

    @pytest.mark.asyncio
    async def test_skips_documents_without_content(self, fake_embedder, auth_document):
        service = RetrievalService(fake_embedder)
        empty = Document(id=2, name="Empty", content="")

        results = await service.retrieve("oauth", [empty, auth_document])

        assert [r.document_id for r in results] == [1]

    @pytest.mark.asyncio
    async def test_embeds_query_once_and_each_chunk_once(self, fake_embedder, documents):
        service = RetrievalService(fake_embedder, chunker=Chunker(30))
        chunk_count = sum(len(Chunker(30).chunk(d.content)) for d in documents)

        await service.retrieve("query text", documents)

        assert fake_embedder.calls[0] == "query text"
        assert len(fake_embedder.calls) == 1 + chunk_count

    @pytest.mark.asyncio
    async def test_bounds_in_flight_embeddings(self, documents):
        embedder = FakeEmbedder()
        embedder.delay = 0.01
        service = RetrievalService(embedder, chunker=Chunker(1), max_concurrency=2)

        await service.retrieve("query", documents)

        assert embedder.max_in_flight <= 2

    def test_rejects_non_positive_concurrency(self, fake_embedder):
        with pytest.raises(ValueError):
            RetrievalService(fake_embedder, max_concurrency=0)


class TestRetrieveFailures:

    @pytest.mark.asyncio
    async def test_one_failing_chunk_aborts_retrieval(self, documents):
        embedder = FakeEmbedder(fail_on="Refunds")
        service = RetrievalService(embedder, chunker=Chunker(30))

        with pytest.raises(EmbeddingFailure):
            await service.retrieve("query", documents)

    @pytest.mark.asyncio
    async def test_query_embedding_failure(self, auth_document):
        embedder = FakeEmbedder(fail_on="boom")
        service = RetrievalService(embedder)

        with pytest.raises(EmbeddingFailure):
            await service.retrieve("boom", [auth_document])

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, auth_document):
        embedder = MagicMock()
        embedder.embed = AsyncMock(side_effect=RuntimeError("connection reset"))
        service = RetrievalService(embedder)

        with pytest.raises(EmbeddingFailure) as exc_info:
            await service.retrieve("query", [auth_document])
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_vector_is_failure(self, auth_document):
        embedder = MagicMock()
        embedder.embed = AsyncMock(return_value=np.array([]))
        service = RetrievalService(embedder)

        with pytest.raises(EmbeddingFailure):
            await service.retrieve("query", [auth_document])

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self, auth_document):
        embedder = FakeEmbedder()
        embedder.delay = 0.5
        service = RetrievalService(embedder, timeout=0.01)

        with pytest.raises(EmbeddingFailure, match="timed out"):
            await service.retrieve("query", [auth_document])


class TestEmbeddingCache:

    @pytest.mark.asyncio
    async def test_second_query_reuses_chunk_embeddings(self, fake_embedder, documents):
        cache = EmbeddingCache()
        service = RetrievalService(fake_embedder, chunker=Chunker(30), cache=cache)

        first = await service.retrieve("first", documents)
        calls_after_first = len(fake_embedder.calls)
        second = await service.retrieve("first", documents)

        assert len(fake_embedder.calls) == calls_after_first + 1
        assert cache.hits == len(cache)
        assert [r.score for r in first] == pytest.approx([r.score for r in second])

    @pytest.mark.asyncio
    async def test_changed_content_is_re_embedded(self, fake_embedder, auth_document):
        cache = EmbeddingCache()
        service = RetrievalService(fake_embedder, cache=cache)
        edited = Document(id=1, name="Auth Spec", content="It requires SAML now.")

        await service.retrieve("q", [auth_document])
        await service.retrieve("q", [edited])

        assert "It requires SAML now" in fake_embedder.calls
        assert len(cache) == 2

    def test_evicts_oldest_entry(self):
        from docquery.core.models.document import Chunk

        cache = EmbeddingCache(max_entries=1)
        first = Chunk(document_id=1, document_name="a", content="one", position=0)
        second = Chunk(document_id=1, document_name="a", content="two", position=1)

        cache.put(first, np.ones(2))
        cache.put(second, np.zeros(2))

        assert cache.get(first) is None
        assert cache.get(second) is not None
        assert len(cache) == 1

    def test_overwriting_cached_key_does_not_evict(self):
        from docquery.core.models.document import Chunk

        cache = EmbeddingCache(max_entries=1)
        chunk = Chunk(document_id=1, document_name="a", content="one", position=0)

        cache.put(chunk, np.ones(2))
        cache.put(chunk, np.zeros(2))

        assert len(cache) == 1
        np.testing.assert_allclose(cache.get(chunk), np.zeros(2))


class TestRetrieveValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("top_k", [0, -1])
    async def test_rejects_non_positive_top_k(self, fake_embedder, documents, top_k):
        service = RetrievalService(fake_embedder, chunker=Chunker(1))

        with pytest.raises(ValueError):
            await service.retrieve("one", documents, top_k=top_k)
        assert fake_embedder.calls == []

    @pytest.mark.asyncio
    async def test_rejects_negative_top_k_on_empty_corpus(self, fake_embedder):
        service = RetrievalService(fake_embedder)

        with pytest.raises(ValueError):
            await service.retrieve("one", [], top_k=-3)

    @pytest.mark.asyncio
    async def test_non_finite_chunk_vector_is_failure(self):
        embedder = FakeEmbedder(vectors={"Two": [float("nan")] * 26})
        service = RetrievalService(embedder, chunker=Chunker(1))
        document = Document(id=1, name="Numbers", content="One. Two. Three.")

        with pytest.raises(EmbeddingFailure, match="non-finite"):
            await service.retrieve("zzz", [document], top_k=1)

    @pytest.mark.asyncio
    async def test_dimension_mismatch_is_failure(self):
        embedder = FakeEmbedder(vectors={"Two": [1.0, 2.0]})
        service = RetrievalService(embedder, chunker=Chunker(1))
        document = Document(id=1, name="Numbers", content="One. Two. Three.")

        with pytest.raises(EmbeddingFailure, match="dimension mismatch"):
            await service.retrieve("one", [document])

    @pytest.mark.asyncio
    async def test_failure_cancels_pending_embeddings(self):
        embedder = FakeEmbedder(fail_on="Two")
        embedder.delay = 0.01
        service = RetrievalService(embedder, chunker=Chunker(1), max_concurrency=1)
        document = Document(id=1, name="Numbers", content="One. Two. Three. Four. Five.")

        with pytest.raises(EmbeddingFailure):
            await service.retrieve("q", [document])

        assert len(embedder.calls) < 1 + 5
        assert "Five" not in embedder.calls
        assert embedder.in_flight == 0
