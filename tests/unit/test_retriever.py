"""Unit tests for the retrieval service."""

from unittest.mock import MagicMock

import pytest

from scripture_rag.rag.chunker import Chunk
from scripture_rag.rag.exceptions import StoreQueryError
from scripture_rag.rag.retriever import RetrievalService
from scripture_rag.rag.vector_store import EmbeddedChunk

BHAKTI_TEXTS = [
    "Bhakti toward Bhagwan is the highest sadhana of the devotee.",
    "True devotion means remembering Bhagwan with love in every act.",
    "One who has bhakti with dharma pleases Bhagwan.",
    "The devotee's bhakti grows through satsang and seva.",
    "Devotion without ego is the essence of the Vachanamrut's bhakti.",
]
UNRELATED_TEXTS = [
    "The river flooded the fields after the rains.",
    "Cooking rice requires water and patience.",
    "The weather in Gadhada was cold that winter.",
    "The market sold grain and cloth.",
    "The river and the market were near the village.",
]


def seed(vector_store, embedding_service, texts_by_source):
    vector_store.clear()
    for source, texts in texts_by_source.items():
        for i, text in enumerate(texts):
            chunk = Chunk(
                text=text, source=source, chunk_index=i,
                language="gujarati", char_start=0, char_end=len(text)
            )
            vector_store.insert(
                EmbeddedChunk(chunk=chunk, embedding=embedding_service.embed_text(text), document=source)
            )


@pytest.fixture
def seeded_service(rag_config, embedding_service, vector_store):
    seed(vector_store, embedding_service, {
        "Vachanamrut": BHAKTI_TEXTS,
        "Swamini Vato": UNRELATED_TEXTS,
    })
    return RetrievalService(rag_config, embedding_service, vector_store)


class TestRetrieve:
    """Tests for RetrievalService.retrieve."""

    def test_topical_query_returns_topical_passages(self, seeded_service):
        results = seeded_service.retrieve("What is devotion?", k=3)

        assert len(results) == 3
        assert all(r.text in BHAKTI_TEXTS for r in results)
        assert all(r.source == "Vachanamrut" for r in results)
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_defaults_to_configured_k(self, seeded_service):
        assert len(seeded_service.retrieve("bhakti")) == 3

    def test_fewer_stored_than_k(self, rag_config, embedding_service, vector_store):
        seed(vector_store, embedding_service, {"Shikshapatri": BHAKTI_TEXTS[:2]})
        service = RetrievalService(rag_config, embedding_service, vector_store)

        assert len(service.retrieve("bhakti", k=5)) == 2

    def test_empty_store(self, rag_config, embedding_service, vector_store):
        service = RetrievalService(rag_config, embedding_service, vector_store)
        assert service.retrieve("What is devotion?") == []

    def test_blank_query_skips_embedding(self, seeded_service, embedding_service):
        calls_before = len(embedding_service.calls)

        assert seeded_service.retrieve("   ") == []
        assert len(embedding_service.calls) == calls_before

    def test_query_embedded_every_call(self, seeded_service, embedding_service):
        calls_before = len(embedding_service.calls)

        seeded_service.retrieve("bhakti")
        seeded_service.retrieve("bhakti")

        assert len(embedding_service.calls) == calls_before + 2


class TestDegradation:
    """Retrieval failures become empty results."""

    def test_embedding_failure(self, rag_config, make_embedding_service, vector_store):
        service = RetrievalService(rag_config, make_embedding_service(["devotion"]), vector_store)

        assert service.retrieve("What is devotion?") == []

    def test_store_failure(self, rag_config, embedding_service, caplog):
        store = MagicMock()
        store.search.side_effect = StoreQueryError("unreachable")
        service = RetrievalService(rag_config, embedding_service, store)

        assert service.retrieve("What is devotion?") == []
        assert "continuing without context" in caplog.text


class TestTimeout:
    def test_timeout_passed_to_embedding_and_search(self, rag_config, embedding_service):
        store = MagicMock()
        store.search.return_value = []
        service = RetrievalService(rag_config, embedding_service, store)

        service.retrieve("bhakti", k=2, timeout=2.5)

        assert embedding_service.timeouts[-1] == 2.5
        kwargs = store.search.call_args.kwargs
        assert kwargs["timeout"] == 2.5
        assert kwargs["k"] == 2
        assert kwargs["candidate_pool_multiplier"] == 10

    def test_no_timeout(self, rag_config, embedding_service):
        store = MagicMock()
        store.search.return_value = []
        service = RetrievalService(rag_config, embedding_service, store)

        service.retrieve("bhakti")

        assert store.search.call_args.kwargs["timeout"] is None
