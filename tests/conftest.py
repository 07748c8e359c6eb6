"""Pytest configuration and shared fixtures."""

from typing import List, Optional

import pytest
from qdrant_client import QdrantClient

from scripture_rag.rag.config import RAGConfig
from scripture_rag.rag.embedding_service import EmbeddingService
from scripture_rag.rag.exceptions import EmbeddingProviderError
from scripture_rag.rag.vector_store import VectorStore

# Topic keywords mapped onto embedding axes
TOPIC_AXES = {
    "bhakti": 0,
    "devotion": 0,
    "dharma": 1,
    "duty": 1,
    "river": 2,
    "cooking": 3,
    "weather": 4,
    "market": 5,
}
DIMENSION = 8


class KeywordEmbeddingService(EmbeddingService):
    """Deterministic embedder: one axis per topic keyword, plus a bias axis."""

    def __init__(self, config: RAGConfig, fail_on: Optional[List[str]] = None):
        super().__init__(config)
        self.fail_on = fail_on or []
        self.calls: List[str] = []
        self.timeouts: List[Optional[float]] = []

    def _embed(self, text: str, timeout: Optional[float] = None) -> List[float]:
        self.calls.append(text)
        self.timeouts.append(timeout)
        if any(marker in text for marker in self.fail_on):
            raise EmbeddingProviderError("quota exceeded")

        vector = [0.0] * self.dimension
        lowered = text.lower()
        for keyword, axis in TOPIC_AXES.items():
            vector[axis] += lowered.count(keyword)
        vector[-1] = 0.1
        return vector


@pytest.fixture
def rag_config():
    """Small, fast configuration backed by in-memory Qdrant."""
    return RAGConfig(
        qdrant_url=":memory:",
        qdrant_collection_name="test_embeddings",
        embedding_dimension=DIMENSION,
        ingest_batch_delay=0.0,
    )


@pytest.fixture
def qdrant_client():
    client = QdrantClient(location=":memory:")
    yield client
    client.close()


@pytest.fixture
def vector_store(rag_config, qdrant_client):
    return VectorStore(rag_config, client=qdrant_client)


@pytest.fixture
def embedding_service(rag_config):
    return KeywordEmbeddingService(rag_config)


@pytest.fixture
def make_embedding_service(rag_config):
    """Factory for embedders that fail on texts containing given markers."""
    def factory(fail_on: Optional[List[str]] = None) -> KeywordEmbeddingService:
        return KeywordEmbeddingService(rag_config, fail_on=fail_on)
    return factory
