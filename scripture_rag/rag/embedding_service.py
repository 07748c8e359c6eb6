"""
Embedding Service

Generates vector embeddings for text.

Backends:
- LiteLLMEmbeddingService (default): hosted embedding API through LiteLLM,
  e.g. OpenAI text-embedding-3-small (1536 dims)
- SentenceTransformerEmbeddingService: local sentence-transformers model,
  no API costs, useful for offline ingestion

Every backend truncates input to a provider-safe length and reports any
upstream failure as EmbeddingProviderError. No retries happen here; retry
policy belongs to the caller.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import litellm
import numpy as np

from .config import RAGConfig
from .exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)


class EmbeddingService(ABC):
    """Service for generating text embeddings."""

    def __init__(self, config: RAGConfig):
        """
        Initialize embedding service.

        Args:
            config: RAG configuration
        """
        self.config = config
        self.model_name = config.embedding_model
        self.dimension = config.embedding_dimension
        self.max_chars = config.embedding_max_chars
        self.request_delay = config.embedding_request_delay

    @abstractmethod
    def _embed(self, text: str, timeout: Optional[float] = None) -> List[float]:
        """Call the backend for one (already truncated) text."""

    def embed_text(self, text: str, timeout: Optional[float] = None) -> List[float]:
        """
        Generate embedding for a single text.

        Args:
            text: Text to embed (truncated to embedding_max_chars)
            timeout: Optional per-call timeout in seconds

        Returns:
            Embedding vector as list of floats

        Raises:
            EmbeddingProviderError: If the backend fails or returns a
                vector of the wrong dimension
        """
        vector = self._embed(self._truncate(text), timeout=timeout)

        if len(vector) != self.dimension:
            raise EmbeddingProviderError(
                "Embedding has unexpected dimension",
                details={"expected": self.dimension, "actual": len(vector)}
            )
        return vector

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for multiple texts.

        Calls are made one after another with embedding_request_delay
        between them. The first failure is raised; callers that need
        per-item isolation should call embed_text themselves.

        Args:
            texts: List of texts to embed

        Returns:
            List of embedding vectors
        """
        if not texts:
            return []

        logger.info(f"Embedding {len(texts)} texts sequentially")

        embeddings = []
        for i, text in enumerate(texts):
            if i and self.request_delay > 0:
                time.sleep(self.request_delay)
            embeddings.append(self.embed_text(text))
        return embeddings

    def get_query_embedding(self, query: str, timeout: Optional[float] = None) -> List[float]:
        """
        Generate embedding for a search query.

        Args:
            query: Search query text
            timeout: Optional request-level timeout in seconds

        Returns:
            Query embedding vector
        """
        # Queries and documents share one embedding space
        return self.embed_text(query, timeout=timeout)

    def similarity(
        self,
        embedding1: List[float],
        embedding2: List[float]
    ) -> float:
        """
        Calculate cosine similarity between two embeddings.

        Args:
            embedding1: First embedding vector
            embedding2: Second embedding vector

        Returns:
            Cosine similarity score
        """
        vec1 = np.array(embedding1)
        vec2 = np.array(embedding2)

        norm1 = np.linalg.norm(vec1)
        norm2 = np.linalg.norm(vec2)

        if norm1 == 0 or norm2 == 0:
            return 0.0

        return float(np.dot(vec1, vec2) / (norm1 * norm2))

    def _truncate(self, text: str) -> str:
        return text[:self.max_chars]


class LiteLLMEmbeddingService(EmbeddingService):
    """Hosted embeddings through LiteLLM's OpenAI-compatible embedding API."""

    def __init__(self, config: RAGConfig):
        super().__init__(config)
        self.timeout = config.embedding_timeout
        self.api_base = config.embedding_api_base

        logger.info(f"Using LiteLLM embedding model: {self.model_name}")

    def _embed(self, text: str, timeout: Optional[float] = None) -> List[float]:
        params = {
            "model": self.model_name,
            "input": [text],
            "timeout": timeout if timeout is not None else self.timeout,
        }
        if self.api_base:
            params["api_base"] = self.api_base

        try:
            response = litellm.embedding(**params)
            return _vector_from_item(response.data[0])
        except Exception as e:
            raise EmbeddingProviderError(
                f"Embedding request failed: {e}",
                details={"model": self.model_name}
            ) from e


class SentenceTransformerEmbeddingService(EmbeddingService):
    """Local embeddings with a sentence-transformers model."""

    def __init__(self, config: RAGConfig, use_gpu: bool = False):
        super().__init__(config)

        # Heavy import, only needed for the local backend
        from sentence_transformers import SentenceTransformer

        device = "cuda" if use_gpu else "cpu"
        logger.info(f"Loading embedding model: {self.model_name}")
        self.model = SentenceTransformer(self.model_name, device=device)
        logger.info(f"Model loaded on device: {device}")

    def _embed(self, text: str, timeout: Optional[float] = None) -> List[float]:
        try:
            embedding = self.model.encode(
                text,
                convert_to_numpy=True,
                show_progress_bar=False
            )
        except Exception as e:
            raise EmbeddingProviderError(
                f"Local embedding failed: {e}",
                details={"model": self.model_name}
            ) from e
        return embedding.tolist()


def _vector_from_item(item: Any) -> List[float]:
    """LiteLLM returns embedding entries either as dicts or as objects."""
    if isinstance(item, dict):
        vector = item["embedding"]
    else:
        vector = item.embedding
    return [float(v) for v in vector]


def get_embedding_service(config: Optional[RAGConfig] = None) -> EmbeddingService:
    """
    Get embedding service instance.

    Args:
        config: RAG configuration (optional, will load from env if not provided)

    Returns:
        EmbeddingService for the configured provider
    """
    if config is None:
        from .config import get_rag_config
        config = get_rag_config()

    provider = config.embedding_provider.lower()
    if provider == "litellm":
        return LiteLLMEmbeddingService(config)
    if provider in ("sentence-transformers", "sentence_transformers", "local"):
        return SentenceTransformerEmbeddingService(config)

    raise ValueError(f"Unknown embedding provider: {config.embedding_provider}")
