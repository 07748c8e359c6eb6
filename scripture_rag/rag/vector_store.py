"""
Vector Store Interface for Qdrant

Manages storage and retrieval of scripture chunk embeddings in Qdrant.

Features:
- Lazy connection, opened on first use and reused for the store's lifetime
- Collection management (ensure, clear, info)
- Single-record inserts that never persist a chunk without a full vector
- Similarity search with an oversampled HNSW candidate pool
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    VectorParams,
    PointStruct,
    PayloadSchemaType,
    SearchParams
)

from .config import RAGConfig
from .chunker import Chunk
from .exceptions import StoreQueryError, StoreWriteError

logger = logging.getLogger(__name__)

# Namespace for deterministic point ids
_POINT_NAMESPACE = uuid.UUID("6f1c2b1e-4d0a-4c7e-9a51-3b8f6f0d2a77")


@dataclass(frozen=True)
class EmbeddedChunk:
    """A chunk together with its embedding vector."""
    chunk: Chunk
    embedding: List[float]
    document: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class RetrievalResult:
    """One ranked search hit."""
    text: str
    source: str
    score: float
    chunk_index: Optional[int] = None


class VectorStore:
    """Interface to Qdrant vector database."""

    def __init__(self, config: RAGConfig, client: Optional[QdrantClient] = None):
        """
        Initialize vector store.

        The Qdrant connection is not opened here; it is created on first
        use and then reused. Pass ``client`` to supply an already-open
        connection (the store will not close it).

        Args:
            config: RAG configuration
            client: Optional pre-built Qdrant client
        """
        self.config = config
        self.collection_name = config.qdrant_collection_name
        self.dimension = config.embedding_dimension
        self.candidate_pool_multiplier = config.candidate_pool_multiplier
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> QdrantClient:
        """Qdrant client, connected lazily."""
        if self._client is None:
            self.connect()
        return self._client

    def connect(self) -> QdrantClient:
        """Open the Qdrant connection if it is not open yet."""
        if self._client is None:
            if self.config.qdrant_url == ":memory:":
                logger.info("Using in-memory Qdrant")
                self._client = QdrantClient(location=":memory:")
            else:
                logger.info(f"Connecting to Qdrant at {self.config.qdrant_url}")
                logger.info(f"Qdrant API key configured: {bool(self.config.qdrant_api_key)}")
                self._client = QdrantClient(
                    url=self.config.qdrant_url,
                    api_key=self.config.qdrant_api_key
                )
            self._owns_client = True
            logger.info(f"Using collection: {self.collection_name}")
        return self._client

    def close(self) -> None:
        """
        Close the connection if this store opened it.

        An injected client is left open and stays attached, so later calls
        keep using it instead of connecting to config.qdrant_url.
        """
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
            logger.info("Qdrant connection closed")

    def __enter__(self) -> "VectorStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def collection_exists(self) -> bool:
        return self.client.collection_exists(self.collection_name)

    def ensure_collection(self) -> bool:
        """
        Create the collection if it does not exist.

        Returns:
            True if the collection was created, False if it already existed
        """
        if self.collection_exists():
            logger.info(f"Collection already exists: {self.collection_name}")
            return False

        logger.info(f"Creating collection: {self.collection_name}")
        self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config=VectorParams(
                size=self.dimension,
                distance=Distance.COSINE
            )
        )

        # Payload indexes for filtering by corpus and language
        for field_name in ("source", "language"):
            self.client.create_payload_index(
                collection_name=self.collection_name,
                field_name=field_name,
                field_schema=PayloadSchemaType.KEYWORD
            )

        logger.info("Collection created successfully with payload indexes")
        return True

    def clear(self) -> None:
        """
        Delete every stored chunk by dropping and recreating the collection.

        Raises:
            StoreWriteError: If the drop or the recreate fails. The store
                may then be empty or missing its collection; it is never
                left holding a partial corpus without this error.
        """
        logger.warning(f"Clearing collection: {self.collection_name}")
        try:
            if self.collection_exists():
                self.client.delete_collection(self.collection_name)
            self.ensure_collection()
        except Exception as e:
            raise StoreWriteError(
                f"Failed to clear collection: {e}",
                details={"collection": self.collection_name}
            ) from e
        logger.info("Collection cleared and recreated successfully")

    def insert(self, embedded_chunk: EmbeddedChunk) -> str:
        """
        Store one embedded chunk.

        Args:
            embedded_chunk: Chunk with its embedding

        Returns:
            The point id

        Raises:
            StoreWriteError: If the vector is incomplete or the write fails
        """
        chunk = embedded_chunk.chunk
        embedding = embedded_chunk.embedding

        if not embedding or len(embedding) != self.dimension:
            raise StoreWriteError(
                "Refusing to store chunk without a full embedding",
                details={
                    "source": chunk.source,
                    "chunk_index": chunk.chunk_index,
                    "dimension": len(embedding or []),
                }
            )

        point_id = self.point_id(embedded_chunk)
        payload = {
            "text": chunk.text,
            "source": chunk.source,
            "chunk_index": chunk.chunk_index,
            "language": chunk.language,
            "document": embedded_chunk.document,
            "char_start": chunk.char_start,
            "char_end": chunk.char_end,
            "created_at": embedded_chunk.created_at.isoformat(),
        }

        try:
            self.client.upsert(
                collection_name=self.collection_name,
                points=[PointStruct(id=point_id, vector=list(embedding), payload=payload)],
                wait=True
            )
        except Exception as e:
            raise StoreWriteError(
                f"Failed to store chunk: {e}",
                details={"source": chunk.source, "chunk_index": chunk.chunk_index}
            ) from e

        return point_id

    @staticmethod
    def point_id(embedded_chunk: EmbeddedChunk) -> str:
        """Deterministic id from (document, source, chunk_index)."""
        chunk = embedded_chunk.chunk
        key = f"{embedded_chunk.document}|{chunk.source}|{chunk.chunk_index}"
        return str(uuid.uuid5(_POINT_NAMESPACE, key))

    def search(
        self,
        query_vector: List[float],
        k: Optional[int] = None,
        candidate_pool_multiplier: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> List[RetrievalResult]:
        """
        Search for the chunks most similar to a query vector.

        Args:
            query_vector: Query embedding
            k: Number of results to return (defaults to config.top_k)
            candidate_pool_multiplier: HNSW oversampling factor; the index
                explores k * multiplier candidates before ranking
            timeout: Optional search timeout in seconds

        Returns:
            Results ordered by descending score. Empty when the collection
            is missing or holds no points.

        Raises:
            StoreQueryError: If Qdrant is unreachable or the query fails
        """
        k = k or self.config.top_k
        multiplier = candidate_pool_multiplier or self.candidate_pool_multiplier
        timeout = timeout if timeout is not None else self.config.search_timeout

        try:
            if not self.collection_exists():
                logger.info(f"Collection {self.collection_name} not built yet; no results")
                return []

            params = {
                "collection_name": self.collection_name,
                "query": list(query_vector),
                "limit": k,
                "search_params": SearchParams(hnsw_ef=k * multiplier),
                "with_payload": True,
            }
            if timeout is not None:
                # Whole seconds, at least 1
                params["timeout"] = max(1, math.ceil(timeout))

            points = self.client.query_points(**params).points
        except Exception as e:
            raise StoreQueryError(
                f"Vector search failed: {e}",
                details={"collection": self.collection_name}
            ) from e

        results = [
            RetrievalResult(
                text=point.payload["text"],
                source=point.payload.get("source", "Unknown"),
                score=float(point.score),
                chunk_index=point.payload.get("chunk_index")
            )
            for point in points
        ]
        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def count(self) -> int:
        """
        Count total points in collection.

        Returns:
            Number of points (0 if the collection does not exist)
        """
        if not self.collection_exists():
            return 0
        return self.client.count(self.collection_name, exact=True).count

    def get_collection_info(self) -> Optional[Dict]:
        """
        Get information about the collection.

        Returns:
            Dictionary with collection info, or None if it doesn't exist
        """
        try:
            info = self.client.get_collection(self.collection_name)
            return {
                "name": self.collection_name,
                "points_count": info.points_count,
                "status": str(info.status),
            }
        except Exception as e:
            logger.error(f"Error getting collection info: {e}")
            return None


def get_vector_store(config: Optional[RAGConfig] = None) -> VectorStore:
    """
    Get vector store instance.

    Args:
        config: RAG configuration (optional)

    Returns:
        VectorStore instance (not yet connected)
    """
    if config is None:
        from .config import get_rag_config
        config = get_rag_config()

    return VectorStore(config)
