"""
Retrieval Service

Finds the scripture passages most relevant to a user query.

Retrieval is an enhancement to the chat flow, not a requirement: any
failure is logged and turned into an empty result list so the chat can
still answer, only without grounding.
"""

import logging
from typing import List, Optional

from .config import RAGConfig
from .embedding_service import EmbeddingService, get_embedding_service
from .vector_store import RetrievalResult, VectorStore, get_vector_store

logger = logging.getLogger(__name__)


class RetrievalService:
    """Embeds a query and searches the vector store."""

    def __init__(
        self,
        config: RAGConfig,
        embedding_service: EmbeddingService,
        vector_store: VectorStore
    ):
        self.config = config
        self.embedding_service = embedding_service
        self.vector_store = vector_store

    def retrieve(
        self,
        query: str,
        k: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> List[RetrievalResult]:
        """
        Retrieve the top-k passages for a query.

        Every call re-embeds the query; nothing is cached.

        Args:
            query: User question
            k: Number of results (defaults to config.top_k)
            timeout: Caller's request timeout in seconds, passed to both the
                embedding call and the vector search

        Returns:
            Results ordered by descending score; empty on any failure
        """
        if not query or not query.strip():
            return []

        k = k or self.config.top_k

        try:
            query_embedding = self.embedding_service.get_query_embedding(query, timeout=timeout)
            results = self.vector_store.search(
                query_vector=query_embedding,
                k=k,
                candidate_pool_multiplier=self.config.candidate_pool_multiplier,
                timeout=timeout
            )
        except Exception as e:
            logger.warning(f"RAG search error, continuing without context: {e}", exc_info=True)
            return []

        logger.info(f"Retrieved {len(results)} passages (k={k})")
        return results


def create_retrieval_service(config: Optional[RAGConfig] = None) -> RetrievalService:
    """
    Factory function to create a retrieval service.

    Args:
        config: Optional RAG configuration

    Returns:
        RetrievalService wired to the configured embedding backend and store
    """
    if config is None:
        from .config import get_rag_config
        config = get_rag_config()

    return RetrievalService(
        config=config,
        embedding_service=get_embedding_service(config),
        vector_store=get_vector_store(config)
    )
