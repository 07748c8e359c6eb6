"""
RAG (Retrieval Augmented Generation) System

This module provides semantic search capabilities over the scripture corpus
(Vachanamrut, Swamini Vato, Shikshapatri).

Components:
- chunker: Splits normalized text into overlapping, sentence-bounded chunks
- language: Language detection and source classification strategies
- embedding_service: Generates vector embeddings through LiteLLM or sentence-transformers
- vector_store: Manages the Qdrant vector database
- retriever: Retrieves relevant passages for a query (fail-open)
- prompts: Composes the system prompt from persona rules and retrieved passages
"""

from .config import RAGConfig, get_rag_config
from .exceptions import (
    RAGError,
    ExtractionError,
    EmbeddingProviderError,
    StoreWriteError,
    StoreQueryError,
)

__all__ = [
    "RAGConfig",
    "get_rag_config",
    "RAGError",
    "ExtractionError",
    "EmbeddingProviderError",
    "StoreWriteError",
    "StoreQueryError",
]
