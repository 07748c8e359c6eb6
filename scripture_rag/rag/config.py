"""
RAG System Configuration

Centralized configuration for all RAG components including:
- Embedding provider settings
- Vector database settings
- Chunking parameters
- Ingestion throttling
- Retrieval parameters
"""

import os
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class RAGConfig(BaseSettings):
    """Configuration for RAG system."""

    # Qdrant Vector Database
    qdrant_url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL (':memory:' for the embedded in-process store)"
    )
    qdrant_api_key: Optional[str] = Field(
        default=None,
        description="Qdrant API key (for cloud deployments)"
    )
    qdrant_collection_name: str = Field(
        default="embeddings",
        description="Name of the Qdrant collection"
    )
    search_timeout: Optional[int] = Field(
        default=None,
        description="Server-side timeout for similarity search, in seconds"
    )

    # Embedding Provider
    embedding_provider: str = Field(
        default="litellm",
        description="Embedding backend: 'litellm' (hosted API) or 'sentence-transformers' (local)"
    )
    embedding_model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model identifier"
    )
    embedding_dimension: int = Field(
        default=1536,
        description="Dimension of embedding vectors (text-embedding-3-small = 1536)"
    )
    embedding_max_chars: int = Field(
        default=8000,
        description="Input is truncated to this many characters before embedding"
    )
    embedding_timeout: float = Field(
        default=30.0,
        description="Embedding request timeout in seconds"
    )
    embedding_api_base: Optional[str] = Field(
        default=None,
        description="Custom base URL for the embedding endpoint"
    )
    embedding_request_delay: float = Field(
        default=0.0,
        description="Delay between sequential embedding calls in embed_batch (seconds)"
    )

    # Text Chunking
    chunk_size: int = Field(
        default=600,
        description="Maximum characters per chunk"
    )
    chunk_overlap: int = Field(
        default=50,
        description="Overlap between chunks in characters"
    )
    min_chunk_size: int = Field(
        default=100,
        description="Chunks must be longer than this many characters to be kept"
    )
    break_point_ratio: float = Field(
        default=0.4,
        description="A sentence break is only used if it lies past this fraction of the window"
    )
    max_chunks_per_document: int = Field(
        default=500,
        description="Hard cap on chunks produced for a single document"
    )
    corpus_language: str = Field(
        default="gujarati",
        description="Language tag stamped on corpus chunks"
    )

    # Ingestion
    max_document_chars: int = Field(
        default=500_000,
        description="Extracted text beyond this length is dropped"
    )
    ingest_batch_size: int = Field(
        default=10,
        description="Chunks embedded per batch"
    )
    ingest_batch_delay: float = Field(
        default=0.2,
        description="Pause between batches to respect provider rate limits (seconds)"
    )
    ingest_concurrency: int = Field(
        default=1,
        description="Parallel embed+insert workers within a batch (1 = sequential)"
    )
    corpus_dir: str = Field(
        default="files",
        description="Directory holding the source documents"
    )
    corpus_file_pattern: str = Field(
        default="gujarati",
        description="Only files whose name contains this substring are ingested"
    )
    corpus_file_suffix: str = Field(
        default=".pdf",
        description="File extension of source documents"
    )

    # Retrieval
    top_k: int = Field(
        default=3,
        description="Number of similar chunks to retrieve"
    )
    candidate_pool_multiplier: int = Field(
        default=10,
        description="Oversampling factor for the approximate nearest-neighbour candidate pool"
    )

    class Config:
        env_prefix = "RAG_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def get_rag_config() -> RAGConfig:
    """Get RAG configuration from environment."""
    # Un-prefixed QDRANT_* variables win over the RAG_ defaults
    overrides = {}
    if os.getenv("QDRANT_URL"):
        overrides["qdrant_url"] = os.getenv("QDRANT_URL")
    if os.getenv("QDRANT_API_KEY"):
        overrides["qdrant_api_key"] = os.getenv("QDRANT_API_KEY")
    return RAGConfig(**overrides)
