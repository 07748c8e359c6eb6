"""
Exception hierarchy for the RAG pipeline.

Ingestion treats these as per-unit failures (skip and continue); retrieval
degrades to an empty result list when it sees them.
"""

from typing import Any, Dict, Optional


class RAGError(Exception):
    """Base exception for RAG pipeline errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for logging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ExtractionError(RAGError):
    """Source document could not be read or its text extracted."""
    pass


class EmbeddingProviderError(RAGError):
    """Upstream embedding call failed (timeout, auth, quota, bad response)."""
    pass


class StoreWriteError(RAGError):
    """Vector store write or clear failed."""
    pass


class StoreQueryError(RAGError):
    """Vector store search failed."""
    pass
