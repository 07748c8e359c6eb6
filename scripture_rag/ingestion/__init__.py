"""Corpus ingestion: text extraction, document discovery and the embedding pipeline."""

from .documents import RawDocument, discover_documents
from .extractor import ExtractedText, PDFTextExtractor
from .pipeline import IngestionPipeline, create_ingestion_pipeline
from .report import (
    ChunkResult,
    DocumentReport,
    DocumentStatus,
    IngestError,
    IngestionReport,
)

__all__ = [
    "RawDocument",
    "discover_documents",
    "ExtractedText",
    "PDFTextExtractor",
    "IngestionPipeline",
    "create_ingestion_pipeline",
    "ChunkResult",
    "DocumentReport",
    "DocumentStatus",
    "IngestError",
    "IngestionReport",
]
