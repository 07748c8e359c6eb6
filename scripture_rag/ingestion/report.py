"""
Ingestion outcome types.

Each chunk produces a ChunkResult (the stored point id or an
IngestError), each document a DocumentReport, and the run an
IngestionReport. Failures are data here, not exceptions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..rag.chunker import Chunk


class DocumentStatus(str, Enum):
    """Per-document state machine."""
    PENDING = "pending"
    EXTRACTED = "extracted"
    CHUNKED = "chunked"
    EMBEDDING = "embedding"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class IngestError:
    """Why a chunk or a document was skipped."""
    stage: str
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, stage: str, exc: BaseException) -> "IngestError":
        return cls(stage=stage, error_type=type(exc).__name__, message=str(exc))


@dataclass(frozen=True)
class ChunkResult:
    """Result of embedding and storing one chunk."""
    chunk: Chunk
    point_id: Optional[str] = None
    error: Optional[IngestError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.point_id is not None


@dataclass
class DocumentReport:
    """Outcome for a single document."""
    name: str
    source: str = "Unknown"
    status: DocumentStatus = DocumentStatus.PENDING
    page_count: int = 0
    characters: int = 0
    truncated: bool = False
    chunks_created: int = 0
    chunk_results: List[ChunkResult] = field(default_factory=list)
    error: Optional[IngestError] = None

    @property
    def chunks_embedded(self) -> int:
        return sum(1 for r in self.chunk_results if r.ok)

    @property
    def chunk_failures(self) -> List[ChunkResult]:
        return [r for r in self.chunk_results if not r.ok]

    def fail(self, stage: str, exc: BaseException) -> None:
        self.status = DocumentStatus.FAILED
        self.error = IngestError.from_exception(stage, exc)


@dataclass
class IngestionReport:
    """Outcome of a full reingestion run."""
    documents: List[DocumentReport] = field(default_factory=list)
    store_error: Optional[IngestError] = None

    @property
    def documents_processed(self) -> int:
        return sum(1 for d in self.documents if d.status == DocumentStatus.COMPLETED)

    @property
    def total_chunks_embedded(self) -> int:
        return sum(d.chunks_embedded for d in self.documents)

    @property
    def total_chunk_failures(self) -> int:
        return sum(len(d.chunk_failures) for d in self.documents)

    @property
    def failures(self) -> List[DocumentReport]:
        """Documents that failed as a whole."""
        return [d for d in self.documents if d.status == DocumentStatus.FAILED]

    def summary(self) -> Dict[str, Any]:
        return {
            "documents_total": len(self.documents),
            "documents_processed": self.documents_processed,
            "documents_failed": len(self.failures),
            "chunks_embedded": self.total_chunks_embedded,
            "chunk_failures": self.total_chunk_failures,
            "failures": [
                {"document": d.name, "stage": d.error.stage, "error": d.error.message}
                for d in self.failures
                if d.error is not None
            ],
            "store_error": self.store_error.message if self.store_error else None,
        }
