"""
Corpus Ingestion Pipeline

Full reingestion of the scripture corpus into the vector store:

1. Clear the vector store (no incremental updates)
2. For each document: read -> extract text -> cap length -> classify source
   -> chunk -> embed + store chunk by chunk, in small batches
3. Pause between batches to stay under provider rate limits
4. Return an IngestionReport

Failures are isolated per unit: a bad chunk is recorded and skipped, a bad
document is recorded and the run moves on. ingest_corpus() always returns
a report.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from tqdm import tqdm

from ..rag.chunker import Chunk, TextChunker
from ..rag.config import RAGConfig
from ..rag.embedding_service import EmbeddingService, get_embedding_service
from ..rag.language import LanguageDetector, SourceClassifierFn, classify_source
from ..rag.vector_store import EmbeddedChunk, VectorStore, get_vector_store
from .documents import RawDocument
from .extractor import PDFTextExtractor
from .report import (
    ChunkResult,
    DocumentReport,
    DocumentStatus,
    IngestError,
    IngestionReport,
)

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Pipeline for chunking, embedding and storing corpus documents."""

    def __init__(
        self,
        config: RAGConfig,
        extractor: PDFTextExtractor,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        classify_source: SourceClassifierFn = classify_source,
        language_detector: Optional[LanguageDetector] = None,
        sleep: Callable[[float], None] = time.sleep,
        show_progress: bool = False
    ):
        """
        Initialize pipeline.

        Args:
            config: RAG configuration
            extractor: Text extraction provider
            embedding_service: Embedding backend
            vector_store: Destination store
            classify_source: filename -> source label strategy
            language_detector: Optional chunk text -> language tag strategy;
                chunks get config.corpus_language when omitted
            sleep: Delay function (injectable for tests)
            show_progress: Show a tqdm progress bar per document
        """
        self.config = config
        self.extractor = extractor
        self.embedding_service = embedding_service
        self.vector_store = vector_store
        self.classify_source = classify_source
        self.language_detector = language_detector
        self.sleep = sleep
        self.show_progress = show_progress

        self.chunker = TextChunker(config)
        self.batch_size = max(1, config.ingest_batch_size)
        self.batch_delay = config.ingest_batch_delay
        self.concurrency = max(1, config.ingest_concurrency)

    def ingest_corpus(self, documents: Sequence[RawDocument]) -> IngestionReport:
        """
        Rebuild the vector store from the given documents.

        Args:
            documents: Documents to ingest, in order

        Returns:
            IngestionReport with per-document and per-chunk outcomes
        """
        report = IngestionReport()

        logger.info("=" * 60)
        logger.info("STARTING CORPUS INGESTION")
        logger.info("=" * 60)

        try:
            self.vector_store.clear()
        except Exception as e:
            logger.error(f"Could not clear vector store, aborting run: {e}")
            report.store_error = IngestError.from_exception("clear", e)
            return report

        logger.info(f"Ingesting {len(documents)} document(s)")

        executor = None
        if self.concurrency > 1:
            executor = ThreadPoolExecutor(max_workers=self.concurrency)

        try:
            for document in documents:
                report.documents.append(self._ingest_document(document, executor))
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        self._log_summary(report)
        return report

    def _ingest_document(
        self,
        document: RawDocument,
        executor: Optional[ThreadPoolExecutor]
    ) -> DocumentReport:
        doc_report = DocumentReport(name=document.name)
        logger.info(f"Processing: {document.name}")

        stage = "extract"
        try:
            extracted = self.extractor.extract(document.read_bytes())
            doc_report.status = DocumentStatus.EXTRACTED
            doc_report.page_count = extracted.page_count
            doc_report.characters = len(extracted.text)
            logger.info(f"  Pages: {extracted.page_count}, characters: {len(extracted.text)}")

            text = extracted.text
            del extracted
            if len(text) > self.config.max_document_chars:
                logger.warning(
                    f"  {document.name} too large, using first "
                    f"{self.config.max_document_chars} characters"
                )
                text = text[:self.config.max_document_chars]
                doc_report.truncated = True

            stage = "chunk"
            doc_report.source = self.classify_source(document.name)
            chunks = self._chunk(text, doc_report.source)
            # Release the document text before the long embedding phase
            del text
            doc_report.status = DocumentStatus.CHUNKED
            doc_report.chunks_created = len(chunks)
            logger.info(f"  Source: {doc_report.source}, chunks created: {len(chunks)}")

            stage = "embed"
            doc_report.status = DocumentStatus.EMBEDDING
            self._embed_chunks(document.name, chunks, doc_report, executor)

        except Exception as e:
            logger.error(f"Error processing {document.name} ({stage}): {e}")
            doc_report.fail(stage, e)
            return doc_report

        doc_report.status = DocumentStatus.COMPLETED
        logger.info(
            f"  Completed: {doc_report.chunks_embedded}/{doc_report.chunks_created} chunks embedded"
        )
        return doc_report

    def _chunk(self, text: str, source: str) -> List[Chunk]:
        chunks = self.chunker.chunk_text(text, source)
        if self.language_detector is None:
            return chunks
        return [replace(c, language=self.language_detector(c.text)) for c in chunks]

    def _embed_chunks(
        self,
        document_name: str,
        chunks: List[Chunk],
        doc_report: DocumentReport,
        executor: Optional[ThreadPoolExecutor]
    ) -> None:
        def process(chunk: Chunk) -> ChunkResult:
            return self._process_chunk(document_name, chunk)

        with tqdm(
            total=len(chunks),
            desc=document_name,
            unit="chunk",
            disable=not self.show_progress
        ) as progress:
            for i in range(0, len(chunks), self.batch_size):
                batch = chunks[i:i + self.batch_size]

                if executor is not None:
                    results = list(executor.map(process, batch))
                else:
                    results = [process(chunk) for chunk in batch]

                doc_report.chunk_results.extend(results)
                progress.update(len(batch))

                if self.batch_delay > 0:
                    self.sleep(self.batch_delay)

    def _process_chunk(self, document_name: str, chunk: Chunk) -> ChunkResult:
        """Embed and store one chunk; failures become part of the result."""
        stage = "embed"
        try:
            embedding = self.embedding_service.embed_text(chunk.text)
            embedded = EmbeddedChunk(chunk=chunk, embedding=embedding, document=document_name)

            stage = "store"
            point_id = self.vector_store.insert(embedded)
        except Exception as e:
            logger.warning(
                f"  Error on chunk {chunk.chunk_index} of {document_name} ({stage}): {str(e)[:100]}"
            )
            return ChunkResult(chunk=chunk, error=IngestError.from_exception(stage, e))

        # The vector now lives only in the store
        return ChunkResult(chunk=chunk, point_id=point_id)

    def _log_summary(self, report: IngestionReport) -> None:
        summary = report.summary()
        logger.info("=" * 60)
        logger.info("INGESTION COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Documents processed:   {summary['documents_processed']}/{summary['documents_total']}")
        logger.info(f"Chunks embedded:       {summary['chunks_embedded']}")
        logger.info(f"Chunk failures:        {summary['chunk_failures']}")
        for failure in summary["failures"]:
            logger.info(f"  Failed: {failure['document']} ({failure['stage']}): {failure['error']}")
        logger.info(f"Collection:            {self.vector_store.collection_name}")


def create_ingestion_pipeline(
    config: Optional[RAGConfig] = None,
    show_progress: bool = True
) -> IngestionPipeline:
    """
    Build a pipeline wired to the configured embedding backend and store.

    Args:
        config: Optional RAG configuration
        show_progress: Show tqdm progress bars

    Returns:
        IngestionPipeline instance
    """
    if config is None:
        from ..rag.config import get_rag_config
        config = get_rag_config()

    return IngestionPipeline(
        config=config,
        extractor=PDFTextExtractor(),
        embedding_service=get_embedding_service(config),
        vector_store=get_vector_store(config),
        show_progress=show_progress
    )
