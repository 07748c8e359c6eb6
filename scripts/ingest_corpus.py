"""
Ingest the Scripture Corpus

This script:
1. Finds the corpus PDFs (by default Gujarati editions in ./files)
2. Clears the Qdrant collection
3. Extracts, chunks and embeds every document
4. Stores the embeddings and prints a summary

Usage:
    # Ingest every Gujarati PDF in ./files
    python scripts/ingest_corpus.py

    # Different corpus directory / file filter
    python scripts/ingest_corpus.py --corpus-dir data/pdfs --pattern ""

    # Tune throughput
    python scripts/ingest_corpus.py --batch-size 20 --concurrency 4
"""

import sys
import json
import logging
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from scripture_rag.ingestion import create_ingestion_pipeline, discover_documents
from scripture_rag.rag.config import get_rag_config

# Load environment
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Rebuild the scripture vector store")
    parser.add_argument("--corpus-dir", help="Directory holding the source PDFs")
    parser.add_argument("--pattern", help="Substring file names must contain")
    parser.add_argument("--batch-size", type=int, help="Chunks per embedding batch")
    parser.add_argument("--concurrency", type=int, help="Parallel workers within a batch")
    parser.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    args = parser.parse_args()

    config = get_rag_config()
    if args.corpus_dir:
        config.corpus_dir = args.corpus_dir
    if args.pattern is not None:
        config.corpus_file_pattern = args.pattern
    if args.batch_size:
        config.ingest_batch_size = args.batch_size
    if args.concurrency:
        config.ingest_concurrency = args.concurrency

    documents = discover_documents(
        config.corpus_dir,
        pattern=config.corpus_file_pattern,
        suffix=config.corpus_file_suffix
    )
    if not documents:
        logger.warning("No documents found. Exiting.")
        return 1

    pipeline = create_ingestion_pipeline(config, show_progress=not args.no_progress)
    try:
        report = pipeline.ingest_corpus(documents)
    finally:
        pipeline.vector_store.close()

    print(json.dumps(report.summary(), indent=2, ensure_ascii=False))

    if report.store_error is not None:
        return 2
    if report.total_chunks_embedded:
        logger.info("Ingestion finished; the collection is ready for search")
    return 0


if __name__ == "__main__":
    sys.exit(main())
