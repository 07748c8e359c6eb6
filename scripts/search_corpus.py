"""
Search the Scripture Corpus

Runs a retrieval query against the vector store and prints the ranked
passages, optionally with the system prompt they would produce.

Usage:
    python scripts/search_corpus.py "What is devotion?"
    python scripts/search_corpus.py "ભક્તિ એટલે શું?" --top-k 5 --show-prompt
"""

import sys
import logging
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from scripture_rag.rag.language import is_english_query
from scripture_rag.rag.prompts import build_enhanced_prompt
from scripture_rag.rag.retriever import create_retrieval_service

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Semantic search over the scripture corpus")
    parser.add_argument("query", help="Question to search for")
    parser.add_argument("--top-k", type=int, default=3, help="Number of passages")
    parser.add_argument("--show-prompt", action="store_true", help="Print the composed system prompt")
    args = parser.parse_args()

    service = create_retrieval_service()
    try:
        results = service.retrieve(args.query, k=args.top_k)
    finally:
        service.vector_store.close()

    if not results:
        print("No passages found.")

    for i, result in enumerate(results, start=1):
        print(f"\n[{i}] {result.source} (score {result.score:.3f})")
        print(result.text)

    if args.show_prompt:
        print("\n" + "=" * 80)
        print(build_enhanced_prompt(args.query, results, is_english_query(args.query)))

    return 0


if __name__ == "__main__":
    sys.exit(main())
