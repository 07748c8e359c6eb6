"""
Text Chunking for RAG

Splits long scripture text into smaller, overlapping chunks that can be
embedded and retrieved independently.

Strategy:
- Normalize first (collapse whitespace, drop control characters); chunk
  boundaries are computed on the normalized text, so original layout is lost
- Slide a fixed-size window over the text
- End each window at the last sentence terminator (Gujarati danda, period,
  newline) when it lies far enough into the window
- Keep a small overlap between consecutive chunks for context continuity
- Drop fragments too short to carry meaning (page headers, numbering)
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .config import RAGConfig

logger = logging.getLogger(__name__)

# Sentence terminators considered as break points
SENTENCE_TERMINATORS = ("।", ".", "\n")

_WHITESPACE_RE = re.compile(r"\s+")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class Chunk:
    """A chunk of normalized source text with metadata."""
    text: str
    source: str
    chunk_index: int
    language: str
    char_start: int
    char_end: int


def normalize_text(text: str) -> str:
    """Collapse whitespace runs and strip control characters."""
    text = _WHITESPACE_RE.sub(" ", text)
    text = _CONTROL_CHARS_RE.sub("", text)
    return text.strip()


class TextChunker:
    """Splits text into overlapping chunks for embedding."""

    def __init__(self, config: RAGConfig):
        """
        Initialize chunker.

        Args:
            config: RAG configuration
        """
        if config.chunk_overlap >= config.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")

        self.config = config
        self.chunk_size = config.chunk_size
        self.chunk_overlap = config.chunk_overlap
        self.min_chunk_size = config.min_chunk_size
        self.break_point_ratio = config.break_point_ratio
        self.max_chunks = config.max_chunks_per_document
        self.default_language = config.corpus_language

    def chunk_text(
        self,
        text: str,
        source: str,
        language: Optional[str] = None
    ) -> List[Chunk]:
        """
        Split text into chunks with overlap.

        Args:
            text: Raw document text
            source: Source label stamped on every chunk
            language: Language tag (defaults to the corpus language)

        Returns:
            List of Chunk objects in document order, indexed from 0
        """
        language = language or self.default_language
        clean_text = normalize_text(text or "")
        text_length = len(clean_text)

        chunks: List[Chunk] = []
        start = 0

        while start < text_length:
            end = min(start + self.chunk_size, text_length)
            actual_end = end

            if end < text_length:
                break_point = self._find_break_point(clean_text[start:end])
                if break_point > self.chunk_size * self.break_point_ratio:
                    actual_end = start + break_point + 1

            piece = clean_text[start:actual_end].strip()
            if len(piece) > self.min_chunk_size:
                chunks.append(Chunk(
                    text=piece,
                    source=source,
                    chunk_index=len(chunks),
                    language=language,
                    char_start=start,
                    char_end=actual_end
                ))

                if len(chunks) >= self.max_chunks and actual_end < text_length:
                    logger.warning(
                        f"Chunk limit reached for source '{source}': "
                        f"keeping first {self.max_chunks} chunks"
                    )
                    break

            if actual_end >= text_length:
                break

            next_start = actual_end - self.chunk_overlap
            if next_start <= start:
                # Break point too close to the window start; skip the overlap
                next_start = actual_end
            start = next_start

        return chunks

    def _find_break_point(self, window: str) -> int:
        """Index of the last sentence terminator in the window, or -1."""
        return max(window.rfind(terminator) for terminator in SENTENCE_TERMINATORS)


def chunk_document(
    text: str,
    source: str,
    config: RAGConfig,
    language: Optional[str] = None
) -> List[Chunk]:
    """
    Chunk a single document's text.

    Args:
        text: Raw document text
        source: Source label
        config: RAG configuration
        language: Optional language tag override

    Returns:
        List of chunks
    """
    return TextChunker(config).chunk_text(text, source, language=language)
