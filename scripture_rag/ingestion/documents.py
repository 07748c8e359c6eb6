"""Source documents and corpus discovery."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..rag.exceptions import ExtractionError

logger = logging.getLogger(__name__)


@dataclass
class RawDocument:
    """
    A document waiting to be ingested.

    Either ``path`` (read lazily) or ``data`` (already in memory) must be set.
    """
    name: str
    path: Optional[Path] = None
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "RawDocument":
        path = Path(path)
        return cls(name=path.name, path=path)

    def read_bytes(self) -> bytes:
        """
        Load the document content.

        Raises:
            ExtractionError: If the file cannot be read
        """
        if self.data is not None:
            return self.data
        if self.path is None:
            raise ExtractionError(f"Document {self.name} has no content")
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise ExtractionError(f"Could not read {self.path}: {e}") from e


def discover_documents(
    corpus_dir: Union[str, Path],
    pattern: str = "gujarati",
    suffix: str = ".pdf"
) -> List[RawDocument]:
    """
    List corpus files to ingest.

    Args:
        corpus_dir: Directory holding the source files
        pattern: Case-insensitive substring the file name must contain
            (empty string matches everything)
        suffix: Required file extension

    Returns:
        RawDocuments sorted by file name
    """
    corpus_dir = Path(corpus_dir)
    if not corpus_dir.is_dir():
        raise FileNotFoundError(f"Corpus directory not found: {corpus_dir}")

    pattern = pattern.lower()
    suffix = suffix.lower()
    files = sorted(
        p for p in corpus_dir.iterdir()
        if p.is_file()
        and p.name.lower().endswith(suffix)
        and pattern in p.name.lower()
    )

    logger.info(f"Found {len(files)} document(s) in {corpus_dir}")
    return [RawDocument.from_path(p) for p in files]
