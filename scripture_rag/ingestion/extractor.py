"""PDF text extraction with PyMuPDF."""

import logging
from dataclasses import dataclass

import fitz  # PyMuPDF

from ..rag.exceptions import ExtractionError

logger = logging.getLogger(__name__)


@dataclass
class ExtractedText:
    """Plain text pulled out of a document."""
    text: str
    page_count: int


class PDFTextExtractor:
    """Extracts the text layer of a PDF, page by page."""

    def extract(self, file_bytes: bytes) -> ExtractedText:
        """
        Extract text from PDF bytes.

        Args:
            file_bytes: Raw PDF content

        Returns:
            ExtractedText with pages joined by newlines

        Raises:
            ExtractionError: If the bytes are empty or not a readable PDF
        """
        if not file_bytes:
            raise ExtractionError("Document is empty")

        try:
            with fitz.open(stream=file_bytes, filetype="pdf") as doc:
                pages = [page.get_text() for page in doc]
        except Exception as e:
            raise ExtractionError(f"Could not read PDF: {e}") from e

        return ExtractedText(text="\n".join(pages), page_count=len(pages))
