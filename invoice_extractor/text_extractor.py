"""Text extraction from PDF using PyMuPDF and pdfplumber"""
import io
import logging
from typing import List

import fitz  # PyMuPDF
import pdfplumber

from .errors import CorruptDocumentError, EmptyDocumentError

logger = logging.getLogger(__name__)


class TextExtractor:
    """Extracts the plain text of a PDF, page by page"""

    def __init__(self):
        self.use_pymupdf = True  # Prefer PyMuPDF for better performance

    def extract(self, pdf_bytes: bytes) -> str:
        """
        Extract the full text of a PDF

        Args:
            pdf_bytes: PDF file as bytes

        Returns:
            Page texts joined in document order, surrounding whitespace trimmed

        Raises:
            EmptyDocumentError: the document holds no readable text
            CorruptDocumentError: no backend could decode the document
        """
        if not pdf_bytes:
            raise EmptyDocumentError()

        pages = self._extract_pages(pdf_bytes)
        text = "\n".join(pages).strip()

        if not text:
            raise EmptyDocumentError()

        logger.info("Successfully extracted %d characters from %d page(s)", len(text), len(pages))
        return text

    def _extract_pages(self, pdf_bytes: bytes) -> List[str]:
        if not self.use_pymupdf:
            try:
                return self._extract_pdfplumber(pdf_bytes)
            except Exception as e:
                raise CorruptDocumentError(f"Failed to extract text from PDF: {e}") from e

        try:
            return self._extract_pymupdf(pdf_bytes)
        except Exception as e:
            # Fallback to pdfplumber if PyMuPDF fails
            logger.warning("PyMuPDF could not read document (%s), trying pdfplumber", e)
            try:
                return self._extract_pdfplumber(pdf_bytes)
            except Exception:
                raise CorruptDocumentError(f"Failed to extract text from PDF: {e}") from e

    def _extract_pymupdf(self, pdf_bytes: bytes) -> List[str]:
        """Extract using PyMuPDF (fitz)"""
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        try:
            if doc.page_count == 0:
                raise ValueError("document has no pages")
            return [page.get_text() for page in doc]
        finally:
            doc.close()

    def _extract_pdfplumber(self, pdf_bytes: bytes) -> List[str]:
        """Extract using pdfplumber (fallback)"""
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            if not pdf.pages:
                raise ValueError("document has no pages")
            # extract_text() returns None for pages without a text layer
            return [page.extract_text() or "" for page in pdf.pages]
