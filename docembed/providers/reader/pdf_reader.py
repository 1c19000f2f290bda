"""PDF document reader.

Extracts text page by page with PyMuPDF (fitz) and joins the pages with a
blank line.  Scanned PDFs only yield text when they carry an OCR layer;
pages with no extractable text are skipped.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from docembed.interfaces.document_reader import IDocumentReader
from docembed.utils.errors import DocumentNotFoundError, DocumentReadError

logger = structlog.get_logger(logger_name=__name__)


class PdfDocumentReader(IDocumentReader):
    """Reads the text layer of a PDF file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def get_file_content(self) -> str:
        if not self._path.is_file():
            raise DocumentNotFoundError(message=f"File not found: {self._path.name}")
        pages = await asyncio.to_thread(self._extract_pages)
        logger.debug("pdf_document_read", file=self._path.name, pages=len(pages))
        return "\n\n".join(pages)

    def _extract_pages(self) -> list[str]:
        try:
            doc = fitz.open(self._path)
        except Exception as exc:
            raise DocumentReadError(
                message=f"Failed to open PDF {self._path.name}: {exc}",
            ) from exc

        pages: list[str] = []
        try:
            for page in doc:
                text = page.get_text("text").strip()
                if text:
                    pages.append(text)
        finally:
            doc.close()
        return pages
