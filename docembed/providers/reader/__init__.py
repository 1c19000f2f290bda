"""Document reader implementations.

Each reader is bound to one stored file; :func:`reader_for_path` picks the
implementation from the file suffix.
"""

from __future__ import annotations

from pathlib import Path

from docembed.interfaces.document_reader import IDocumentReader
from docembed.providers.reader.pdf_reader import PdfDocumentReader
from docembed.providers.reader.text_reader import TextDocumentReader
from docembed.utils.errors import DocumentReadError

_TEXT_SUFFIXES = frozenset({".txt", ".md", ".markdown", ".csv", ".json", ".log", ".rst", ".html"})


def reader_for_path(path: str | Path) -> IDocumentReader:
    """Return the reader for *path*, or raise DocumentReadError for unknown types."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return PdfDocumentReader(path)
    if suffix in _TEXT_SUFFIXES:
        return TextDocumentReader(path)
    raise DocumentReadError(message=f"Unsupported document type: {suffix or path.name}")


__all__ = ["PdfDocumentReader", "TextDocumentReader", "reader_for_path"]
