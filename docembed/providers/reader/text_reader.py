"""Plain-text document reader for ``.txt``, ``.md``, ``.csv`` and similar files."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from docembed.interfaces.document_reader import IDocumentReader
from docembed.utils.errors import DocumentNotFoundError, DocumentReadError

logger = structlog.get_logger(logger_name=__name__)


class TextDocumentReader(IDocumentReader):
    """Reads a UTF-8 text file in full."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def get_file_content(self) -> str:
        if not self._path.is_file():
            raise DocumentNotFoundError(message=f"File not found: {self._path.name}")
        try:
            text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentReadError(
                message=f"Failed to read {self._path.name}: {exc}",
            ) from exc

        logger.debug("text_document_read", file=self._path.name, characters=len(text))
        return text
