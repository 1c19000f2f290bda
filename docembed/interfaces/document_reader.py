"""Abstract base class for document text extraction.

A reader is bound to one stored file and returns its full text.
Implementations live in ``docembed/providers/reader/``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IDocumentReader(ABC):
    """Extracts raw text from one stored file."""

    @abstractmethod
    async def get_file_content(self) -> str:
        """Return the file's text.

        Raises
        ------
        docembed.utils.errors.DocumentNotFoundError
            If the file has disappeared since the reader was created.
        docembed.utils.errors.DocumentReadError
            If the content cannot be extracted.
        """
