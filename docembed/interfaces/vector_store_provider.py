"""Abstract base class for vector-store clients.

The embedding pipeline only needs one write primitive: insert a batch of
pre-embedded records into a named class (a collection, in ChromaDB terms).
Batching policy lives in
:class:`~docembed.services.ingestion.batch_writer.VectorBatchWriter`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docembed.models.document import DocumentVectorRecord


# Concrete implementation: ChromaDBVectorStore (docembed/providers/vector_store/)
class IVectorStoreClient(ABC):
    """Contract for the store that receives document vectors.

    Implementations are not required to be safe for concurrent inserts into
    the same class; the batch writer serialises those.
    """

    @abstractmethod
    async def batch_insert(self, class_name: str, records: list[DocumentVectorRecord]) -> None:
        """Insert *records* into *class_name*.

        Each record carries ``text``, ``file``, ``chunkIndex``, ``chunkTotal``,
        optional ``totalTokens`` and its vector.

        Raises
        ------
        docembed.utils.errors.VectorStoreError
            If the store rejects the batch.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"chromadb"``."""
