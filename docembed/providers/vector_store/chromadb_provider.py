"""ChromaDB vector store adapter.

Wraps ``chromadb.PersistentClient`` to implement :class:`IVectorStoreClient`.
Each vector class maps to one collection (cosine space).  Records are
upserted under ``"{file}:{chunk_index}"`` ids, so re-embedding a document
overwrites its previous vectors instead of duplicating them.
"""

from __future__ import annotations

import asyncio
import os
from typing import Any

# Disable ChromaDB telemetry before importing chromadb.  Its bundled PostHog
# client can clash with the installed posthog version, so the env var, the
# SDK flag and the client Settings are all set.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import posthog

posthog.disabled = True

import chromadb
import structlog

from docembed.interfaces.vector_store_provider import IVectorStoreClient
from docembed.models.document import DocumentVectorRecord
from docembed.utils.errors import VectorStoreError

logger = structlog.get_logger(logger_name=__name__)


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Stops ChromaDB from loading its default ONNX model.

    Vectors always arrive pre-computed from the LLM provider.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError(
            "docembed stores pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        return "noop_precomputed"


def record_id(record: DocumentVectorRecord) -> str:
    return f"{record.chunk.file}:{record.chunk.chunk_index}"


class ChromaDBVectorStore(IVectorStoreClient):
    """Vector store backed by ChromaDB with local persistence."""

    def __init__(
        self,
        persist_directory: str = "./data/chromadb",
        client: Any | None = None,
    ) -> None:
        self._persist_directory = persist_directory
        self._client = client or chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        self._collections: dict[str, Any] = {}

    def _collection(self, class_name: str) -> Any:
        if class_name not in self._collections:
            # Collections created by older ChromaDB versions reject a
            # different embedding function; reopen without one.
            try:
                collection = self._client.get_or_create_collection(
                    name=class_name,
                    metadata={"hnsw:space": "cosine"},
                    embedding_function=_NoopEmbeddingFunction(),
                )
            except ValueError:
                collection = self._client.get_or_create_collection(
                    name=class_name,
                    metadata={"hnsw:space": "cosine"},
                )
            self._collections[class_name] = collection
        return self._collections[class_name]

    async def batch_insert(self, class_name: str, records: list[DocumentVectorRecord]) -> None:
        if not records:
            return

        ids = [record_id(r) for r in records]
        embeddings = [r.embedding for r in records]
        documents = [r.chunk.text for r in records]
        metadatas = []
        for r in records:
            properties = r.to_properties()
            properties.pop("text")
            metadatas.append(properties)

        try:
            collection = self._collection(class_name)
            await asyncio.to_thread(
                collection.upsert,
                ids=ids,
                embeddings=embeddings,
                documents=documents,
                metadatas=metadatas,
            )
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB batch insert into {class_name!r} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_batch_insert", class_name=class_name, count=len(records))

    def get_provider_name(self) -> str:
        return "chromadb"
