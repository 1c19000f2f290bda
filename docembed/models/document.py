"""Document pipeline data models.

A run of the embedding pipeline moves through these shapes:

    text ──chunker──> DocumentChunk ──provider.embed──> DocumentVectorRecord
         ──VectorBatchWriter──> vector store rows

and ends with an :class:`EmbeddingSummary` handed back to the caller.
Chunks and records only live for the duration of one run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EmbeddingState(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """States of one document embedding run.

        CREATED → CONTENT_READ → CHUNKED → EMBEDDING → BATCHED → COMPLETED

    Any state may move to FAILED, which is terminal.
    """

    CREATED = "CREATED"
    CONTENT_READ = "CONTENT_READ"
    CHUNKED = "CHUNKED"
    EMBEDDING = "EMBEDDING"
    BATCHED = "BATCHED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class DocumentChunk(BaseModel):
    """One ordered slice of a document's text.

    ``chunk_index`` and ``chunk_total`` are set once, when the chunk is
    created, and the model is frozen so nothing downstream can shift them.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    chunk_index: int = Field(ge=0)
    chunk_total: int = Field(ge=1)
    file: str

    @model_validator(mode="after")
    def _index_within_total(self) -> DocumentChunk:
        if self.chunk_index >= self.chunk_total:
            raise ValueError(
                f"chunk_index {self.chunk_index} out of range for chunk_total {self.chunk_total}"
            )
        return self


class DocumentVectorRecord(BaseModel):
    """A chunk together with its embedding vector."""

    model_config = ConfigDict(frozen=True)

    chunk: DocumentChunk
    embedding: list[float]
    total_tokens: int | None = None

    def to_properties(self) -> dict[str, object]:
        """Return the property bag stored alongside the vector."""
        properties: dict[str, object] = {
            "text": self.chunk.text,
            "file": self.chunk.file,
            "chunkIndex": self.chunk.chunk_index,
            "chunkTotal": self.chunk.chunk_total,
        }
        if self.total_tokens is not None:
            properties["totalTokens"] = self.total_tokens
        return properties


class EmbeddingSummary(BaseModel):
    """Terminal result of ``DocumentEmbedding.embed_and_persist_document``."""

    success: bool
    error_message: str = ""
    embed_model: str
    text_character_count: int = 0
    no_of_chunks: int = 0
    total_document_tokens: int = 0

    @classmethod
    def failed(cls, embed_model: str, error_message: str) -> EmbeddingSummary:
        return cls(success=False, error_message=error_message, embed_model=embed_model)
