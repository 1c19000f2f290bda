"""Document embedding pipeline.

Embeds one uploaded document and persists its vectors:

    read -> chunk -> embed (one chunk at a time) -> batch write -> summary

:meth:`DocumentEmbedding.embed_and_persist_document` never raises.  Every
failure ends the run in ``FAILED`` and comes back as an
:class:`EmbeddingSummary` with ``success=False`` and the first failure's
message.  Only construction (bad filename, missing file) raises.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import structlog

from docembed.config.settings import Settings
from docembed.interfaces.document_reader import IDocumentReader
from docembed.interfaces.provider import IProvider
from docembed.models.document import (
    DocumentChunk,
    DocumentVectorRecord,
    EmbeddingState,
    EmbeddingSummary,
)
from docembed.models.provider import ProviderSettings
from docembed.providers.llm import get_provider
from docembed.providers.reader import reader_for_path
from docembed.services.ingestion.batch_writer import VectorBatchWriter
from docembed.services.ingestion.chunker import SentenceChunker
from docembed.transport.streaming import CancellationToken
from docembed.utils.errors import (
    DocEmbedError,
    DocumentNotFoundError,
    EmbeddingUnsupportedError,
    InvalidFilenameError,
)

logger = structlog.get_logger(logger_name=__name__)

ProviderFactory = Callable[[ProviderSettings], IProvider]
ReaderFactory = Callable[[Path], IDocumentReader]

_NO_CONTENT = "No content extracted from document."


class _RunFailed(DocEmbedError):
    """Ends a run early; carries the message reported in the summary."""


def build_chunks(texts: list[str], file: str) -> list[DocumentChunk]:
    """Wrap chunk strings with their position, assigned once and never shifted."""
    total = len(texts)
    return [
        DocumentChunk(text=text, chunk_index=i, chunk_total=total, file=file)
        for i, text in enumerate(texts)
    ]


class DocumentEmbedding:
    """Embeds one stored document and writes its vectors.

    Parameters
    ----------
    filename:
        Name of the file inside ``settings.upload_dir``.
    settings:
        Upload directory, chunking and vector store settings.
    reader_factory:
        Builds the :class:`IDocumentReader` for the resolved path.
    chunker:
        Defaults to a :class:`SentenceChunker` with the configured window.
    writer:
        Defaults to a :class:`VectorBatchWriter` over ChromaDB, built on the
        first run.
    provider_factory:
        Builds the embedding provider from the selected settings; defaults
        to :func:`get_provider`.  Each run gets a fresh provider.

    Raises
    ------
    InvalidFilenameError
        If *filename* is empty or names a path outside the upload directory.
    DocumentNotFoundError
        If the file does not exist.
    """

    def __init__(
        self,
        filename: str,
        *,
        settings: Settings | None = None,
        reader_factory: ReaderFactory = reader_for_path,
        chunker: SentenceChunker | None = None,
        writer: VectorBatchWriter | None = None,
        provider_factory: ProviderFactory | None = None,
    ) -> None:
        if not filename:
            raise InvalidFilenameError()
        if Path(filename).name != filename:
            raise InvalidFilenameError(message=f"Filename must not contain a path: {filename}")

        self._settings = settings or Settings()
        file_path = Path(self._settings.upload_dir) / filename
        if not file_path.is_file():
            raise DocumentNotFoundError(message=f"File not found: {file_path}")

        self._filename = filename
        self._file_path = file_path
        self._reader_factory = reader_factory
        self._chunker = chunker or SentenceChunker(
            window_size=self._settings.chunk_window,
            overlap=self._settings.chunk_overlap,
        )
        self._writer = writer
        self._provider_factory = provider_factory or (
            lambda provider_settings: get_provider(provider_settings, settings=self._settings)
        )
        self._state = EmbeddingState.CREATED

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def state(self) -> EmbeddingState:
        return self._state

    def _transition(self, state: EmbeddingState, **context: object) -> None:
        logger.debug("embedding_state", previous=self._state.value, state=state.value, **context)
        self._state = state

    def _get_writer(self) -> VectorBatchWriter:
        if self._writer is None:
            # Imported here so chromadb only loads when the default store is used.
            from docembed.providers.vector_store import ChromaDBVectorStore

            self._writer = VectorBatchWriter(
                ChromaDBVectorStore(persist_directory=self._settings.chromadb_persist_dir),
                self._settings.vector_class_name,
                self._settings.vector_batch_size,
            )
        return self._writer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed_and_persist_document(
        self,
        embed_model: str,
        provider_settings: ProviderSettings,
        cancel_token: CancellationToken | None = None,
    ) -> EmbeddingSummary:
        """Run the pipeline once and return its summary."""
        self._state = EmbeddingState.CREATED
        with structlog.contextvars.bound_contextvars(file=self._filename, embed_model=embed_model):
            try:
                return await self._run(embed_model, provider_settings, cancel_token)
            except DocEmbedError as exc:
                message = exc.message
            except Exception as exc:
                logger.exception("document_embedding_unexpected_error")
                message = str(exc) or "Unknown error during document embedding"

            self._transition(EmbeddingState.FAILED)
            logger.warning("document_embedding_failed", error=message)
            return EmbeddingSummary.failed(embed_model, message)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _run(
        self,
        embed_model: str,
        provider_settings: ProviderSettings,
        cancel_token: CancellationToken | None,
    ) -> EmbeddingSummary:
        provider = self._provider_factory(provider_settings)
        if not provider_settings.has_embedding or not provider.supports_embedding():
            raise EmbeddingUnsupportedError(
                message=f"Embedding is not supported by provider {provider.provider_id()!r}.",
                provider_name=provider.provider_id(),
            )

        content = await self._reader_factory(self._file_path).get_file_content()
        self._transition(EmbeddingState.CONTENT_READ, characters=len(content))
        if not content.strip():
            raise _RunFailed(message=_NO_CONTENT)

        chunks = build_chunks(self._chunker.chunk(content), self._filename)
        self._transition(EmbeddingState.CHUNKED, chunks=len(chunks))
        logger.info("document_embedding_started", chunks=len(chunks))

        records = await self._embed_chunks(
            chunks, provider, embed_model, provider_settings, cancel_token
        )
        if not records:
            raise _RunFailed(message=_NO_CONTENT)

        success = await self._get_writer().write(records)
        total_tokens = sum(r.total_tokens or 0 for r in records)
        if not success:
            self._transition(EmbeddingState.FAILED)
            return EmbeddingSummary(
                success=False,
                error_message="Failed to write document vectors to the vector store.",
                embed_model=embed_model,
                text_character_count=len(content),
                no_of_chunks=len(chunks),
                total_document_tokens=total_tokens,
            )

        self._transition(EmbeddingState.COMPLETED)
        logger.info(
            "document_embedding_complete",
            characters=len(content),
            chunks=len(chunks),
            total_tokens=total_tokens,
        )
        return EmbeddingSummary(
            success=True,
            embed_model=embed_model,
            text_character_count=len(content),
            no_of_chunks=len(chunks),
            total_document_tokens=total_tokens,
        )

    async def _embed_chunks(
        self,
        chunks: list[DocumentChunk],
        provider: IProvider,
        embed_model: str,
        provider_settings: ProviderSettings,
        cancel_token: CancellationToken | None,
    ) -> list[DocumentVectorRecord]:
        """Embed *chunks* strictly in order, one call at a time."""
        expected_dim = provider_settings.embedding_dimension
        records: list[DocumentVectorRecord] = []
        for chunk in chunks:
            if cancel_token is not None and cancel_token.cancelled:
                raise _RunFailed(message="Document embedding was cancelled.")
            self._transition(EmbeddingState.EMBEDDING, chunk_index=chunk.chunk_index)

            result = await provider.embed(chunk.text, embed_model, provider_settings)
            if result.error.is_error:
                raise _RunFailed(
                    message=result.error.error_message, provider_name=provider.provider_id()
                )
            if not result.embedding:
                raise _RunFailed(
                    message=f"Empty embedding returned for chunk {chunk.chunk_index}.",
                    provider_name=provider.provider_id(),
                )
            # Without a declared dimension, the first vector fixes it for the run.
            if expected_dim is None:
                expected_dim = len(result.embedding)
            if len(result.embedding) != expected_dim:
                raise _RunFailed(
                    message=(
                        f"Embedding dimension mismatch for chunk {chunk.chunk_index}: "
                        f"expected {expected_dim}, got {len(result.embedding)}."
                    ),
                    provider_name=provider.provider_id(),
                )

            records.append(
                DocumentVectorRecord(
                    chunk=chunk,
                    embedding=result.embedding,
                    total_tokens=result.total_tokens,
                )
            )

        self._transition(EmbeddingState.BATCHED, records=len(records))
        return records
