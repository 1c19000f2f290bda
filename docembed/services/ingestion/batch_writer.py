"""Batched writes of document vectors to the vector store.

Records are buffered and handed to :meth:`IVectorStoreClient.batch_insert`
each time the buffer reaches capacity, then once more for whatever remains.
An empty remainder is never sent.
"""

from __future__ import annotations

import asyncio
import weakref

import structlog

from docembed.interfaces.vector_store_provider import IVectorStoreClient
from docembed.models.document import DocumentVectorRecord

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_BATCH_SIZE = 100


class VectorBatchWriter:
    """Writes records into one vector class in batches of ``batch_size``.

    Writers targeting the same class name on the same event loop share an
    ``asyncio.Lock``, so two documents embedded concurrently never interleave
    their batches.
    Batches already flushed stay in the store if a later one fails.
    """

    _locks: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[str, asyncio.Lock]] = (
        weakref.WeakKeyDictionary()
    )

    def __init__(
        self,
        client: IVectorStoreClient,
        class_name: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self._client = client
        self._class_name = class_name
        self._batch_size = batch_size

    @property
    def class_name(self) -> str:
        return self._class_name

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def _lock(self) -> asyncio.Lock:
        locks = VectorBatchWriter._locks.setdefault(asyncio.get_running_loop(), {})
        return locks.setdefault(self._class_name, asyncio.Lock())

    async def write(self, records: list[DocumentVectorRecord]) -> bool:
        """Flush *records* to the store.

        Returns ``True`` when every batch was accepted.  A store failure is
        logged and returns ``False``; it never raises.
        """
        flushes = 0
        try:
            async with self._lock():
                buffer: list[DocumentVectorRecord] = []
                for record in records:
                    buffer.append(record)
                    if len(buffer) >= self._batch_size:
                        await self._client.batch_insert(self._class_name, buffer)
                        flushes += 1
                        buffer = []

                if buffer:
                    await self._client.batch_insert(self._class_name, buffer)
                    flushes += 1
        except Exception as exc:
            logger.error(
                "vector_batch_write_failed",
                class_name=self._class_name,
                store=self._client.get_provider_name(),
                flushed_batches=flushes,
                error=str(exc),
            )
            return False

        logger.info(
            "vector_batch_write_complete",
            class_name=self._class_name,
            records=len(records),
            batches=flushes,
        )
        return True
