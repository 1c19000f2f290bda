"""Cancellable streaming primitives shared by every provider.

:class:`CancellationToken` is a one-shot flag backed by an
:class:`asyncio.Event`.  :class:`ChatStream` turns a streamed
``httpx.Response`` into an async iterator of event payloads (one JSON
document per item) and stops as soon as its token is cancelled.

Both Server-Sent Events (OpenAI, Anthropic) and newline-delimited JSON
(Ollama) pass through the same iterator: SSE framing is stripped, NDJSON
lines are yielded as-is.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import httpx
import structlog

from docembed.utils.errors import TransportError

logger = structlog.get_logger(logger_name=__name__)

_DONE_SENTINEL = "[DONE]"


class CancellationToken:
    """One-shot cancellation flag for a single in-flight call."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Mark the token cancelled.  Calling this more than once is a no-op."""
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


def _strip_event_framing(line: str) -> str | None:
    """Return the payload carried by *line*, or ``None`` for framing-only lines."""
    line = line.strip()
    if not line or line.startswith(":"):
        return None
    if line.startswith("event:") or line.startswith("id:") or line.startswith("retry:"):
        return None
    if line.startswith("data:"):
        return line[len("data:"):].strip() or None
    return line


class ChatStream:
    """Async iterator over the payloads of one streamed chat completion.

    The stream is also the handle for cancelling its own call: callers
    can hold on to it and call :meth:`cancel`, or pass it to
    ``IProvider.cancel_chat_completion_stream``.  After a cancel the
    iterator ends quietly; transport errors raised by the interrupted read
    are not surfaced.

    A stream built without a response (see
    ``HttpTransport.create_empty_stream``) yields nothing.
    """

    def __init__(
        self,
        response: httpx.Response | None = None,
        token: CancellationToken | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._response = response
        self._token = token or CancellationToken()
        self._provider_name = provider_name

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def cancel(self) -> None:
        self._token.cancel()

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iter_payloads()

    async def _iter_payloads(self) -> AsyncIterator[str]:
        if self._response is None:
            return
        lines = self._response.aiter_lines()
        try:
            while not self._token.cancelled:
                line = await self._next_line(lines)
                if line is None:
                    break
                payload = _strip_event_framing(line)
                if payload is None:
                    continue
                if payload == _DONE_SENTINEL:
                    break
                yield payload
        except (httpx.HTTPError, httpx.StreamError) as exc:
            if self._token.cancelled:
                logger.debug("chat_stream_closed_after_cancel", provider=self._provider_name)
                return
            raise TransportError(
                message=f"Stream interrupted: {exc}",
                provider_name=self._provider_name,
            ) from exc
        finally:
            await self._response.aclose()
            if self._token.cancelled:
                logger.info("chat_stream_cancelled", provider=self._provider_name)

    async def _next_line(self, lines: AsyncIterator[str]) -> str | None:
        """Read one line, or return ``None`` on end-of-stream or cancellation."""
        read = asyncio.ensure_future(lines.__anext__())
        waiter = asyncio.ensure_future(self._token.wait())
        try:
            done, _ = await asyncio.wait({read, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not read.done():
                read.cancel()
                await asyncio.wait({read})
        if read not in done or read.cancelled():
            return None
        try:
            return read.result()
        except StopAsyncIteration:
            return None
