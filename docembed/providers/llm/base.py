"""Plumbing shared by the HTTP-backed provider adapters.

Holds the transport, tracks the active cancellable stream, and turns
transport results into :class:`CompletionResult` / decoded JSON so each
vendor adapter only deals with its own URLs, headers and payload shapes.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from docembed.config.settings import Settings
from docembed.interfaces.provider import IProvider
from docembed.models.provider import ApiError, CompletionResult, ErrorKind
from docembed.transport.http_transport import HttpMethod, HttpTransport
from docembed.transport.streaming import CancellationToken, ChatStream
from docembed.utils.errors import MalformedPayloadError

logger = structlog.get_logger(logger_name=__name__)


def _is_empty_body(response: httpx.Response) -> bool:
    return response.status_code == 204 or response.headers.get("content-length") == "0"


class BaseHttpProvider(IProvider):
    """Base for adapters that talk to their vendor through :class:`HttpTransport`."""

    def __init__(
        self,
        transport: HttpTransport | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._transport = transport or HttpTransport(settings=self._settings)
        self._chat_stream: ChatStream | None = None

    # ------------------------------------------------------------------
    # Stream tracking
    # ------------------------------------------------------------------

    def cancel_chat_completion_stream(self, stream: ChatStream | None = None) -> None:
        target = stream or self._chat_stream
        if target is not None and not target.cancelled:
            target.cancel()
            logger.info("chat_stream_cancel_requested", provider=self.provider_id())

    async def _open_stream(
        self,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any],
        with_cancellation: bool,
    ) -> CompletionResult:
        token = CancellationToken()
        if with_cancellation:
            # Replaces the tracked stream; the previous one keeps running.
            self._chat_stream = ChatStream(token=token, provider_name=self.provider_id())

        result = await self._transport.execute_fetch(
            url, HttpMethod.POST, headers, payload, token=token, stream=True
        )
        if result.response is None or result.error.is_error:
            return CompletionResult(
                stream=self._transport.create_empty_stream(self.provider_id()),
                error=result.error,
            )

        if _is_empty_body(result.response):
            await result.response.aclose()
            return CompletionResult(
                stream=self._transport.create_empty_stream(self.provider_id()),
                error=ApiError.of(
                    ErrorKind.EMPTY_BODY, "API request failed with empty response body"
                ),
            )

        stream = ChatStream(result.response, token=token, provider_name=self.provider_id())
        if with_cancellation:
            self._chat_stream = stream
        return CompletionResult(stream=stream, error=result.error)

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    async def _request_json(
        self,
        url: str,
        method: HttpMethod,
        headers: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> tuple[Any, ApiError]:
        """Send a non-streaming request and decode its JSON body."""
        result = await self._transport.execute_fetch(url, method, headers, payload)
        if result.response is None or result.error.is_error:
            return None, result.error
        try:
            return result.response.json(), result.error
        except ValueError as exc:
            return None, ApiError.of(
                ErrorKind.MALFORMED_PAYLOAD, f"{self.provider_id()} returned invalid JSON: {exc}"
            )

    def _decode_payload(self, stream_data: str) -> dict[str, Any]:
        """Parse one streamed payload as a JSON object or raise MalformedPayloadError."""
        try:
            data = json.loads(stream_data)
        except json.JSONDecodeError as exc:
            raise MalformedPayloadError(
                message=f"Could not decode stream payload: {exc}",
                provider_name=self.provider_id(),
            ) from exc
        if not isinstance(data, dict):
            raise MalformedPayloadError(
                message=f"Expected a JSON object, got {type(data).__name__}",
                provider_name=self.provider_id(),
            )
        return data
