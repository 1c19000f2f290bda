"""HTTP transport shared by every provider adapter.

Wraps a single ``httpx.AsyncClient``.  Every outbound call comes back as a
:class:`TransportResponse` holding either an open ``httpx.Response`` or a
structured :class:`ApiError`; network exceptions never escape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
import structlog

from docembed.config.settings import Settings
from docembed.models.provider import ApiError, ErrorKind
from docembed.transport.streaming import CancellationToken, ChatStream

logger = structlog.get_logger(logger_name=__name__)

# Vendor error bodies can be large HTML pages; keep log lines readable.
_MAX_ERROR_BODY = 500


class HttpMethod(str, Enum):  # noqa: UP042
    GET = "GET"
    POST = "POST"


@dataclass
class TransportResponse:
    """Either an open response or an error, never both."""

    response: httpx.Response | None = None
    error: ApiError = field(default_factory=ApiError.none)


class HttpTransport:
    """Performs outbound requests on behalf of provider adapters.

    Parameters
    ----------
    settings:
        Supplies request timeouts.
    client:
        Optional pre-built ``httpx.AsyncClient``; tests pass one built on
        ``httpx.MockTransport``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or Settings()
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout, connect=settings.http_connect_timeout),
        )

    async def execute_fetch(
        self,
        url: str,
        method: HttpMethod,
        headers: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
        stream: bool = False,
    ) -> TransportResponse:
        """Send one request.

        With ``stream=True`` the body is left unread so the caller can
        iterate it; otherwise it is read before returning.  A token that
        is already cancelled short-circuits without sending anything.
        """
        if token is not None and token.cancelled:
            return TransportResponse(
                error=ApiError.of(ErrorKind.CANCELLED, "Request cancelled before it was sent"),
            )

        request = self._client.build_request(
            method.value,
            url,
            headers={"Content-Type": "application/json", **(headers or {})},
            json=payload,
        )
        try:
            response = await self._client.send(request, stream=stream)
        except httpx.HTTPError as exc:
            logger.warning("http_transport_error", url=url, error=str(exc))
            return TransportResponse(
                error=ApiError.of(ErrorKind.TRANSPORT, f"API request failed: {exc}"),
            )

        if not response.is_success:
            body = await self._read_error_body(response)
            logger.warning(
                "http_status_error",
                url=url,
                status_code=response.status_code,
                body=body,
            )
            return TransportResponse(
                error=ApiError.of(
                    ErrorKind.STATUS,
                    f"API request failed with status {response.status_code}: {body}",
                ),
            )

        return TransportResponse(response=response)

    @staticmethod
    async def _read_error_body(response: httpx.Response) -> str:
        try:
            await response.aread()
            return response.text[:_MAX_ERROR_BODY]
        except httpx.HTTPError:
            return ""
        finally:
            await response.aclose()

    @staticmethod
    def valid_url(url: str | None) -> str:
        """Return *url* without trailing slashes, so paths can be appended."""
        return (url or "").rstrip("/")

    @staticmethod
    def create_empty_stream(provider_name: str | None = None) -> ChatStream:
        return ChatStream(response=None, provider_name=provider_name)

    async def aclose(self) -> None:
        await self._client.aclose()
