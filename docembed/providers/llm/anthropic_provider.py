"""Anthropic provider adapter.

Key differences from the OpenAI adapter:
    - Chat goes to the Messages API (``/v1/messages``), not chat.completions
    - System prompt is a separate top-level field, not a message in the list
    - Auth is the ``x-api-key`` header plus a pinned ``anthropic-version``
    - The stream is a sequence of typed events; only ``content_block_delta``
      carries text, so other events convert to a response with no choices
    - No embedding endpoint and no image generation
"""

from __future__ import annotations

import time
from typing import Any

# The official Anthropic Python SDK (async version), used for model listing.
import anthropic
import structlog
from pydantic import ValidationError

from docembed.config.settings import Settings
from docembed.models.provider import (
    ApiError,
    ApiProvider,
    ChatCompletionResponse,
    ChatMessage,
    ChatRole,
    Choice,
    CompletionResult,
    CreateImageResponse,
    EmbeddingResult,
    ErrorKind,
    ModelDescriptor,
    ProviderSettings,
    Usage,
)
from docembed.providers.llm.base import BaseHttpProvider
from docembed.transport.http_transport import HttpTransport
from docembed.utils.errors import MalformedPayloadError, ProtocolError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_URL = "https://api.anthropic.com"


class AnthropicProvider(BaseHttpProvider):
    """Provider backed by the Anthropic Claude API."""

    def __init__(
        self,
        transport: HttpTransport | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(transport=transport, settings=settings)
        # message_start carries the id/model; later events in the same
        # stream reuse them so every converted chunk is labelled.
        self._message_id = ""
        self._message_model = ""

    def provider_id(self) -> str:
        return ApiProvider.ANTHROPIC.value

    def _headers(self, api_key: str | None) -> dict[str, str]:
        headers = {"anthropic-version": self._settings.anthropic_version}
        if api_key:
            headers["x-api-key"] = api_key
        return headers

    # ------------------------------------------------------------------
    # IProvider implementation
    # ------------------------------------------------------------------

    async def models(
        self,
        provider_settings: ProviderSettings,
        embedded_only: bool,
    ) -> list[ModelDescriptor]:
        if embedded_only:
            return []

        models: list[ModelDescriptor] = []
        try:
            client = anthropic.AsyncAnthropic(
                api_key=provider_settings.api_key,
                base_url=self._transport.valid_url(provider_settings.url) or _DEFAULT_URL,
            )
            async for m in client.models.list():
                models.append(
                    ModelDescriptor(
                        id=m.id,
                        object="model",
                        created=int(m.created_at.timestamp()) if m.created_at else 0,
                        type=m.type,
                        embedding=False,
                    )
                )
        except anthropic.APIError as exc:
            logger.warning("anthropic_models_failed", error=str(exc))
            return []
        except Exception as exc:
            logger.warning("anthropic_models_unexpected_error", error=str(exc))
            return []

        logger.debug("anthropic_models", count=len(models))
        return models

    async def chat_completions(
        self,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None,
        api_key: str | None,
        with_cancellation: bool,
    ) -> CompletionResult:
        # Anthropic takes the system prompt as a separate field, not a message.
        system = "\n".join(m.content for m in messages if m.role == ChatRole.SYSTEM)
        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": self._settings.anthropic_max_tokens,
            "messages": [
                m.model_dump(mode="json") for m in messages if m.role != ChatRole.SYSTEM
            ],
            "stream": True,
        }
        if system:
            payload["system"] = system

        self._message_id = ""
        self._message_model = model
        return await self._open_stream(
            f"{self._transport.valid_url(base_url) or _DEFAULT_URL}/v1/messages",
            self._headers(api_key),
            payload,
            with_cancellation,
        )

    def convert_response(self, stream_data: str) -> ChatCompletionResponse:
        """Convert one Messages API stream event into the OpenAI chunk shape."""
        event = self._decode_payload(stream_data)
        event_type = event.get("type")

        if event_type == "error":
            error = event.get("error") or {}
            raise ProtocolError(
                message=f"Stream error: {error.get('message', 'unknown error')}",
                provider_name=self.provider_id(),
            )

        if event_type == "message_start":
            message = event.get("message") or {}
            self._message_id = message.get("id") or self._message_id
            self._message_model = message.get("model") or self._message_model

        try:
            return self._build_chunk(event_type, event)
        except ValidationError as exc:
            raise MalformedPayloadError(
                message=f"Unexpected stream event: {exc}",
                provider_name=self.provider_id(),
            ) from exc

    def _build_chunk(self, event_type: str | None, event: dict[str, Any]) -> ChatCompletionResponse:
        response = ChatCompletionResponse(
            id=self._message_id,
            created=int(time.time()),
            model=self._message_model,
        )

        if event_type == "content_block_delta":
            delta = event.get("delta") or {}
            if delta.get("type") == "text_delta":
                response.choices = [
                    Choice(
                        index=event.get("index", 0),
                        delta=ChatMessage(role=ChatRole.ASSISTANT, content=delta.get("text", "")),
                    )
                ]
        elif event_type == "message_delta":
            delta = event.get("delta") or {}
            usage = event.get("usage") or {}
            response.choices = [
                Choice(
                    delta=ChatMessage(role=ChatRole.ASSISTANT, content=""),
                    finish_reason=delta.get("stop_reason"),
                )
            ]
            if "output_tokens" in usage:
                response.usage = Usage(
                    completion_tokens=usage["output_tokens"],
                    total_tokens=usage["output_tokens"],
                )

        return response

    async def generate_image(
        self,
        prompt: str,
        model: str,
        base_url: str | None,
        api_key: str | None,
    ) -> CreateImageResponse:
        logger.warning("image_generation_unsupported", provider=self.provider_id(), model=model)
        return CreateImageResponse(not_implemented_or_supported=True)

    def supports_embedding(self) -> bool:
        return False

    async def embed(
        self,
        text: str,
        model: str,
        provider_settings: ProviderSettings,
    ) -> EmbeddingResult:
        return EmbeddingResult(
            error=ApiError.of(ErrorKind.UNSUPPORTED, "Anthropic does not offer an embedding API"),
        )
