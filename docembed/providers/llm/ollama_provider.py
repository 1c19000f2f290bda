"""Ollama provider adapter.

Talks to a local Ollama server through its native API rather than the
OpenAI-compatible ``/v1`` shim, because only the native endpoints report
model families and token counts:

    POST /api/chat   streaming chat, one JSON object per line (NDJSON)
    GET  /api/tags   installed models
    POST /api/embed  embeddings

Setup: install Ollama (https://ollama.ai), then ``ollama pull llama3.1``
and ``ollama pull nomic-embed-text`` for embeddings.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

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
from docembed.transport.http_transport import HttpMethod, HttpTransport
from docembed.utils.errors import MalformedPayloadError, ProtocolError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_EMBEDDING_PATH = "/api/embed"
_EMBEDDING_MARKERS = ("embed", "bert")
# Ollama reports nanosecond timestamps; datetime accepts at most microseconds.
_FRACTION = re.compile(r"\.(\d{6})\d+")


def _parse_created_at(value: str | None) -> int:
    """Convert an Ollama ``created_at`` / ``modified_at`` string to epoch seconds."""
    if not value:
        return 0
    normalised = _FRACTION.sub(r".\1", value.replace("Z", "+00:00"))
    try:
        return int(datetime.fromisoformat(normalised).timestamp())
    except ValueError:
        return 0


def _is_embedding_model(entry: dict[str, Any]) -> bool:
    details = entry.get("details") or {}
    names = [entry.get("name", ""), details.get("family", "")]
    names.extend(details.get("families") or [])
    return any(marker in (name or "").lower() for name in names for marker in _EMBEDDING_MARKERS)


class OllamaProvider(BaseHttpProvider):
    """Provider backed by a local Ollama server."""

    def __init__(
        self,
        transport: HttpTransport | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(transport=transport, settings=settings)

    def provider_id(self) -> str:
        return ApiProvider.OLLAMA.value

    # ------------------------------------------------------------------
    # IProvider implementation
    # ------------------------------------------------------------------

    async def models(
        self,
        provider_settings: ProviderSettings,
        embedded_only: bool,
    ) -> list[ModelDescriptor]:
        data, error = await self._request_json(
            f"{self._transport.valid_url(provider_settings.url)}/api/tags",
            HttpMethod.GET,
        )
        if error.is_error:
            logger.warning("ollama_models_failed", error=error.error_message)
            return []

        entries = (data or {}).get("models") if isinstance(data, dict) else None
        models = [
            ModelDescriptor(
                id=entry.get("name") or entry.get("model", ""),
                object="model",
                created=_parse_created_at(entry.get("modified_at")),
                type=(entry.get("details") or {}).get("family"),
                embedding=_is_embedding_model(entry),
            )
            for entry in entries or []
            if isinstance(entry, dict)
        ]
        if embedded_only:
            models = [m for m in models if m.embedding]
        logger.debug("ollama_models", count=len(models), embedded_only=embedded_only)
        return models

    async def chat_completions(
        self,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None,
        api_key: str | None,
        with_cancellation: bool,
    ) -> CompletionResult:
        payload = {
            "model": model,
            "messages": [m.model_dump(mode="json") for m in messages],
            "stream": True,
        }
        return await self._open_stream(
            f"{self._transport.valid_url(base_url)}/api/chat",
            {},
            payload,
            with_cancellation,
        )

    def convert_response(self, stream_data: str) -> ChatCompletionResponse:
        """Convert one native ``/api/chat`` line into the OpenAI chunk shape."""
        data = self._decode_payload(stream_data)
        if "error" in data:
            raise ProtocolError(
                message=f"Stream error: {data['error']}",
                provider_name=self.provider_id(),
            )

        message = data.get("message") or {}
        try:
            delta = ChatMessage(
                role=message.get("role") or ChatRole.ASSISTANT,
                content=message.get("content") or "",
            )
        except ValidationError as exc:
            raise MalformedPayloadError(
                message=f"Unexpected chat message: {exc}",
                provider_name=self.provider_id(),
            ) from exc

        done = bool(data.get("done"))
        response = ChatCompletionResponse(
            id=f"ollama-{data.get('created_at', '')}",
            created=_parse_created_at(data.get("created_at")),
            model=data.get("model", ""),
            choices=[
                Choice(
                    delta=delta,
                    finish_reason=(data.get("done_reason") or "stop") if done else None,
                )
            ],
        )
        if done:
            prompt_tokens = data.get("prompt_eval_count") or 0
            completion_tokens = data.get("eval_count") or 0
            response.usage = Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
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
        return True

    async def embed(
        self,
        text: str,
        model: str,
        provider_settings: ProviderSettings,
    ) -> EmbeddingResult:
        path = provider_settings.embedding_path or _DEFAULT_EMBEDDING_PATH
        # The legacy /api/embeddings endpoint takes "prompt" and returns one vector.
        legacy = path.rstrip("/").endswith("/api/embeddings")
        payload = {"model": model, "prompt" if legacy else "input": text}

        data, error = await self._request_json(
            f"{self._transport.valid_url(provider_settings.url)}{path}",
            HttpMethod.POST,
            None,
            payload,
        )
        if error.is_error:
            return EmbeddingResult(error=error)

        try:
            embedding = data["embedding"] if legacy else data["embeddings"][0]
            total_tokens = None if legacy else data.get("prompt_eval_count")
            return EmbeddingResult(embedding=embedding, total_tokens=total_tokens)
        except (KeyError, IndexError, TypeError, ValidationError) as exc:
            return EmbeddingResult(
                error=ApiError.of(
                    ErrorKind.MALFORMED_PAYLOAD, f"Unexpected embedding response: {exc!r}"
                ),
            )
