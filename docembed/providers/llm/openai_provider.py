"""OpenAI-compatible provider adapter.

Chat streaming goes through :class:`HttpTransport` against
``{base_url}/v1/chat/completions`` (Server-Sent Events).  Model listing and
image generation use the ``openai`` async SDK pointed at the same base URL,
so any OpenAI-compatible server (LM Studio, vLLM, TogetherAI, ...) works.
Embeddings are posted to the configured ``embedding_path``.
"""

from __future__ import annotations

import openai
import structlog
from pydantic import ValidationError

from docembed.config.settings import Settings
from docembed.models.provider import (
    ApiError,
    ApiProvider,
    ChatCompletionResponse,
    ChatMessage,
    CompletionResult,
    CreateImageData,
    CreateImageRequest,
    CreateImageResponse,
    EmbeddingResult,
    ErrorKind,
    ModelDescriptor,
    ProviderSettings,
)
from docembed.providers.llm.base import BaseHttpProvider
from docembed.transport.http_transport import HttpMethod, HttpTransport
from docembed.utils.errors import MalformedPayloadError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_EMBEDDING_PATH = "/v1/embeddings"


def _auth_headers(api_key: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"} if api_key else {}


class OpenAIProvider(BaseHttpProvider):
    """Provider for the OpenAI API and servers that speak its protocol."""

    def __init__(
        self,
        transport: HttpTransport | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(transport=transport, settings=settings)

    def provider_id(self) -> str:
        return ApiProvider.OPENAI.value

    def _sdk_client(self, base_url: str | None, api_key: str | None) -> openai.AsyncOpenAI:
        # The SDK refuses to build without a key; local servers ignore it.
        return openai.AsyncOpenAI(
            base_url=f"{self._transport.valid_url(base_url)}/v1",
            api_key=api_key or "unset",
            timeout=openai.Timeout(self._settings.http_timeout, connect=self._settings.http_connect_timeout),
        )

    # ------------------------------------------------------------------
    # IProvider implementation
    # ------------------------------------------------------------------

    async def models(
        self,
        provider_settings: ProviderSettings,
        embedded_only: bool,
    ) -> list[ModelDescriptor]:
        try:
            client = self._sdk_client(provider_settings.url, provider_settings.api_key)
            page = await client.models.list()
            models = [
                ModelDescriptor(
                    id=m.id,
                    object=getattr(m, "object", None) or "model",
                    created=getattr(m, "created", 0) or 0,
                    type=getattr(m, "type", None),
                    embedding="embed" in m.id,
                )
                for m in page.data
            ]
        except openai.APIError as exc:
            logger.warning("openai_models_failed", error=str(exc))
            return []
        except Exception as exc:
            logger.warning("openai_models_unexpected_error", error=str(exc))
            return []

        if embedded_only:
            models = [m for m in models if m.embedding]
        logger.debug("openai_models", count=len(models), embedded_only=embedded_only)
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
            f"{self._transport.valid_url(base_url)}/v1/chat/completions",
            _auth_headers(api_key),
            payload,
            with_cancellation,
        )

    def convert_response(self, stream_data: str) -> ChatCompletionResponse:
        data = self._decode_payload(stream_data)
        # Role-only first chunks and empty final deltas carry no content.
        for choice in data.get("choices") or []:
            delta = choice.get("delta") or {}
            choice["delta"] = {
                "role": delta.get("role") or "assistant",
                "content": delta.get("content") or "",
            }
        data["system_fingerprint"] = data.get("system_fingerprint") or ""
        try:
            return ChatCompletionResponse.model_validate(data)
        except ValidationError as exc:
            raise MalformedPayloadError(
                message=f"Unexpected chat completion chunk: {exc}",
                provider_name=self.provider_id(),
            ) from exc

    async def generate_image(
        self,
        prompt: str,
        model: str,
        base_url: str | None,
        api_key: str | None,
    ) -> CreateImageResponse:
        try:
            request = CreateImageRequest(prompt=prompt, model=model)
        except ValidationError:
            return CreateImageResponse(error=ApiError.of(ErrorKind.INVALID_REQUEST, "Prompt is required!"))

        client = self._sdk_client(base_url, api_key)
        try:
            response = await client.images.generate(
                prompt=request.prompt,
                model=request.model,
                n=request.n,
                quality=request.quality,
                size=request.size,
                style=request.style,
            )
        except openai.APIError as exc:
            logger.warning("openai_generate_image_failed", model=model, error=str(exc))
            return CreateImageResponse(
                error=ApiError.of(ErrorKind.TRANSPORT, f"Image generation failed: {exc}"),
            )

        data = [
            CreateImageData(
                url=item.url or "",
                b64_json=item.b64_json,
                revised_prompt=item.revised_prompt or "",
            )
            for item in response.data or []
        ]
        logger.info("openai_generate_image", model=model, images=len(data))
        return CreateImageResponse(created=response.created, data=data)

    def supports_embedding(self) -> bool:
        return True

    async def embed(
        self,
        text: str,
        model: str,
        provider_settings: ProviderSettings,
    ) -> EmbeddingResult:
        path = provider_settings.embedding_path or _DEFAULT_EMBEDDING_PATH
        data, error = await self._request_json(
            f"{self._transport.valid_url(provider_settings.url)}{path}",
            HttpMethod.POST,
            _auth_headers(provider_settings.api_key),
            {"model": model, "input": text},
        )
        if error.is_error:
            return EmbeddingResult(error=error)

        try:
            embedding = data["data"][0]["embedding"]
            total_tokens = (data.get("usage") or {}).get("total_tokens")
            return EmbeddingResult(embedding=embedding, total_tokens=total_tokens)
        except (KeyError, IndexError, TypeError, ValidationError) as exc:
            return EmbeddingResult(
                error=ApiError.of(
                    ErrorKind.MALFORMED_PAYLOAD, f"Unexpected embedding response: {exc!r}"
                ),
            )
