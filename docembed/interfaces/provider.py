"""Abstract base class for LLM vendor providers.

Every vendor (OpenAI-compatible servers, Anthropic, Ollama) is reached
through this one capability interface.  Concrete adapters absorb the
differences in auth headers, payload shapes and streaming framing, and
convert every failure into a result object.  Callers can therefore stay
vendor-agnostic and never need ``isinstance`` checks or vendor exceptions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docembed.models.provider import (
        ChatCompletionResponse,
        ChatMessage,
        CompletionResult,
        CreateImageResponse,
        EmbeddingResult,
        ModelDescriptor,
        ProviderSettings,
    )
    from docembed.transport.streaming import ChatStream


# Concrete implementations: OpenAIProvider, AnthropicProvider, OllamaProvider
# Located in: docembed/providers/llm/
class IProvider(ABC):
    """Contract for one vendor's chat, model listing, image and embedding APIs.

    An instance tracks at most one cancellable chat stream.  Use one
    instance per conversation (and per pipeline run) so cancellation state
    is never shared.
    """

    @abstractmethod
    def provider_id(self) -> str:
        """Return the vendor identifier, e.g. ``"anthropic"``."""

    @abstractmethod
    async def models(
        self,
        provider_settings: ProviderSettings,
        embedded_only: bool,
    ) -> list[ModelDescriptor]:
        """List the models the vendor exposes.

        Never raises: transport and vendor errors are logged and produce an
        empty list.  With *embedded_only* only embedding-capable models are
        returned (an empty list for vendors that have none).
        """

    @abstractmethod
    async def chat_completions(
        self,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None,
        api_key: str | None,
        with_cancellation: bool,
    ) -> CompletionResult:
        """Start a streamed chat completion.

        Parameters
        ----------
        model:
            Vendor model identifier.
        messages:
            The conversation, oldest first.  Order is preserved on the wire.
        base_url:
            Vendor base URL (no trailing path required).
        api_key:
            Vendor API key, or ``None``.
        with_cancellation:
            When ``True`` the returned stream is tracked as this instance's
            active stream so :meth:`cancel_chat_completion_stream` can stop
            it.  A new cancellable call replaces the tracked stream without
            cancelling the previous one.

        Returns
        -------
        CompletionResult
            ``error.is_error`` is set on transport failure, a vendor error
            status, or an empty response body; the stream is then empty.
        """

    @abstractmethod
    def cancel_chat_completion_stream(self, stream: ChatStream | None = None) -> None:
        """Cancel *stream*, or the tracked stream when none is given.

        Idempotent: cancelling twice or with nothing in flight is a no-op.
        """

    @abstractmethod
    def convert_response(self, stream_data: str) -> ChatCompletionResponse:
        """Decode one streamed payload into the normalised response shape.

        Raises
        ------
        docembed.utils.errors.MalformedPayloadError
            If *stream_data* cannot be decoded.
        """

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        model: str,
        base_url: str | None,
        api_key: str | None,
    ) -> CreateImageResponse:
        """Generate an image from *prompt*.

        Vendors without image generation return a response with
        ``not_implemented_or_supported=True`` and no data.
        """

    @abstractmethod
    def supports_embedding(self) -> bool:
        """Return ``True`` if :meth:`embed` is implemented for this vendor.

        Check this when configuring a pipeline, before any text is sent.
        """

    @abstractmethod
    async def embed(
        self,
        text: str,
        model: str,
        provider_settings: ProviderSettings,
    ) -> EmbeddingResult:
        """Embed a single text.

        Returns an :class:`EmbeddingResult` whose ``error`` is set on any
        failure, including ``ErrorKind.UNSUPPORTED`` for vendors without
        embeddings.
        """

    def title_generation_model(self, model: str) -> str:
        """Return the model to use for generating conversation titles."""
        return model
