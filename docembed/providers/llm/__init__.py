"""LLM provider adapters.

Three concrete implementations of IProvider (docembed/interfaces/provider.py):
    - OpenAIProvider    -- OpenAI and OpenAI-compatible servers (SSE chat, images, embeddings)
    - AnthropicProvider -- Claude Messages API (SSE chat, model listing)
    - OllamaProvider    -- local Ollama server (NDJSON chat, embeddings)

Callers pick one with :func:`get_provider`, keyed on the ``service_id`` of
the selected :class:`ProviderSettings`.
"""

from __future__ import annotations

from docembed.config.settings import Settings
from docembed.interfaces.provider import IProvider
from docembed.models.provider import ApiProvider, ProviderSettings
from docembed.providers.llm.anthropic_provider import AnthropicProvider
from docembed.providers.llm.base import BaseHttpProvider
from docembed.providers.llm.ollama_provider import OllamaProvider
from docembed.providers.llm.openai_provider import OpenAIProvider
from docembed.transport.http_transport import HttpTransport
from docembed.utils.errors import ConfigurationError

_PROVIDERS: dict[ApiProvider, type[BaseHttpProvider]] = {
    ApiProvider.OPENAI: OpenAIProvider,
    ApiProvider.ANTHROPIC: AnthropicProvider,
    ApiProvider.OLLAMA: OllamaProvider,
}


def get_provider(
    provider: ProviderSettings | ApiProvider | str,
    transport: HttpTransport | None = None,
    settings: Settings | None = None,
) -> IProvider:
    """Return a fresh provider instance for *provider*.

    Each call builds a new instance, so cancellation state is never shared
    between conversations or pipeline runs.

    Raises
    ------
    ConfigurationError
        If *provider* does not name a supported vendor.
    """
    service_id = provider.service_id if isinstance(provider, ProviderSettings) else provider
    try:
        provider_cls = _PROVIDERS[ApiProvider(service_id)]
    except ValueError as exc:
        raise ConfigurationError(message=f"Unknown provider: {service_id!r}") from exc
    return provider_cls(transport=transport, settings=settings)


__all__ = [
    "AnthropicProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "get_provider",
]
