"""Provider-facing data models.

Pydantic v2 models for provider settings, chat messages, the normalised
streaming response shape, model listings, image generation and embedding
results.  Vendor payloads are converted into these shapes by the provider
adapters in ``docembed/providers/llm/`` so callers never branch on vendor.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docembed.transport.streaming import ChatStream

# Absolute http/https URL: a host (localhost or dotted name), an optional
# port, and an optional trailing path.
_URL_PATTERN = re.compile(r"^(https?://)(localhost|[\w-]+(\.[\w-]+)+)(:\d+)?(/.*)?$")


class ApiProvider(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """Vendors with a provider adapter."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


class ChatRole(str, Enum):  # noqa: UP042
    USER = "user"
    SYSTEM = "system"
    ASSISTANT = "assistant"


class ErrorKind(str, Enum):  # noqa: UP042
    """Category of a structured error.

    ``TRANSPORT`` and ``STATUS`` come from the network layer;
    ``EMPTY_BODY`` and ``MALFORMED_PAYLOAD`` are protocol failures where a
    response arrived but could not be used.
    """

    NONE = "none"
    TRANSPORT = "transport"
    STATUS = "status"
    EMPTY_BODY = "empty_body"
    MALFORMED_PAYLOAD = "malformed_payload"
    CANCELLED = "cancelled"
    UNSUPPORTED = "unsupported"
    INVALID_REQUEST = "invalid_request"


# ---------------------------------------------------------------------------
# ProviderSettings: caller-selected, read-only per request.
# ---------------------------------------------------------------------------
class ProviderSettings(BaseModel):
    """Connection settings for one configured vendor.

    Loaded from the providers YAML file (see ``docembed/config/loader.py``)
    and never mutated by the core.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    service_id: ApiProvider = Field(description="Vendor this entry configures.")
    url: str = Field(description="Absolute http(s) base URL of the vendor API.")
    api_key: str | None = Field(
        default=None,
        description="API key; an empty string is treated as unset.",
    )
    has_embedding: bool = Field(default=False, description="Vendor offers an embedding endpoint.")
    embedding_path: str = Field(default="", description="Path of the embedding endpoint.")
    locked_model_type: bool = Field(
        default=False,
        description="Model list type is fixed by the vendor and not user-selectable.",
    )
    model_list_type: str = Field(
        default="openai",
        min_length=2,
        description="Shape of the vendor's model listing.",
    )
    embedding_dimension: int | None = Field(
        default=None,
        gt=0,
        description="Declared vector length of the embedding model, if known.",
    )

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        if not _URL_PATTERN.match(value):
            raise ValueError(
                "URL must start with 'http://' or 'https://' followed by a domain name."
            )
        return value

    @field_validator("api_key", mode="before")
    @classmethod
    def _normalise_api_key(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if len(value) < 5:
            raise ValueError("API Key must be at least 5 characters long.")
        return value


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: ChatRole = ChatRole.ASSISTANT
    content: str


# ---------------------------------------------------------------------------
# Structured errors and call results
# ---------------------------------------------------------------------------
class ApiError(BaseModel):
    """Structured error returned in place of a raised exception."""

    model_config = ConfigDict(frozen=True)

    is_error: bool = False
    error_message: str = ""
    kind: ErrorKind = ErrorKind.NONE

    @classmethod
    def none(cls) -> ApiError:
        return cls()

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> ApiError:
        return cls(is_error=True, error_message=message, kind=kind)


class CompletionResult(BaseModel):
    """Outcome of ``IProvider.chat_completions``.

    Check ``error.is_error`` before consuming ``stream``.  On error the
    stream is empty; on success it doubles as the cancellation handle for
    the call.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stream: ChatStream
    error: ApiError = Field(default_factory=ApiError.none)


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Choice(BaseModel):
    index: int = 0
    delta: ChatMessage
    finish_reason: str | None = None


class ChatCompletionResponse(BaseModel):
    """One decoded unit of a streamed completion, in OpenAI chunk shape."""

    id: str = ""
    object: str = "chat.completion.chunk"
    created: int = 0
    model: str = ""
    system_fingerprint: str = ""
    choices: list[Choice] = Field(default_factory=list)
    usage: Usage | None = None

    @property
    def text(self) -> str:
        """Concatenated delta content of every choice."""
        return "".join(c.delta.content for c in self.choices)


class ModelDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    object: str = "model"
    created: int = 0
    type: str | None = None
    embedding: bool | None = None


# ---------------------------------------------------------------------------
# Image generation
# ---------------------------------------------------------------------------
class CreateImageRequest(BaseModel):
    prompt: str = Field(min_length=1)
    model: str
    n: int = 1
    quality: str = "standard"
    size: str = "1024x1024"
    style: str = "vivid"
    user: str | None = None


class CreateImageData(BaseModel):
    url: str = ""
    b64_json: str | None = None
    revised_prompt: str = ""


class CreateImageResponse(BaseModel):
    """Image generation result.

    Providers without image generation return ``not_implemented_or_supported``
    set and an empty ``data`` list instead of failing.
    """

    created: int = -1
    data: list[CreateImageData] = Field(default_factory=list)
    error: ApiError = Field(default_factory=ApiError.none)
    not_implemented_or_supported: bool = False


# ---------------------------------------------------------------------------
# Embedding
# ---------------------------------------------------------------------------
class EmbeddingResult(BaseModel):
    """Vector for one text, or a structured error."""

    embedding: list[float] = Field(default_factory=list)
    total_tokens: int | None = None
    error: ApiError = Field(default_factory=ApiError.none)
