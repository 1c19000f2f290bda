"""Pydantic v2 data models for docembed.

- ``provider`` -- settings, chat messages, normalised stream responses,
  model listings, image and embedding results.
- ``document`` -- chunks, vector records, the run summary and run states.
"""

from docembed.models.document import (
    DocumentChunk,
    DocumentVectorRecord,
    EmbeddingState,
    EmbeddingSummary,
)
from docembed.models.provider import (
    ApiError,
    ApiProvider,
    ChatCompletionResponse,
    ChatMessage,
    ChatRole,
    Choice,
    CompletionResult,
    CreateImageData,
    CreateImageRequest,
    CreateImageResponse,
    EmbeddingResult,
    ErrorKind,
    ModelDescriptor,
    ProviderSettings,
    Usage,
)

__all__ = [
    "ApiError",
    "ApiProvider",
    "ChatCompletionResponse",
    "ChatMessage",
    "ChatRole",
    "Choice",
    "CompletionResult",
    "CreateImageData",
    "CreateImageRequest",
    "CreateImageResponse",
    "DocumentChunk",
    "DocumentVectorRecord",
    "EmbeddingResult",
    "EmbeddingState",
    "EmbeddingSummary",
    "ErrorKind",
    "ModelDescriptor",
    "ProviderSettings",
    "Usage",
]
