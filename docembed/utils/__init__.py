"""Utility modules for docembed.

- **errors** -- exception hierarchy rooted at :class:`DocEmbedError`.
- **logging** -- structlog setup (console in development, JSON in production).
"""

from docembed.utils.errors import (
    ConfigurationError,
    DocEmbedError,
    DocumentNotFoundError,
    DocumentReadError,
    EmbeddingUnsupportedError,
    EmptyResponseBodyError,
    InvalidFilenameError,
    MalformedPayloadError,
    ProtocolError,
    TransportError,
    VectorStoreError,
)
from docembed.utils.logging import configure_logging

__all__ = [
    "ConfigurationError",
    "DocEmbedError",
    "DocumentNotFoundError",
    "DocumentReadError",
    "EmbeddingUnsupportedError",
    "EmptyResponseBodyError",
    "InvalidFilenameError",
    "MalformedPayloadError",
    "ProtocolError",
    "TransportError",
    "VectorStoreError",
    "configure_logging",
]
