"""Custom exception hierarchy for docembed.

All application exceptions inherit from :class:`DocEmbedError`, which
carries an optional ``provider_name`` so log lines can show which vendor
or backing service (e.g. "openai", "ollama", "chromadb") was involved.

    DocEmbedError  (base)
    +-- ConfigurationError         (bad provider settings / unknown vendor)
    +-- InvalidFilenameError       (empty filename handed to the pipeline)
    +-- DocumentNotFoundError      (file missing from the upload store)
    +-- DocumentReadError          (text extraction failed)
    +-- TransportError             (network failure, non-success status)
    +-- ProtocolError              (response arrived but could not be used)
    |   +-- EmptyResponseBodyError
    |   +-- MalformedPayloadError
    +-- EmbeddingUnsupportedError  (provider cannot embed)
    +-- VectorStoreError           (batch insert failure)

Provider and pipeline operations turn these into result objects at their
public boundary; only construction preconditions and stream decoding
raise them to callers.
"""


class DocEmbedError(Exception):
    """Base exception for all docembed errors.

    ``__str__`` prefixes the provider name in brackets, e.g.
    ``[anthropic] API request failed with status 401``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration and precondition errors
# ---------------------------------------------------------------------------

class ConfigurationError(DocEmbedError):
    """Raised when provider settings are invalid or name an unknown vendor."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidFilenameError(DocEmbedError):
    """Raised when a document is requested without a filename."""

    def __init__(
        self,
        message: str = "Filename is required.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DocumentNotFoundError(DocEmbedError):
    """Raised when the resolved upload path does not exist."""

    def __init__(
        self,
        message: str = "File not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DocumentReadError(DocEmbedError):
    """Raised when a document reader cannot extract text from a file."""

    def __init__(
        self,
        message: str = "Failed to read document content",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Transport / protocol errors
# ---------------------------------------------------------------------------

class TransportError(DocEmbedError):
    """Raised when an outbound request fails or a stream breaks mid-flight."""

    def __init__(
        self,
        message: str = "API request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProtocolError(DocEmbedError):
    """Raised when a vendor response arrives but cannot be used."""

    def __init__(
        self,
        message: str = "Unexpected response from provider",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmptyResponseBodyError(ProtocolError):
    """Raised when a successful response carries no body to stream."""

    def __init__(
        self,
        message: str = "API request failed with empty response body",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MalformedPayloadError(ProtocolError):
    """Raised when one unit of a streamed response cannot be decoded."""

    def __init__(
        self,
        message: str = "Malformed streaming payload",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Capability / storage errors
# ---------------------------------------------------------------------------

class EmbeddingUnsupportedError(DocEmbedError):
    """Raised when embedding is requested from a provider that cannot embed."""

    def __init__(
        self,
        message: str = "Embedding is not supported by this provider",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class VectorStoreError(DocEmbedError):
    """Raised when the vector store rejects a batch insert."""

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
