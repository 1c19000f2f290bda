"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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


class TestErrors:
    def test_str_includes_provider(self) -> None:
        error = TransportError(message="API request failed with status 401", provider_name="anthropic")
        assert str(error) == "[anthropic] API request failed with status 401"

    def test_str_without_provider(self) -> None:
        assert str(InvalidFilenameError()) == "Filename is required."

    @pytest.mark.parametrize(
        "cls",
        [
            ConfigurationError,
            DocumentNotFoundError,
            DocumentReadError,
            EmbeddingUnsupportedError,
            InvalidFilenameError,
            ProtocolError,
            TransportError,
            VectorStoreError,
        ],
    )
    def test_hierarchy(self, cls: type[DocEmbedError]) -> None:
        error = cls()
        assert isinstance(error, DocEmbedError)
        assert error.message

    def test_protocol_subclasses(self) -> None:
        assert issubclass(EmptyResponseBodyError, ProtocolError)
        assert issubclass(MalformedPayloadError, ProtocolError)
