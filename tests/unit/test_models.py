"""Unit tests for the pydantic data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from docembed.models.document import DocumentChunk, DocumentVectorRecord, EmbeddingSummary
from docembed.models.provider import (
    ApiError,
    ApiProvider,
    ChatCompletionResponse,
    ChatMessage,
    ChatRole,
    Choice,
    CreateImageRequest,
    ErrorKind,
    ProviderSettings,
)


class TestProviderSettings:
    @pytest.mark.parametrize(
        "url",
        [
            "https://api.openai.com",
            "http://localhost:11434",
            "http://my-host.internal:8080/v1",
        ],
    )
    def test_valid_urls(self, url: str) -> None:
        assert ProviderSettings(service_id=ApiProvider.OPENAI, url=url).url == url

    @pytest.mark.parametrize("url", ["localhost:11434", "ftp://files.example.com", "https://", ""])
    def test_invalid_urls(self, url: str) -> None:
        with pytest.raises(ValidationError):
            ProviderSettings(service_id=ApiProvider.OPENAI, url=url)

    def test_empty_api_key_is_unset(self) -> None:
        settings = ProviderSettings(service_id="ollama", url="http://localhost:11434", api_key="")
        assert settings.api_key is None

    def test_short_api_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProviderSettings(service_id="openai", url="https://api.openai.com", api_key="abc")

    def test_frozen(self) -> None:
        settings = ProviderSettings(service_id="ollama", url="http://localhost:11434")
        with pytest.raises(ValidationError):
            settings.url = "http://other:1"


class TestChatModels:
    def test_message_default_role(self) -> None:
        assert ChatMessage(content="hi").role == ChatRole.ASSISTANT

    def test_message_rejects_unknown_role(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessage(role="tool", content="hi")

    def test_response_text_joins_choices(self) -> None:
        response = ChatCompletionResponse(
            choices=[
                Choice(index=0, delta=ChatMessage(content="Hel")),
                Choice(index=1, delta=ChatMessage(content="lo")),
            ]
        )
        assert response.text == "Hello"

    def test_api_error_helpers(self) -> None:
        assert ApiError.none().is_error is False
        error = ApiError.of(ErrorKind.STATUS, "boom")
        assert (error.is_error, error.kind, error.error_message) == (True, ErrorKind.STATUS, "boom")

    def test_image_request_needs_prompt(self) -> None:
        with pytest.raises(ValidationError):
            CreateImageRequest(prompt="", model="dall-e-3")


class TestDocumentModels:
    def test_chunk_index_within_total(self) -> None:
        with pytest.raises(ValidationError):
            DocumentChunk(text="t", chunk_index=3, chunk_total=3, file="f.txt")

    def test_chunk_is_frozen(self) -> None:
        chunk = DocumentChunk(text="t", chunk_index=0, chunk_total=1, file="f.txt")
        with pytest.raises(ValidationError):
            chunk.chunk_index = 1

    def test_record_properties(self) -> None:
        chunk = DocumentChunk(text="t", chunk_index=1, chunk_total=2, file="f.txt")
        record = DocumentVectorRecord(chunk=chunk, embedding=[0.1], total_tokens=9)
        assert record.to_properties() == {
            "text": "t",
            "file": "f.txt",
            "chunkIndex": 1,
            "chunkTotal": 2,
            "totalTokens": 9,
        }

    def test_record_properties_omit_absent_tokens(self) -> None:
        chunk = DocumentChunk(text="t", chunk_index=0, chunk_total=1, file="f.txt")
        record = DocumentVectorRecord(chunk=chunk, embedding=[0.1])
        assert "totalTokens" not in record.to_properties()

    def test_failed_summary_has_zero_counts(self) -> None:
        summary = EmbeddingSummary.failed("m", "boom")
        assert summary.success is False
        assert summary.error_message == "boom"
        assert (summary.text_character_count, summary.no_of_chunks, summary.total_document_tokens) == (0, 0, 0)
