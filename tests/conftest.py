"""Shared pytest fixtures for the docembed test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import structlog

from docembed.config.settings import Settings
from docembed.interfaces.provider import IProvider
from docembed.interfaces.vector_store_provider import IVectorStoreClient
from docembed.models.provider import ApiProvider, EmbeddingResult, ProviderSettings
from docembed.transport.http_transport import HttpTransport


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    """Route structlog output nowhere so CLI tests can parse stdout."""
    structlog.configure(
        processors=[],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def settings(upload_dir: Path, tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="",
        anthropic_api_key="",
        upload_dir=str(upload_dir),
        chromadb_persist_dir=str(tmp_path / "chroma"),
        providers_config=str(tmp_path / "providers.yaml"),
    )


@pytest.fixture
def openai_settings() -> ProviderSettings:
    return ProviderSettings(
        service_id=ApiProvider.OPENAI,
        url="https://api.openai.com",
        api_key="sk-test-key",
        has_embedding=True,
        embedding_path="/v1/embeddings",
    )


@pytest.fixture
def ollama_settings() -> ProviderSettings:
    return ProviderSettings(
        service_id=ApiProvider.OLLAMA,
        url="http://localhost:11434",
        has_embedding=True,
        embedding_path="/api/embed",
        model_list_type="ollama",
    )


@pytest.fixture
def anthropic_settings() -> ProviderSettings:
    return ProviderSettings(
        service_id=ApiProvider.ANTHROPIC,
        url="https://api.anthropic.com",
        api_key="sk-ant-test",
        locked_model_type=True,
        model_list_type="anthropic",
    )


@pytest.fixture
def make_transport(settings: Settings) -> Callable[..., HttpTransport]:
    """Build an HttpTransport whose client answers through *handler*."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTransport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpTransport(settings=settings, client=client)

    return _make


@pytest.fixture
def mock_provider() -> MagicMock:
    """An embedding-capable provider returning 3-dim vectors of 5 tokens each."""
    mock = MagicMock(spec=IProvider)
    mock.provider_id.return_value = "mock"
    mock.supports_embedding.return_value = True
    mock.embed = AsyncMock(return_value=EmbeddingResult(embedding=[0.1, 0.2, 0.3], total_tokens=5))
    return mock


@pytest.fixture
def mock_store() -> MagicMock:
    mock = MagicMock(spec=IVectorStoreClient)
    mock.batch_insert = AsyncMock(return_value=None)
    mock.get_provider_name.return_value = "mock"
    return mock
