"""Application settings loaded from environment variables via pydantic-settings.

Sources, highest priority first:

  1. Environment variables (``OPENAI_API_KEY=sk-...``)
  2. ``.env`` in the working directory

Field ``openai_api_key`` maps to ``OPENAI_API_KEY`` and so on.  Per-vendor
connection details (URL, embedding path, model list type) live in the
providers YAML file; see :mod:`docembed.config.loader`.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """docembed application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Provider credentials ===
    # Empty string = not configured; the loader leaves the YAML value alone.
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    providers_config: str = "config/providers.yaml"

    # === Transport ===
    http_timeout: float = 60.0
    http_connect_timeout: float = 5.0
    anthropic_version: str = "2023-06-01"
    anthropic_max_tokens: int = 4096

    # === Document pipeline ===
    upload_dir: str = "./uploads/"
    chunk_window: int = 8
    chunk_overlap: int = 0

    # === Vector store ===
    chromadb_persist_dir: str = "./data/chromadb"
    vector_class_name: str = "DocumentVectors"
    vector_batch_size: int = 100

    # === App ===
    app_env: str = "development"
    log_level: str = "INFO"
