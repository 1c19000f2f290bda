"""YAML provider configuration loader with environment overrides.

The providers file mirrors the settings form of the original UI::

    services:
      - service_id: openai
        url: https://api.openai.com
        has_embedding: true
        embedding_path: /v1/embeddings
        model_list_type: openai

API keys normally come from the environment (``OPENAI_API_KEY``,
``ANTHROPIC_API_KEY``) and are merged over whatever the YAML holds before
each entry is validated into a :class:`ProviderSettings`.
"""

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from docembed.config.settings import Settings
from docembed.models.provider import ApiProvider, ProviderSettings
from docembed.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


def load_provider_settings(
    path: str | None = None,
    settings: Settings | None = None,
) -> dict[ApiProvider, ProviderSettings]:
    """Load and validate every provider entry, keyed by vendor.

    Args:
        path: YAML file to read; defaults to ``settings.providers_config``.
        settings: Environment-backed settings supplying API key overrides.

    Returns:
        One :class:`ProviderSettings` per configured vendor.  A missing file
        yields an empty mapping.

    Raises:
        ConfigurationError: If the YAML is malformed or an entry fails validation.
    """
    settings = settings or Settings()
    config_path = Path(path or settings.providers_config)
    if not config_path.exists():
        logger.warning("providers_config_missing", path=str(config_path))
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(message=f"Invalid providers YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(message="Providers YAML must be a mapping with a 'services' list")

    services = raw.get("services") or []
    if not isinstance(services, list):
        raise ConfigurationError(message="'services' must be a list of provider entries")

    env_keys = {
        ApiProvider.OPENAI.value: settings.openai_api_key,
        ApiProvider.ANTHROPIC.value: settings.anthropic_api_key,
    }

    providers: dict[ApiProvider, ProviderSettings] = {}
    for entry in services:
        if not isinstance(entry, dict):
            raise ConfigurationError(message=f"Provider entry must be a mapping, got {entry!r}")
        entry = dict(entry)
        service_id = str(entry.get("service_id", ""))
        if env_keys.get(service_id):
            entry["api_key"] = env_keys[service_id]
        try:
            provider_settings = ProviderSettings.model_validate(entry)
        except ValidationError as exc:
            raise ConfigurationError(
                message=f"Invalid settings for provider '{service_id}': {exc}",
                provider_name=service_id or None,
            ) from exc
        providers[provider_settings.service_id] = provider_settings

    logger.debug("providers_config_loaded", path=str(config_path), providers=len(providers))
    return providers
