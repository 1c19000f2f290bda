"""Configuration module: exports Settings and the providers YAML loader."""

from docembed.config.loader import load_provider_settings
from docembed.config.settings import Settings

__all__ = ["Settings", "load_provider_settings"]
