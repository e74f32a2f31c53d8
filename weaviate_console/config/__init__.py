"""Configuration module: exports Settings, load_config, and a module-level singleton."""

from weaviate_console.config.loader import load_config
from weaviate_console.config.settings import Settings

settings = Settings()

__all__ = ["Settings", "load_config", "settings"]
