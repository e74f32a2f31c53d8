"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. **Environment variables**: e.g. WEAVIATE_URL=http://localhost:8080
#   2. **.env file**: key=value lines in the project root .env file
#
# Field ``weaviate_api_key`` maps to env var ``WEAVIATE_API_KEY``.
# Defaults below apply when neither source provides a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Weaviate console settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Weaviate connection ===
    # Initial target of the connection store; the UI can repoint it at runtime.
    weaviate_url: str = ""
    weaviate_api_key: str = ""
    request_timeout: float = 30.0

    # === Backup / Restore ===
    backup_default_path: str = "/tmp/weaviate-backups"
    backup_default_backend: str = "filesystem"

    # === Browsing, search, import/export ===
    objects_page_size: int = 250
    search_default_limit: int = 50
    search_property_limit: int = 10  # max properties passed to bm25
    export_default_limit: int = 1000
    import_batch_size: int = 100

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_allowed_origins: list[str] = ["*"]

    def is_production(self) -> bool:
        """Return True when running with ``APP_ENV=production``."""
        return self.app_env == "production"
