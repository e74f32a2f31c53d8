"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
#   1. config/config.yaml: Static defaults checked into the repo
#   2. .env file: Local developer overrides (not committed)
#   3. Environment vars: Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the
# environment-based values on top:
#   base = {"relationships": {"parent_limit": 50}}
#   overrides = {"weaviate": {"url": "http://localhost:8080"}}
#   result = {"relationships": {"parent_limit": 50},
#             "weaviate": {"url": "http://localhost:8080"}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from weaviate_console.config.settings import Settings

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "config.yaml"


def load_config(path: str | Path | None = None, settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  Defaults to the
            repository's ``config/config.yaml``.
        settings: Settings to merge; a fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "weaviate": {
            "url": settings.weaviate_url,
            "api_key_configured": bool(settings.weaviate_api_key),
            "request_timeout": settings.request_timeout,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
