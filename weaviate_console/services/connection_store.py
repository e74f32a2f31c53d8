"""Process-wide holder for the active Weaviate connection.

Every request handler resolves the target URL and auth headers from the
single :class:`ConnectionStore` instance, so switching endpoints from the UI
takes effect for all subsequent requests.  The store is seeded from
``WEAVIATE_URL`` / ``WEAVIATE_API_KEY`` on first use.
"""

from __future__ import annotations

import time
from typing import ClassVar
from urllib.parse import urlsplit

from weaviate_console.config.settings import Settings
from weaviate_console.models.connection import ConnectionState, ConnectionValidation, Endpoint

_DEFAULT_HOST = "127.0.0.1"
_DEFAULT_PORT = 8080
_DEFAULT_GRPC_PORT = 50051

# URL fragments that indicate a hosted (and therefore authenticated) instance.
_CLOUD_MARKERS = ("weaviate.network", "weaviate.io", "cloud")


def normalize_url(url: str) -> str:
    """Trim *url*, drop a trailing slash and default the scheme to ``http://``."""
    cleaned = url.strip().rstrip("/")
    if cleaned and not cleaned.startswith(("http://", "https://")):
        cleaned = f"http://{cleaned}"
    return cleaned


def parse_endpoint(url: str) -> Endpoint:
    """Extract host and ports from *url*, falling back to local defaults."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return Endpoint(host=_DEFAULT_HOST, port=_DEFAULT_PORT, grpc_port=_DEFAULT_GRPC_PORT)
    if not parts.scheme or not parts.hostname:
        return Endpoint(host=_DEFAULT_HOST, port=_DEFAULT_PORT, grpc_port=_DEFAULT_GRPC_PORT)
    return Endpoint(
        host=parts.hostname,
        port=port or _DEFAULT_PORT,
        grpc_port=_DEFAULT_GRPC_PORT,
    )


def _is_valid_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018  (raises ValueError on a malformed port)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)


class ConnectionStore:
    """Holds the URL, API key and connection id of the active Weaviate target.

    Use :meth:`get_instance` rather than the constructor so that every API
    route shares the same configuration.
    """

    _instance: ClassVar[ConnectionStore | None] = None

    def __init__(self, url: str = "", api_key: str = "", environment: str = "development") -> None:
        self._url = url
        self._api_key = api_key
        self._environment = environment
        self._connection_id = ""

    @classmethod
    def get_instance(
        cls,
        initial_url: str | None = None,
        initial_api_key: str | None = None,
        environment: str | None = None,
    ) -> ConnectionStore:
        """Return the shared store, creating it on first call.

        Arguments are only used for the first call; missing values fall
        back to the environment.
        """
        if cls._instance is None:
            settings = Settings()
            cls._instance = cls(
                url=initial_url or settings.weaviate_url,
                api_key=initial_api_key or settings.weaviate_api_key,
                environment=environment or settings.app_env,
            )
        return cls._instance

    @classmethod
    def clear_instance(cls) -> None:
        """Forget the shared store; the next :meth:`get_instance` builds a new one."""
        cls._instance = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    @url.setter
    def url(self, new_url: str) -> None:
        self._url = new_url

    @property
    def api_key(self) -> str:
        return self._api_key

    @api_key.setter
    def api_key(self, new_api_key: str) -> None:
        self._api_key = new_api_key

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @connection_id.setter
    def connection_id(self, value: str) -> None:
        self._connection_id = value

    @property
    def environment(self) -> str:
        return self._environment

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------

    def reset(self, initial_url: str | None = None, initial_api_key: str | None = None) -> None:
        """Restore URL and key from the arguments or the environment."""
        settings = Settings()
        self._url = initial_url or settings.weaviate_url
        self._api_key = initial_api_key or settings.weaviate_api_key
        self._connection_id = ""

    def get_auth_headers(self) -> dict[str, str]:
        """JSON content type plus a bearer token when an API key is set."""
        headers = {"Content-Type": "application/json"}
        if self._api_key and self._api_key.strip():
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def is_production(self) -> bool:
        return self._environment == "production"

    def is_api_key_required(self) -> bool:
        """Production deployments and hosted/HTTPS endpoints need an API key."""
        if self.is_production():
            return True
        url = self._url.lower()
        return any(marker in url for marker in _CLOUD_MARKERS) or url.startswith("https://")

    def validate_connection(self) -> ConnectionValidation:
        """Check the current configuration; the first failing rule wins."""
        if not self._url:
            return ConnectionValidation(is_valid=False, message="Weaviate URL is required")

        if self.is_api_key_required() and not self._api_key.strip():
            return ConnectionValidation(
                is_valid=False,
                message="API key is required for production or cloud instances",
            )

        if not _is_valid_url(self._url):
            return ConnectionValidation(is_valid=False, message="Invalid Weaviate URL format")

        return ConnectionValidation(is_valid=True)

    def generate_connection_id(self, url: str) -> str:
        """Unique per connect attempt, even when reconnecting to the same URL."""
        return f"{url}|{int(time.time() * 1000)}"

    def state(self) -> ConnectionState:
        return ConnectionState(
            url=self._url,
            has_api_key=bool(self._api_key.strip()),
            api_key_required=self.is_api_key_required(),
            connection_id=self._connection_id,
            environment=self._environment,
        )
