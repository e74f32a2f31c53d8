"""Utility modules for the Weaviate console.

- **errors** -- Exception hierarchy rooted at WeaviateConsoleError; every
  error carries the HTTP status the API layer responds with.
- **graphql** -- Query builders for Weaviate ``Get`` / ``Aggregate`` calls.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text** -- Display helpers (cell truncation, number grouping).
"""

from weaviate_console.utils.errors import (
    AuthenticationError,
    CollectionNotFoundError,
    ConfigurationError,
    ConnectionValidationError,
    ImportFormatError,
    InvalidRequestError,
    ObjectNotFoundError,
    ProviderUnavailableError,
    QueryError,
    UpstreamError,
    WeaviateConsoleError,
)
from weaviate_console.utils.logging import configure_logging, get_logger
from weaviate_console.utils.text import display_value, format_number, truncate_text

__all__ = [
    "AuthenticationError",
    "CollectionNotFoundError",
    "ConfigurationError",
    "ConnectionValidationError",
    "ImportFormatError",
    "InvalidRequestError",
    "ObjectNotFoundError",
    "ProviderUnavailableError",
    "QueryError",
    "UpstreamError",
    "WeaviateConsoleError",
    "configure_logging",
    "display_value",
    "format_number",
    "get_logger",
    "truncate_text",
]
