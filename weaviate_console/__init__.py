"""Weaviate console: a browser admin UI backend for Weaviate vector databases."""

__version__ = "0.1.0"
