"""Command-line tools for the Weaviate console.

- ``python -m weaviate_console.cli serve`` runs the web API.
- ``python -m weaviate_console.cli collections|export|import|backup|restore|backup-status``
  run one console operation against the configured Weaviate instance and
  print the result to stdout.
"""
