"""Allow ``python -m weaviate_console.cli`` execution."""

from weaviate_console.cli.console import main

main()
