"""Command-line access to the console operations.

Usage::

    python -m weaviate_console.cli serve --port 8000
    python -m weaviate_console.cli collections
    python -m weaviate_console.cli browse Article --limit 20 --sort-property publishedAt
    python -m weaviate_console.cli export Article --format csv --output article.csv
    python -m weaviate_console.cli import article_export.json --create-schema
    python -m weaviate_console.cli backup nightly-2024-01-01 --backend filesystem
    python -m weaviate_console.cli backup-status nightly-2024-01-01
    python -m weaviate_console.cli restore nightly-2024-01-01

The Weaviate endpoint comes from ``WEAVIATE_URL`` / ``WEAVIATE_API_KEY``
(environment or ``.env``).  Results are printed to stdout; errors go to
stderr with exit code 1.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import httpx

from weaviate_console.config.loader import load_config
from weaviate_console.config.settings import Settings
from weaviate_console.services.connection_store import ConnectionStore, normalize_url
from weaviate_console.utils.errors import WeaviateConsoleError
from weaviate_console.utils.text import display_value, format_number, truncate_text

_BACKENDS = ("filesystem", "s3", "gcs", "azure")


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_collections(args: argparse.Namespace, components: dict[str, Any]) -> int:
    service = components["collection_service"]
    collections = await service.list_collections()
    overview = service.build_overview(collections)

    if args.json:
        print(json.dumps(
            {
                "collections": [c.model_dump(by_alias=True) for c in collections],
                "overview": overview.model_dump(by_alias=True),
            },
            indent=2,
        ))
        return 0

    for collection in collections:
        print(f"{collection.name:<40} {format_number(collection.count):>12}")
    print()
    print(f"Collections: {overview.total_collections}")
    print(f"Objects:     {format_number(overview.total_objects)}")
    if overview.largest_collection is not None:
        print(f"Largest:     {overview.largest_collection.name}")
    return 0


async def _handle_browse(args: argparse.Namespace, components: dict[str, Any]) -> int:
    page = await components["collection_service"].get_objects(
        args.collection,
        limit=args.limit,
        offset=args.offset,
        sort_property=args.sort_property,
        sort_order=args.sort_order,
    )
    if not page.data:
        print("No objects", file=sys.stderr)
        return 0

    columns = [key for key in page.data[0] if key != "_additional"]
    print("\t".join(["id", *columns]))
    for row in page.data:
        cells = [str((row.get("_additional") or {}).get("id", ""))]
        for column in columns:
            cell, _ = truncate_text(display_value(row.get(column)))
            cells.append(cell)
        print("\t".join(cells))

    shown_to = page.offset + page.count
    more = ", more available" if page.has_more else ""
    print(f"\nRows {page.offset + 1}-{shown_to}{more}", file=sys.stderr)
    return 0


async def _handle_export(args: argparse.Namespace, components: dict[str, Any]) -> int:
    service = components["export_service"]
    document = await service.export_collection(
        args.collection,
        include_vectors=args.include_vectors,
        limit=args.limit,
    )

    if args.format == "csv":
        if not document.objects:
            print("No data to export", file=sys.stderr)
            return 0
        content = service.render_csv(document.objects, args.include_vectors)
    else:
        content = service.render_json(document)

    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        print(f"Exported {document.total_objects} objects to {args.output}")
    else:
        sys.stdout.write(content)
    return 0


async def _handle_import(args: argparse.Namespace, components: dict[str, Any]) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return 1

    result = await components["import_service"].import_file(
        path.read_bytes(),
        create_schema=args.create_schema,
        replace_existing=args.replace_existing,
    )
    print(f"Collection: {result.collection}")
    print(f"Imported:   {result.imported}/{result.total_objects}")
    print(f"Failed:     {result.failed}")
    for error in result.errors:
        print(f"  - {error}")
    return 0 if result.failed == 0 else 1


async def _handle_backup(args: argparse.Namespace, components: dict[str, Any]) -> int:
    job = await components["backup_service"].create_backup(args.backup_id, args.backend)
    print(json.dumps(job.model_dump(by_alias=True), indent=2))
    return 0


async def _handle_restore(args: argparse.Namespace, components: dict[str, Any]) -> int:
    job = await components["backup_service"].restore_backup(args.backup_id, args.backend)
    print(json.dumps(job.model_dump(by_alias=True), indent=2))
    return 0


async def _handle_backup_status(args: argparse.Namespace, components: dict[str, Any]) -> int:
    status = await components["backup_service"].backup_status(args.backup_id, args.backend)
    print(json.dumps(status, indent=2))
    return 0


_HANDLERS = {
    "collections": _handle_collections,
    "browse": _handle_browse,
    "export": _handle_export,
    "import": _handle_import,
    "backup": _handle_backup,
    "restore": _handle_restore,
    "backup-status": _handle_backup_status,
}


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def _build_components(app_settings: Settings, http_client: httpx.AsyncClient) -> dict[str, Any]:
    # Deferred: importing main builds the FastAPI app.
    from weaviate_console.main import build_components

    store = ConnectionStore(
        url=normalize_url(app_settings.weaviate_url),
        api_key=app_settings.weaviate_api_key,
        environment=app_settings.app_env,
    )
    return build_components(
        app_settings,
        load_config(settings=app_settings),
        http_client=http_client,
        connection_store=store,
    )


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    async with httpx.AsyncClient(timeout=app_settings.request_timeout) as http_client:
        components = _build_components(app_settings, http_client)
        try:
            return await _HANDLERS[args.command](args, components)
        except WeaviateConsoleError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            if exc.details:
                print(f"Details: {exc.details}", file=sys.stderr)
            return 1


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weaviate-console",
        description="Administer a Weaviate instance from the command line.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Console commands")

    serve_parser = subparsers.add_parser("serve", help="Run the web API")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.add_argument(
        "--reload",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Reload on code changes (default: on in development)",
    )

    collections_parser = subparsers.add_parser("collections", help="List collections and counts")
    collections_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    browse_parser = subparsers.add_parser("browse", help="Show one page of a collection")
    browse_parser.add_argument("collection", help="Collection (class) name")
    browse_parser.add_argument("--limit", type=int, default=None, help="Page size")
    browse_parser.add_argument("--offset", type=int, default=0, help="Rows to skip")
    browse_parser.add_argument("--sort-property", default=None, help="Date property to sort by")
    browse_parser.add_argument("--sort-order", choices=("asc", "desc"), default="desc")

    export_parser = subparsers.add_parser("export", help="Export a collection")
    export_parser.add_argument("collection", help="Collection (class) name")
    export_parser.add_argument("--format", choices=("json", "csv"), default="json")
    export_parser.add_argument("--include-vectors", action="store_true", help="Include vectors")
    export_parser.add_argument("--limit", type=int, default=None, help="Maximum objects")
    export_parser.add_argument("--output", "-o", default=None, help="Write to a file instead of stdout")

    import_parser = subparsers.add_parser("import", help="Import an exported JSON file")
    import_parser.add_argument("file", help="Path to the JSON export")
    import_parser.add_argument("--create-schema", action="store_true", help="Create the class if missing")
    import_parser.add_argument(
        "--replace-existing",
        action="store_true",
        help="Drop and re-create the class before importing",
    )

    for name, help_text in (
        ("backup", "Start a backup"),
        ("restore", "Restore a backup"),
        ("backup-status", "Show the status of a backup"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("backup_id", help="Backup identifier")
        sub.add_argument("--backend", choices=_BACKENDS, default=None)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point; exits with the handler's status code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        from weaviate_console.main import run_server

        run_server(host=args.host, port=args.port, reload=args.reload)
        sys.exit(0)

    app_settings = Settings()
    exit_code = asyncio.run(_run(args, app_settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
