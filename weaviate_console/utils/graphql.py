"""GraphQL query builders for Weaviate's ``Get`` and ``Aggregate`` APIs.

Weaviate's GraphQL surface needs explicit field selection, so every query
the console issues is rendered from the collection schema.  Only scalar
properties are selected; cross-references, geo coordinates, phone numbers
and nested objects require sub-selections the console does not render.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from weaviate_console.utils.errors import InvalidRequestError

# Base data types (without the ``[]`` array suffix) that can be selected
# as plain GraphQL fields.
_SCALAR_TYPES = frozenset(
    {"text", "string", "int", "number", "boolean", "date", "uuid", "blob"}
)

# Weaviate class names are GraphQL type names starting with a capital letter.
_CLASS_NAME_RE = re.compile(r"^[A-Z][_0-9A-Za-z]*$")


def validate_class_name(class_name: str) -> str:
    """Return *class_name* unchanged, or raise if it cannot be a Weaviate class."""
    if not isinstance(class_name, str) or not _CLASS_NAME_RE.match(class_name):
        raise InvalidRequestError(message=f'Invalid collection name "{class_name}"')
    return class_name


def escape_graphql_string(value: str) -> str:
    """Escape *value* for use inside a double-quoted GraphQL string literal."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def is_scalar_data_type(data_type: Sequence[str] | None) -> bool:
    """Return True when a property's ``dataType`` can be selected directly."""
    if not data_type:
        return False
    base = data_type[0]
    if base.endswith("[]"):
        base = base[:-2]
    return base in _SCALAR_TYPES


def selectable_properties(class_schema: dict[str, Any] | None) -> list[str]:
    """Property names of *class_schema* that can be selected in a ``Get`` query."""
    if not class_schema:
        return []
    return [
        prop["name"]
        for prop in class_schema.get("properties") or []
        if prop.get("name") and is_scalar_data_type(prop.get("dataType"))
    ]


def build_get_query(
    class_name: str,
    fields: Iterable[str],
    *,
    additional: Iterable[str] = ("id",),
    limit: int | None = None,
    offset: int | None = None,
    bm25_query: str | None = None,
    where_equal: tuple[str, str] | None = None,
    sort: tuple[str, str] | None = None,
) -> str:
    """Render a ``{ Get { Class(...) { ... } } }`` query.

    Parameters
    ----------
    class_name:
        The collection to query.
    fields:
        Property names to select.
    additional:
        ``_additional`` sub-fields (``id``, ``score``, ``vector``, ...).
    limit, offset:
        Pagination arguments; omitted when ``None``.
    bm25_query:
        Keyword search string; escaped before rendering.
    where_equal:
        ``(path, text)`` for an ``Equal`` filter on a text property.
    sort:
        ``(path, order)`` where order is ``"asc"`` or ``"desc"``.
    """
    validate_class_name(class_name)
    arguments: list[str] = []
    if bm25_query is not None:
        arguments.append(f'bm25: {{ query: "{escape_graphql_string(bm25_query)}" }}')
    if where_equal is not None:
        path, value = where_equal
        arguments.append(
            f'where: {{ path: ["{path}"], operator: Equal, '
            f'valueText: "{escape_graphql_string(value)}" }}'
        )
    if sort is not None:
        path, order = sort
        arguments.append(f'sort: [{{ path: ["{path}"], order: {order} }}]')
    if limit is not None:
        arguments.append(f"limit: {int(limit)}")
    if offset is not None:
        arguments.append(f"offset: {int(offset)}")

    args_clause = f"({', '.join(arguments)})" if arguments else ""
    additional_clause = " ".join(additional)
    field_clause = " ".join(fields)

    return (
        "{ Get { "
        f"{class_name}{args_clause} {{ "
        f"_additional {{ {additional_clause} }} "
        f"{field_clause}"
        " } } }"
    )


def build_count_query(class_name: str) -> str:
    """Render an ``Aggregate`` query returning the object count of a class."""
    validate_class_name(class_name)
    return f"{{ Aggregate {{ {class_name} {{ meta {{ count }} }} }} }}"


def extract_get_results(result: dict[str, Any], class_name: str) -> list[dict[str, Any]]:
    """Pull the record list for *class_name* out of a ``Get`` response."""
    data = result.get("data") or {}
    return (data.get("Get") or {}).get(class_name) or []


def extract_count(result: dict[str, Any], class_name: str) -> int:
    """Pull ``meta.count`` for *class_name* out of an ``Aggregate`` response."""
    data = result.get("data") or {}
    rows = (data.get("Aggregate") or {}).get(class_name) or []
    if not rows:
        return 0
    meta = rows[0].get("meta") or {}
    return int(meta.get("count") or 0)
