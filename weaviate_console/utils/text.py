"""Display formatting helpers shared by the table, export, and stats views.

Cells in the object table are rendered as short previews; the full value is
available on hover in the UI.  The rules here mirror what the table shows:
character limit first, then word limit.
"""

from __future__ import annotations

import json
from typing import Any

_DEFAULT_WORD_LIMIT = 3
_DEFAULT_CHAR_LIMIT = 40
_ELLIPSIS = "..."


def truncate_text(
    text: str,
    word_limit: int = _DEFAULT_WORD_LIMIT,
    char_limit: int = _DEFAULT_CHAR_LIMIT,
) -> tuple[str, bool]:
    """Shorten *text* for a table cell.

    Returns
    -------
    tuple[str, bool]
        The (possibly shortened) text and whether it was shortened.
    """
    if len(text) > char_limit:
        return text[:char_limit] + _ELLIPSIS, True

    words = text.split(" ")
    if len(words) <= word_limit:
        return text, False
    return " ".join(words[:word_limit]) + _ELLIPSIS, True


def display_value(value: Any) -> str:
    """Render an arbitrary property value as a single display string."""
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def format_number(value: int) -> str:
    """Group thousands with dots, e.g. ``1234567`` -> ``"1.234.567"``."""
    return f"{value:,}".replace(",", ".")


def preview(text: Any, length: int) -> str:
    """First *length* characters of *text* with an ellipsis when cut."""
    rendered = "" if text is None else str(text)
    if len(rendered) > length:
        return rendered[:length] + _ELLIPSIS
    return rendered
