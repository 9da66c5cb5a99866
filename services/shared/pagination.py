"""
Cursor Pagination

Feeds, job lists, course lists and notifications are paged with a cursor:
the query asks for ``page_size + 1`` rows starting at the cursor row
(inclusive). When the extra row comes back, its id becomes the next cursor.
"""

from __future__ import annotations

from typing import Any

DEFAULT_PAGE_SIZE = 10


def parse_cursor(raw: Any) -> int | None:
    """Parse a cursor from a query string value.

    Args:
        raw: Raw cursor value (string, int or None)

    Returns:
        Integer row id, or None for a missing/blank cursor

    Raises:
        ValueError: If the cursor is not a positive integer
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text or text.lower() in ("null", "none", "undefined"):
        return None
    try:
        value = int(text)
    except ValueError:
        raise ValueError(f"Invalid cursor: {raw}") from None
    if value <= 0:
        raise ValueError(f"Invalid cursor: {raw}")
    return value


def build_page(
    rows: list[dict[str, Any]], page_size: int, id_key: str = "id"
) -> tuple[list[dict[str, Any]], Any]:
    """Split a "take N+1" result into the page and the next cursor.

    Args:
        rows: Rows fetched with LIMIT page_size + 1, already ordered
        page_size: Number of rows that make up a page
        id_key: Column holding the row identifier

    Returns:
        Tuple of (rows for this page, next cursor or None)
    """
    if page_size <= 0:
        raise ValueError("Page size must be positive")
    if len(rows) > page_size:
        return rows[:page_size], rows[page_size][id_key]
    return rows, None


def build_reverse_page(
    rows: list[dict[str, Any]], page_size: int, id_key: str = "id"
) -> tuple[list[dict[str, Any]], Any]:
    """Split a backwards "take N+1" result (oldest first) into page and previous cursor.

    Comments are shown oldest first, and the extra row is the oldest one.

    Args:
        rows: Rows fetched newest-first with LIMIT page_size + 1
        page_size: Number of rows that make up a page
        id_key: Column holding the row identifier

    Returns:
        Tuple of (rows oldest first, previous cursor or None)
    """
    if page_size <= 0:
        raise ValueError("Page size must be positive")
    ordered = list(reversed(rows))
    if len(ordered) > page_size:
        return ordered[1:], ordered[0][id_key]
    return ordered, None
