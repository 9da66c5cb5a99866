"""Request parsing helpers shared by the blueprints."""

from flask import request

from services.shared.pagination import parse_cursor


def get_cursor_arg() -> int | None:
    """Read the ``cursor`` query argument.

    Raises:
        ValueError: If the cursor is not a positive integer
    """
    return parse_cursor(request.args.get("cursor"))


def get_json_body() -> dict:
    """Return the JSON object body, or raise ValueError when it is missing."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("No data provided")
    return data


def parse_id(value, name: str = "id") -> int:
    """Parse a positive integer identifier from a path or query value."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {name}") from None
    if parsed <= 0:
        raise ValueError(f"Invalid {name}")
    return parsed


def get_text(data: dict, key: str, default: str = "") -> str:
    """Return a stripped string field from a JSON body.

    Raises:
        ValueError: If the value is present but not a string
    """
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value.strip()
