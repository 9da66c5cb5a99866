"""Payload validation helpers shared by the domain services."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any


class ValidationError(ValueError):
    """Raised when a payload fails schema validation.

    Carries one message per offending field so route handlers can return a
    structured ``fieldErrors`` object.
    """

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        summary = "; ".join(f"{k}: {v}" for k, v in self.field_errors.items())
        super().__init__(f"Validation failed ({summary})")


class FieldValidator:
    """Collects field errors for a payload dictionary.

    Example:
        v = FieldValidator(data)
        title = v.string("title", required=True, max_length=200)
        v.raise_if_errors()
    """

    def __init__(self, data: dict[str, Any] | None):
        self.data = data or {}
        self.errors: dict[str, str] = {}

    def _fail(self, field: str, message: str) -> None:
        self.errors.setdefault(field, message)

    def string(
        self,
        field: str,
        required: bool = False,
        min_length: int | None = None,
        max_length: int | None = None,
        message: str | None = None,
    ) -> str | None:
        value = self.data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                self._fail(field, message or "Required")
            return None
        if not isinstance(value, str):
            self._fail(field, "Must be a string")
            return None
        value = value.strip()
        if min_length is not None and len(value) < min_length:
            self._fail(field, message or f"Must be at least {min_length} characters")
        if max_length is not None and len(value) > max_length:
            self._fail(field, f"Must be at most {max_length} characters")
        return value

    def number(
        self,
        field: str,
        required: bool = False,
        minimum: float | None = None,
        maximum: float | None = None,
        integer: bool = True,
    ) -> int | float | None:
        value = self.data.get(field)
        if value is None or value == "":
            if required:
                self._fail(field, "Required")
            return None
        if isinstance(value, bool):
            self._fail(field, "Must be a number")
            return None
        try:
            number = int(value) if integer else float(value)
        except (TypeError, ValueError):
            self._fail(field, "Must be a number")
            return None
        if integer and isinstance(value, float) and not value.is_integer():
            self._fail(field, "Must be a whole number")
            return None
        if minimum is not None and number < minimum:
            self._fail(field, f"Must be at least {minimum:g}")
        if maximum is not None and number > maximum:
            self._fail(field, f"Must be at most {maximum:g}")
        return number

    def choice(self, field: str, allowed: set[str] | tuple[str, ...], required: bool = False) -> str | None:
        value = self.string(field, required=required)
        if value is None:
            return None
        if value not in allowed:
            self._fail(field, f"Must be one of: {', '.join(sorted(allowed))}")
            return None
        return value

    def string_list(
        self, field: str, max_item_length: int | None = None, required: bool = False
    ) -> list[str]:
        value = self.data.get(field)
        if value is None:
            if required:
                self._fail(field, "Required")
            return []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            self._fail(field, "Must be a list of strings")
            return []
        items = [v.strip() for v in value if v.strip()]
        if max_item_length is not None and any(len(v) > max_item_length for v in items):
            self._fail(field, f"Must be at most {max_item_length} characters")
        return items

    def int_list(self, field: str) -> list[int]:
        value = self.data.get(field)
        if value is None:
            return []
        if not isinstance(value, list):
            self._fail(field, "Must be a list of ids")
            return []
        try:
            return [int(v) for v in value]
        except (TypeError, ValueError):
            self._fail(field, "Must be a list of ids")
            return []

    def date(self, field: str) -> date | None:
        value = self.data.get(field)
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
        except ValueError:
            self._fail(field, "Must be an ISO date")
            return None

    def add_error(self, field: str, message: str) -> None:
        self._fail(field, message)

    def raise_if_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)
