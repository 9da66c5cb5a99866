"""
Shared infrastructure for services.

This package contains shared building blocks used across multiple services,
such as the database abstraction, cursor pagination and payload validation.
"""

from .database import Database, PostgreSQLDatabase, row_to_dict, rows_to_dicts
from .pagination import DEFAULT_PAGE_SIZE, build_page, build_reverse_page, parse_cursor
from .structured_logging import get_structured_logger
from .validation import FieldValidator, ValidationError

__all__ = [
    "Database",
    "PostgreSQLDatabase",
    "row_to_dict",
    "rows_to_dicts",
    "DEFAULT_PAGE_SIZE",
    "build_page",
    "build_reverse_page",
    "parse_cursor",
    "get_structured_logger",
    "FieldValidator",
    "ValidationError",
]
