"""
Pytest configuration and fixtures for unit tests.

Unit tests are fast, isolated tests that don't require external dependencies.
"""

from unittest.mock import MagicMock, Mock

import pytest


def set_result(cursor, columns, rows):
    """Make a mocked cursor return ``rows`` with the given column names."""
    cursor.description = [(c,) for c in columns]
    cursor.fetchall.return_value = list(rows)
    cursor.fetchone.return_value = rows[0] if rows else None


@pytest.fixture
def mock_cursor():
    """Cursor shared by autocommit and transactional blocks."""
    cursor = MagicMock()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_database(mock_cursor):
    """Mock Database whose get_cursor() and transaction() yield ``mock_cursor``."""
    db = Mock()
    db.get_cursor.return_value.__enter__ = Mock(return_value=mock_cursor)
    db.get_cursor.return_value.__exit__ = Mock(return_value=False)
    db.transaction.return_value.__enter__ = Mock(return_value=mock_cursor)
    db.transaction.return_value.__exit__ = Mock(return_value=False)
    return db


@pytest.fixture
def mock_notification_service():
    """NotificationService double that records calls."""
    return Mock()


@pytest.fixture
def set_rows():
    """Return the helper that loads rows into a mocked cursor."""
    return set_result
