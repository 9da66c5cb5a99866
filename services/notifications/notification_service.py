"""Service for in-app notifications."""

from __future__ import annotations

import logging
from typing import Any

from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.pagination import build_page

from .queries import (
    COUNT_UNREAD,
    DELETE_NOTIFICATIONS,
    GET_NOTIFICATION_BY_ID,
    GET_NOTIFICATIONS_PAGE,
    INSERT_NOTIFICATION,
    MARK_ALL_READ,
    MARK_READ,
)

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = (
    "LIKE",
    "COMMENT",
    "FOLLOW",
    "FOLLOW_REQUEST",
    "FOLLOW_REQUEST_ACCEPTED",
    "JOB_APPLICATION",
    "COURSE_ENROLLMENT",
    "COURSE_APPROVAL_REQUEST",
    "COURSE_APPROVAL_RESULT",
    "SYSTEM_ANNOUNCEMENT",
)


class NotificationService:
    """Service for creating, listing and reading notifications."""

    def __init__(self, database: Database, page_size: int = 20):
        """Initialize the notification service.

        Args:
            database: Database connection interface
            page_size: Number of notifications per page
        """
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.page_size = page_size

    def create_notification(
        self,
        recipient_id: int,
        issuer_id: int,
        notification_type: str,
        post_id: int | None = None,
        job_id: int | None = None,
        course_id: int | None = None,
        title: str | None = None,
        message: str | None = None,
        research_id: int | None = None,
        cur=None,
    ) -> int:
        """Create a notification.

        Pass ``cur`` to write the notification inside the caller's
        transaction; otherwise an autocommit cursor is used.

        Args:
            recipient_id: User receiving the notification
            issuer_id: User whose action triggered it
            notification_type: One of NOTIFICATION_TYPES
            post_id: Related post (optional)
            job_id: Related job (optional)
            course_id: Related course (optional)
            title: Short title (optional)
            message: Human readable message (optional)
            research_id: Related research (optional)
            cur: Open cursor to reuse (optional)

        Returns:
            Notification ID

        Raises:
            ValueError: If the notification type is unknown
        """
        if notification_type not in NOTIFICATION_TYPES:
            raise ValueError(f"Invalid notification type: {notification_type}")

        params = (
            recipient_id,
            issuer_id,
            notification_type,
            post_id,
            job_id,
            course_id,
            title,
            message,
            research_id,
        )
        if cur is not None:
            cur.execute(INSERT_NOTIFICATION, params)
            notification_id = cur.fetchone()[0]
        else:
            with self.db.get_cursor() as own_cur:
                own_cur.execute(INSERT_NOTIFICATION, params)
                notification_id = own_cur.fetchone()[0]

        logger.debug(
            f"Created {notification_type} notification {notification_id} "
            f"for user {recipient_id} from user {issuer_id}"
        )
        return notification_id

    def delete_notifications(
        self,
        issuer_id: int,
        recipient_id: int,
        notification_type: str,
        post_id: int | None = None,
        job_id: int | None = None,
        research_id: int | None = None,
        cur=None,
    ) -> int:
        """Delete notifications matching issuer, recipient and type.

        Returns:
            Number of deleted rows
        """
        params = (
            issuer_id,
            recipient_id,
            notification_type,
            post_id,
            post_id,
            job_id,
            job_id,
            research_id,
            research_id,
        )
        if cur is not None:
            cur.execute(DELETE_NOTIFICATIONS, params)
            return cur.rowcount
        with self.db.get_cursor() as own_cur:
            own_cur.execute(DELETE_NOTIFICATIONS, params)
            return own_cur.rowcount

    def get_notifications(self, user_id: int, cursor: int | None = None) -> dict[str, Any]:
        """Get one page of a user's notifications, newest first.

        Args:
            user_id: Recipient user ID
            cursor: Notification ID to start from (inclusive)

        Returns:
            Dictionary with "notifications" and "nextCursor"
        """
        with self.db.get_cursor() as cur:
            cur.execute(GET_NOTIFICATIONS_PAGE, (user_id, cursor, cursor, self.page_size + 1))
            rows = rows_to_dicts(cur)

        notifications, next_cursor = build_page(rows, self.page_size)
        return {"notifications": notifications, "nextCursor": next_cursor}

    def get_unread_count(self, user_id: int) -> int:
        """Count unread notifications for a user."""
        with self.db.get_cursor() as cur:
            cur.execute(COUNT_UNREAD, (user_id,))
            return cur.fetchone()[0]

    def get_notification(self, notification_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_NOTIFICATION_BY_ID, (notification_id,))
            return row_to_dict(cur)

    def mark_as_read(self, notification_id: int, user_id: int) -> bool:
        """Mark a notification read.

        Args:
            notification_id: Notification ID
            user_id: Recipient user ID (for authorization)

        Returns:
            True if the notification was updated, False if it does not belong to the user
        """
        with self.db.get_cursor() as cur:
            cur.execute(MARK_READ, (notification_id, user_id))
            return cur.fetchone() is not None

    def mark_all_as_read(self, user_id: int) -> int:
        """Mark every unread notification of a user read.

        Returns:
            Number of notifications updated
        """
        with self.db.get_cursor() as cur:
            cur.execute(MARK_ALL_READ, (user_id,))
            count = cur.rowcount
        logger.info(f"Marked {count} notification(s) read for user {user_id}")
        return count
