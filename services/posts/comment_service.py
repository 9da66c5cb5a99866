"""Service for post comments."""

from __future__ import annotations

import logging
from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.pagination import build_reverse_page
from services.shared.validation import FieldValidator

from .queries import (
    DELETE_COMMENT,
    GET_COMMENT,
    GET_COMMENTS_PAGE,
    GET_POST_OWNER,
    INSERT_COMMENT,
)

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


class CommentService:
    """Service for listing, adding and deleting comments."""

    def __init__(
        self,
        database: Database,
        notification_service: NotificationService | None = None,
        page_size: int = 5,
    ):
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)
        self.page_size = page_size

    def get_comments(self, post_id: int, cursor: int | None = None) -> dict[str, Any]:
        """Get a page of comments, oldest first, paging backwards in time.

        Returns:
            Dictionary with "comments" and "previousCursor"
        """
        with self.db.get_cursor() as cur:
            cur.execute(GET_COMMENTS_PAGE, (post_id, cursor, cursor, self.page_size + 1))
            rows = rows_to_dicts(cur)
        comments, previous_cursor = build_reverse_page(rows, self.page_size)
        return {"comments": comments, "previousCursor": previous_cursor}

    def add_comment(self, post_id: int, user_id: int, content: Any) -> dict[str, Any] | None:
        """Add a comment and notify the post author unless they commented themselves.

        The comment and the notification are written in one transaction.

        Returns:
            Comment dictionary, or None if the post does not exist

        Raises:
            ValidationError: If the content is empty or too long
        """
        v = FieldValidator({"content": content})
        text = v.string("content", required=True, max_length=MAX_COMMENT_LENGTH)
        v.raise_if_errors()

        with self.db.transaction() as cur:
            cur.execute(GET_POST_OWNER, (post_id,))
            row = cur.fetchone()
            if not row:
                return None
            owner_id = row[0]

            cur.execute(INSERT_COMMENT, (post_id, user_id, text))
            comment_id, created_at = cur.fetchone()

            if owner_id != user_id:
                self.notification_service.create_notification(
                    recipient_id=owner_id,
                    issuer_id=user_id,
                    notification_type="COMMENT",
                    post_id=post_id,
                    cur=cur,
                )

        logger.info(f"User {user_id} commented on post {post_id} (comment {comment_id})")
        return {
            "id": comment_id,
            "post_id": post_id,
            "user_id": user_id,
            "content": text,
            "created_at": created_at,
        }

    def get_comment(self, comment_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_COMMENT, (comment_id,))
            return row_to_dict(cur)

    def delete_comment(self, comment_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_COMMENT, (comment_id,))
            return cur.rowcount > 0
