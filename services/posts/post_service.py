"""Service for posts, post likes and bookmarks."""

from __future__ import annotations

import logging
from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.pagination import build_page
from services.shared.validation import FieldValidator

from .queries import (
    DELETE_BOOKMARK,
    DELETE_POST,
    DELETE_POST_LIKE,
    GET_BOOKMARK,
    GET_BOOKMARKED_POSTS,
    GET_FOLLOWING_FEED,
    GET_POST_BY_ID,
    GET_POST_LIKE_INFO,
    GET_POST_OWNER,
    GET_USER_POSTS,
    INSERT_POST,
    INSERT_POST_LIKE,
    SEARCH_POSTS,
    UPSERT_BOOKMARK,
)

logger = logging.getLogger(__name__)

MAX_POST_LENGTH = 2000


class PostService:
    """Service for creating posts and reading feeds."""

    def __init__(
        self,
        database: Database,
        notification_service: NotificationService | None = None,
        page_size: int = 10,
    ):
        """Initialize the post service.

        Args:
            database: Database connection interface
            notification_service: Used to notify post owners of likes
            page_size: Number of posts per feed page
        """
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)
        self.page_size = page_size

    def create_post(self, user_id: int, content: Any, image_url: Any = None) -> int:
        """Create a post.

        Raises:
            ValidationError: If content or image URL are invalid

        Returns:
            Post ID
        """
        v = FieldValidator({"content": content, "image_url": image_url})
        text = v.string("content", required=True, max_length=MAX_POST_LENGTH)
        image = v.string("image_url", max_length=2048)
        v.raise_if_errors()

        with self.db.get_cursor() as cur:
            cur.execute(INSERT_POST, (user_id, text, image))
            post_id = cur.fetchone()[0]
        logger.info(f"User {user_id} created post {post_id}")
        return post_id

    def get_post(self, post_id: int, viewer_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_POST_BY_ID, (viewer_id, viewer_id, post_id))
            return row_to_dict(cur)

    def get_post_owner(self, post_id: int) -> int | None:
        """Return the author's user ID, or None if the post does not exist."""
        with self.db.get_cursor() as cur:
            cur.execute(GET_POST_OWNER, (post_id,))
            row = cur.fetchone()
        return row[0] if row else None

    def delete_post(self, post_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_POST, (post_id,))
            deleted = cur.rowcount > 0
        if deleted:
            logger.info(f"Deleted post {post_id}")
        return deleted

    def _page(self, query: str, params: tuple, cursor: int | None) -> dict[str, Any]:
        with self.db.get_cursor() as cur:
            cur.execute(query, params + (cursor, cursor, self.page_size + 1))
            rows = rows_to_dicts(cur)
        posts, next_cursor = build_page(rows, self.page_size)
        return {"posts": posts, "nextCursor": next_cursor}

    def get_following_feed(self, viewer_id: int, cursor: int | None = None) -> dict[str, Any]:
        """Posts written by users the viewer follows, newest first."""
        return self._page(GET_FOLLOWING_FEED, (viewer_id, viewer_id, viewer_id), cursor)

    def get_user_posts(
        self, user_id: int, viewer_id: int, cursor: int | None = None
    ) -> dict[str, Any]:
        return self._page(GET_USER_POSTS, (viewer_id, viewer_id, user_id), cursor)

    def get_bookmarked_posts(self, viewer_id: int, cursor: int | None = None) -> dict[str, Any]:
        return self._page(GET_BOOKMARKED_POSTS, (viewer_id, viewer_id, viewer_id), cursor)

    def search_posts(
        self, query: str | None, viewer_id: int, cursor: int | None = None
    ) -> dict[str, Any]:
        """Posts whose content, author name or author username contain the query.

        Matching is case-insensitive; an empty query matches every post.
        """
        term = (query or "").strip()
        return self._page(SEARCH_POSTS, (viewer_id, viewer_id, term, term, term), cursor)

    def get_like_info(self, post_id: int, user_id: int) -> dict[str, Any] | None:
        """Like count and whether the user liked the post, or None if the post is missing."""
        if self.get_post_owner(post_id) is None:
            return None
        with self.db.get_cursor() as cur:
            cur.execute(GET_POST_LIKE_INFO, (post_id, post_id, user_id))
            likes, is_liked = cur.fetchone()
        return {"likes": likes, "isLikedByUser": bool(is_liked)}

    def like_post(self, post_id: int, user_id: int) -> bool | None:
        """Like a post and notify its author unless they liked their own post.

        Returns:
            True if newly liked, False if it was already liked, None if the post does not exist
        """
        owner_id = self.get_post_owner(post_id)
        if owner_id is None:
            return None

        with self.db.transaction() as cur:
            cur.execute(INSERT_POST_LIKE, (user_id, post_id))
            if cur.fetchone() is None:
                return False
            if owner_id != user_id:
                self.notification_service.create_notification(
                    recipient_id=owner_id,
                    issuer_id=user_id,
                    notification_type="LIKE",
                    post_id=post_id,
                    cur=cur,
                )
        logger.info(f"User {user_id} liked post {post_id}")
        return True

    def unlike_post(self, post_id: int, user_id: int) -> bool | None:
        """Remove a like together with the LIKE notification it produced.

        Returns:
            True if a like was removed, False if there was none, None if the post does not exist
        """
        owner_id = self.get_post_owner(post_id)
        if owner_id is None:
            return None

        with self.db.transaction() as cur:
            cur.execute(DELETE_POST_LIKE, (user_id, post_id))
            if cur.fetchone() is None:
                return False
            self.notification_service.delete_notifications(
                issuer_id=user_id,
                recipient_id=owner_id,
                notification_type="LIKE",
                post_id=post_id,
                cur=cur,
            )
        logger.info(f"User {user_id} unliked post {post_id}")
        return True

    def is_bookmarked(self, post_id: int, user_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(GET_BOOKMARK, (user_id, post_id))
            return cur.fetchone() is not None

    def bookmark_post(self, post_id: int, user_id: int) -> bool | None:
        """Bookmark a post (idempotent).

        Returns:
            True, or None if the post does not exist
        """
        if self.get_post_owner(post_id) is None:
            return None
        with self.db.get_cursor() as cur:
            cur.execute(UPSERT_BOOKMARK, (user_id, post_id))
        return True

    def remove_bookmark(self, post_id: int, user_id: int) -> None:
        """Remove a bookmark; a missing bookmark is not an error."""
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_BOOKMARK, (user_id, post_id))
