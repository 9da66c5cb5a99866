"""Service for research projects, research likes and saved researches."""

from __future__ import annotations

import logging
from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.pagination import build_page
from services.shared.validation import FieldValidator

from .queries import (
    DELETE_RESEARCH,
    DELETE_RESEARCH_LIKE,
    DELETE_SAVED_RESEARCH,
    GET_RESEARCH_BY_ID,
    GET_RESEARCH_LIKE_INFO,
    GET_RESEARCH_OWNER,
    GET_SAVED_RESEARCH,
    INSERT_RESEARCH,
    INSERT_RESEARCH_LIKE,
    LIST_RESEARCHES,
    LIST_SAVED_RESEARCHES,
    LIST_USER_RESEARCHES,
    UPSERT_SAVED_RESEARCH,
)

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 5000


def validate_research(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a research payload.

    Raises:
        ValidationError: With one message per invalid field
    """
    v = FieldValidator(data)
    research = {
        "title": v.string("title", required=True, max_length=255),
        "description": v.string(
            "description", required=True, max_length=MAX_DESCRIPTION_LENGTH
        ),
    }
    v.raise_if_errors()
    return research


class ResearchService:
    """Service for publishing, listing and reacting to research projects."""

    def __init__(
        self,
        database: Database,
        notification_service: NotificationService | None = None,
        page_size: int = 10,
    ):
        """Initialize the research service.

        Args:
            database: Database connection interface
            notification_service: Used to notify authors of likes
            page_size: Number of researches per page
        """
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)
        self.page_size = page_size

    def _page(self, query: str, params: tuple, cursor: int | None) -> dict[str, Any]:
        with self.db.get_cursor() as cur:
            cur.execute(query, params + (cursor, cursor, self.page_size + 1))
            rows = rows_to_dicts(cur)
        researches, next_cursor = build_page(rows, self.page_size)
        return {"researches": researches, "nextCursor": next_cursor}

    def list_researches(
        self, viewer_id: int, cursor: int | None = None, query: str | None = None
    ) -> dict[str, Any]:
        """List researches newest first, optionally filtered by a title fragment.

        Returns:
            Dictionary with "researches" and "nextCursor"
        """
        term = query.strip() if query and query.strip() else None
        return self._page(LIST_RESEARCHES, (viewer_id, viewer_id, term, term), cursor)

    def list_user_researches(
        self, user_id: int, viewer_id: int, cursor: int | None = None
    ) -> dict[str, Any]:
        return self._page(LIST_USER_RESEARCHES, (viewer_id, viewer_id, user_id), cursor)

    def list_saved_researches(self, user_id: int, cursor: int | None = None) -> dict[str, Any]:
        return self._page(LIST_SAVED_RESEARCHES, (user_id, user_id, user_id), cursor)

    def get_research(self, research_id: int, viewer_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_RESEARCH_BY_ID, (viewer_id, viewer_id, research_id))
            return row_to_dict(cur)

    def get_research_owner(self, research_id: int) -> int | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_RESEARCH_OWNER, (research_id,))
            row = cur.fetchone()
        return row[0] if row else None

    def create_research(self, user_id: int, data: dict[str, Any]) -> int:
        """Create a research project.

        Raises:
            ValidationError: If title or description are invalid

        Returns:
            Research ID
        """
        research = validate_research(data)
        with self.db.get_cursor() as cur:
            cur.execute(INSERT_RESEARCH, (user_id, research["title"], research["description"]))
            research_id = cur.fetchone()[0]
        logger.info(f"User {user_id} created research {research_id}")
        return research_id

    def delete_research(self, research_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_RESEARCH, (research_id,))
            deleted = cur.rowcount > 0
        if deleted:
            logger.info(f"Deleted research {research_id}")
        return deleted

    def get_like_info(self, research_id: int, user_id: int) -> dict[str, Any] | None:
        if self.get_research_owner(research_id) is None:
            return None
        with self.db.get_cursor() as cur:
            cur.execute(GET_RESEARCH_LIKE_INFO, (research_id, research_id, user_id))
            likes, is_liked = cur.fetchone()
        return {"likes": likes, "isLikedByUser": bool(is_liked)}

    def like_research(self, research_id: int, user_id: int) -> bool | None:
        """Like a research; the author's LIKE notification shares the transaction.

        Returns:
            True if newly liked, False if already liked, None if the research does not exist
        """
        owner_id = self.get_research_owner(research_id)
        if owner_id is None:
            return None

        with self.db.transaction() as cur:
            cur.execute(INSERT_RESEARCH_LIKE, (user_id, research_id))
            if cur.fetchone() is None:
                return False
            if owner_id != user_id:
                self.notification_service.create_notification(
                    recipient_id=owner_id,
                    issuer_id=user_id,
                    notification_type="LIKE",
                    research_id=research_id,
                    cur=cur,
                )
        logger.info(f"User {user_id} liked research {research_id}")
        return True

    def unlike_research(self, research_id: int, user_id: int) -> bool | None:
        """Remove a research like and its LIKE notification.

        Returns:
            True if a like was removed, False if there was none, None if the research does not exist
        """
        owner_id = self.get_research_owner(research_id)
        if owner_id is None:
            return None

        with self.db.transaction() as cur:
            cur.execute(DELETE_RESEARCH_LIKE, (user_id, research_id))
            if cur.fetchone() is None:
                return False
            self.notification_service.delete_notifications(
                issuer_id=user_id,
                recipient_id=owner_id,
                notification_type="LIKE",
                research_id=research_id,
                cur=cur,
            )
        logger.info(f"User {user_id} unliked research {research_id}")
        return True

    def is_saved(self, research_id: int, user_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(GET_SAVED_RESEARCH, (user_id, research_id))
            return cur.fetchone() is not None

    def save_research(self, research_id: int, user_id: int) -> bool | None:
        """Save a research (idempotent). Returns None if the research does not exist."""
        if self.get_research_owner(research_id) is None:
            return None
        with self.db.get_cursor() as cur:
            cur.execute(UPSERT_SAVED_RESEARCH, (user_id, research_id))
        return True

    def unsave_research(self, research_id: int, user_id: int) -> None:
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_SAVED_RESEARCH, (user_id, research_id))
