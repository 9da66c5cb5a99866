"""Service for follows and follow requests."""

from __future__ import annotations

import logging
from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts

from .queries import (
    DELETE_FOLLOW,
    GET_FOLLOW_INFO,
    GET_FOLLOW_REQUEST,
    INSERT_FOLLOW,
    LIST_FOLLOWERS,
    LIST_FOLLOWING,
    LIST_PENDING_RECEIVED,
    LIST_PENDING_SENT,
    LIST_SUGGESTIONS,
    LOCK_FOLLOW_REQUEST,
    SET_FOLLOW_REQUEST_STATUS,
    UPSERT_FOLLOW_REQUEST,
    USER_EXISTS,
)

logger = logging.getLogger(__name__)

MAX_REQUEST_MESSAGE_LENGTH = 500


class FollowRequestNotFound(LookupError):
    """Raised when a follow request id does not exist."""


class FollowService:
    """Service for following users and handling follow requests.

    Ownership checks (target accepts/rejects, requester cancels) raise
    PermissionError; requests that are no longer pending raise ValueError.
    """

    def __init__(self, database: Database, notification_service: NotificationService | None = None):
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)

    def _user_exists(self, cur, user_id: int) -> bool:
        cur.execute(USER_EXISTS, (user_id,))
        return cur.fetchone() is not None

    def get_follow_info(self, user_id: int, viewer_id: int | None) -> dict[str, Any]:
        with self.db.get_cursor() as cur:
            cur.execute(GET_FOLLOW_INFO, (user_id, viewer_id, user_id))
            followers, is_followed = cur.fetchone()
        return {"followers": followers, "isFollowedByUser": bool(is_followed)}

    def follow(self, follower_id: int, following_id: int) -> bool | None:
        """Follow a user (idempotent) and send a FOLLOW notification.

        Returns:
            True if newly followed, False if already following, None if the user does not exist

        Raises:
            ValueError: When following oneself
        """
        if follower_id == following_id:
            raise ValueError("You cannot follow yourself")

        with self.db.transaction() as cur:
            if not self._user_exists(cur, following_id):
                return None
            cur.execute(INSERT_FOLLOW, (follower_id, following_id))
            if cur.fetchone() is None:
                return False
            self.notification_service.create_notification(
                recipient_id=following_id,
                issuer_id=follower_id,
                notification_type="FOLLOW",
                cur=cur,
            )
        logger.info(f"User {follower_id} followed user {following_id}")
        return True

    def unfollow(self, follower_id: int, following_id: int) -> bool:
        """Stop following a user; also removes the FOLLOW notification."""
        with self.db.transaction() as cur:
            cur.execute(DELETE_FOLLOW, (follower_id, following_id))
            if cur.fetchone() is None:
                return False
            self.notification_service.delete_notifications(
                issuer_id=follower_id,
                recipient_id=following_id,
                notification_type="FOLLOW",
                cur=cur,
            )
        logger.info(f"User {follower_id} unfollowed user {following_id}")
        return True

    def get_followers(self, user_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(LIST_FOLLOWERS, (user_id,))
            return rows_to_dicts(cur)

    def get_following(self, user_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(LIST_FOLLOWING, (user_id,))
            return rows_to_dicts(cur)

    def get_suggestions(self, user_id: int, limit: int = 10) -> list[dict[str, Any]]:
        """Active users the caller does not follow yet, newest accounts first."""
        with self.db.get_cursor() as cur:
            cur.execute(LIST_SUGGESTIONS, (user_id, user_id, limit))
            return rows_to_dicts(cur)

    def send_follow_request(
        self, requester_id: int, target_id: int, message: str | None = None
    ) -> int | None:
        """Send a follow request and notify the target.

        Returns:
            Request ID, or None if the target does not exist

        Raises:
            ValueError: On a self request, an over-long message, or an already pending request
        """
        if requester_id == target_id:
            raise ValueError("You cannot send a follow request to yourself")
        if message and len(message) > MAX_REQUEST_MESSAGE_LENGTH:
            raise ValueError(
                f"Message must be at most {MAX_REQUEST_MESSAGE_LENGTH} characters"
            )

        with self.db.transaction() as cur:
            if not self._user_exists(cur, target_id):
                return None
            cur.execute(UPSERT_FOLLOW_REQUEST, (requester_id, target_id, message))
            row = cur.fetchone()
            if row is None:
                raise ValueError("A follow request is already pending")
            request_id = row[0]
            self.notification_service.create_notification(
                recipient_id=target_id,
                issuer_id=requester_id,
                notification_type="FOLLOW_REQUEST",
                message=message,
                cur=cur,
            )
        logger.info(f"User {requester_id} sent follow request {request_id} to user {target_id}")
        return request_id

    def get_follow_request(self, request_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_FOLLOW_REQUEST, (request_id,))
            return row_to_dict(cur)

    def get_pending_requests(self, user_id: int) -> list[dict[str, Any]]:
        """Pending requests received by a user."""
        with self.db.get_cursor() as cur:
            cur.execute(LIST_PENDING_RECEIVED, (user_id,))
            return rows_to_dicts(cur)

    def get_sent_requests(self, user_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(LIST_PENDING_SENT, (user_id,))
            return rows_to_dicts(cur)

    def _lock_pending(self, cur, request_id: int, actor_id: int, actor_field: str) -> dict[str, Any]:
        cur.execute(LOCK_FOLLOW_REQUEST, (request_id,))
        request = row_to_dict(cur)
        if not request:
            raise FollowRequestNotFound(f"Follow request {request_id} not found")
        if request[actor_field] != actor_id:
            raise PermissionError("You do not have permission to modify this follow request")
        if request["status"] != "PENDING":
            raise ValueError("Follow request is no longer pending")
        return request

    def accept_request(self, request_id: int, user_id: int) -> None:
        """Accept a pending request addressed to ``user_id``.

        The status change, the follow row and the FOLLOW_REQUEST_ACCEPTED
        notification are written in one transaction.
        """
        with self.db.transaction() as cur:
            request = self._lock_pending(cur, request_id, user_id, "target_id")
            cur.execute(SET_FOLLOW_REQUEST_STATUS, ("ACCEPTED", request_id))
            cur.execute(INSERT_FOLLOW, (request["requester_id"], user_id))
            self.notification_service.create_notification(
                recipient_id=request["requester_id"],
                issuer_id=user_id,
                notification_type="FOLLOW_REQUEST_ACCEPTED",
                cur=cur,
            )
        logger.info(f"User {user_id} accepted follow request {request_id}")

    def reject_request(self, request_id: int, user_id: int) -> None:
        with self.db.transaction() as cur:
            self._lock_pending(cur, request_id, user_id, "target_id")
            cur.execute(SET_FOLLOW_REQUEST_STATUS, ("REJECTED", request_id))
        logger.info(f"User {user_id} rejected follow request {request_id}")

    def cancel_request(self, request_id: int, user_id: int) -> None:
        """Cancel a request the user sent and withdraw its notification."""
        with self.db.transaction() as cur:
            request = self._lock_pending(cur, request_id, user_id, "requester_id")
            cur.execute(SET_FOLLOW_REQUEST_STATUS, ("CANCELLED", request_id))
            self.notification_service.delete_notifications(
                issuer_id=user_id,
                recipient_id=request["target_id"],
                notification_type="FOLLOW_REQUEST",
                cur=cur,
            )
        logger.info(f"User {user_id} cancelled follow request {request_id}")
