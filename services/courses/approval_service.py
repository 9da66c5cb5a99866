"""Service for the course review workflow.

An instructor (or an owner of the organization the course's faculty belongs
to) submits a course; an active owner of that organization is assigned as
reviewer and decides to publish it, reject it or send it back for revision.
"""

from __future__ import annotations

from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.pagination import build_page
from services.shared.structured_logging import get_structured_logger
from services.shared.validation import FieldValidator

from .queries import (
    FIND_REVIEWER,
    GET_APPROVAL_BY_ID,
    GET_COURSE_FOR_APPROVAL,
    GET_OPEN_APPROVAL,
    INSERT_APPROVAL,
    IS_ORGANIZATION_OWNER,
    LIST_REVIEWER_APPROVALS,
    RECORD_APPROVAL_DECISION,
    UPDATE_COURSE_STATUS,
)

logger = get_structured_logger(__name__)

SUBMITTABLE_STATUSES = ("DRAFT", "REJECTED", "NEEDS_REVISION")
APPROVAL_DECISIONS = ("PUBLISHED", "REJECTED", "NEEDS_REVISION")
APPROVAL_STATUSES = ("UNDER_REVIEW",) + APPROVAL_DECISIONS


class ApprovalConflict(Exception):
    """Raised when a course is already under review or a review was already decided."""


def validate_decision(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a reviewer decision payload.

    Raises:
        ValidationError: With one message per invalid field
    """
    v = FieldValidator(data)
    decision = {
        "decision": v.choice("decision", APPROVAL_DECISIONS, required=True),
        "comments": v.string("comments", max_length=5000),
        "quality_score": v.number("qualityScore", minimum=0, maximum=100),
    }
    v.raise_if_errors()
    return decision


class CourseApprovalService:
    """Service for submitting, listing and deciding course approvals."""

    def __init__(
        self,
        database: Database,
        notification_service: NotificationService | None = None,
        page_size: int = 10,
    ):
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)
        self.page_size = page_size

    @staticmethod
    def _is_owner(cur, organization_id: int | None, user_id: int) -> bool:
        if organization_id is None:
            return False
        cur.execute(IS_ORGANIZATION_OWNER, (organization_id, user_id))
        return cur.fetchone() is not None

    def submit(self, course_id: int, user_id: int) -> dict[str, Any] | None:
        """Submit a course for review.

        The course moves to UNDER_REVIEW, an approval row is created for the
        assigned reviewer and the reviewer is notified, all in one transaction.

        Returns:
            The new approval, or None if the course does not exist

        Raises:
            PermissionError: If the caller is neither instructor nor organization owner
            ValueError: If the course cannot be submitted or no reviewer is available
            ApprovalConflict: If the course already has an open review
        """
        log = logger.bind(course_id=course_id, user_id=user_id)
        with self.db.transaction() as cur:
            cur.execute(GET_COURSE_FOR_APPROVAL, (course_id,))
            course = row_to_dict(cur)
            if course is None:
                return None

            organization_id = course["organization_id"]
            if course["instructor_id"] != user_id and not self._is_owner(
                cur, organization_id, user_id
            ):
                raise PermissionError(
                    "You don't have permission to submit this course for approval"
                )
            if course["status"] not in SUBMITTABLE_STATUSES:
                raise ValueError(
                    "Only draft, rejected, or courses needing revision can be submitted "
                    "for approval"
                )

            cur.execute(GET_OPEN_APPROVAL, (course_id,))
            if cur.fetchone() is not None:
                raise ApprovalConflict("Course is already under review")

            if organization_id is None:
                raise ValueError("Course must belong to a faculty to be reviewed")
            cur.execute(FIND_REVIEWER, (organization_id,))
            reviewer = cur.fetchone()
            if reviewer is None:
                raise ValueError("No institution administrator available to review this course")
            reviewer_id = reviewer[0]

            cur.execute(UPDATE_COURSE_STATUS, ("UNDER_REVIEW", course_id))
            cur.execute(INSERT_APPROVAL, (course_id, reviewer_id))
            approval_id = cur.fetchone()[0]
            self.notification_service.create_notification(
                recipient_id=reviewer_id,
                issuer_id=user_id,
                notification_type="COURSE_APPROVAL_REQUEST",
                course_id=course_id,
                title="Course approval request",
                message=f'"{course["title"]}" is waiting for your review',
                cur=cur,
            )

        log.info(f"Submitted for review (approval {approval_id}, reviewer {reviewer_id})")
        return {
            "id": approval_id,
            "course_id": course_id,
            "reviewer_id": reviewer_id,
            "status": "UNDER_REVIEW",
        }

    def list_for_reviewer(
        self, reviewer_id: int, status: str | None = None, cursor: int | None = None
    ) -> dict[str, Any]:
        """Approvals assigned to a reviewer, oldest submission first.

        Returns:
            Dictionary with "approvals" and "nextCursor"
        """
        if status is not None and status not in APPROVAL_STATUSES:
            raise ValueError("Invalid status")
        with self.db.get_cursor() as cur:
            cur.execute(
                LIST_REVIEWER_APPROVALS,
                (reviewer_id, status, status, cursor, cursor, self.page_size + 1),
            )
            rows = rows_to_dicts(cur)
        approvals, next_cursor = build_page(rows, self.page_size)
        return {"approvals": approvals, "nextCursor": next_cursor}

    def get_approval(self, approval_id: int, user_id: int) -> dict[str, Any] | None:
        """Visible to the reviewer, the instructor and owners of the course's organization.

        Raises:
            PermissionError: For anyone else
        """
        with self.db.get_cursor() as cur:
            cur.execute(GET_APPROVAL_BY_ID, (approval_id,))
            approval = row_to_dict(cur)
            if approval is None:
                return None
            if user_id in (approval["reviewer_id"], approval["instructor_id"]):
                return approval
            if self._is_owner(cur, approval["organization_id"], user_id):
                return approval
        raise PermissionError("Access denied")

    def decide(
        self, approval_id: int, reviewer_id: int, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Record the reviewer's decision and apply it to the course.

        Returns:
            The decided approval, or None if it does not exist

        Raises:
            ValidationError: If the decision payload is invalid
            PermissionError: If the caller is not the assigned reviewer
            ApprovalConflict: If the approval was already decided
        """
        decision = validate_decision(data)
        status = decision["decision"]
        log = logger.bind(user_id=reviewer_id)
        with self.db.transaction() as cur:
            cur.execute(GET_APPROVAL_BY_ID, (approval_id,))
            approval = row_to_dict(cur)
            if approval is None:
                return None
            if approval["reviewer_id"] != reviewer_id:
                raise PermissionError("Only the assigned reviewer can make approval decisions")
            if approval["status"] != "UNDER_REVIEW":
                raise ApprovalConflict("This approval has already been processed")

            cur.execute(
                RECORD_APPROVAL_DECISION,
                (status, decision["comments"] or "", decision["quality_score"], approval_id),
            )
            recorded = cur.fetchone()
            if recorded is None:
                raise ApprovalConflict("This approval has already been processed")

            cur.execute(UPDATE_COURSE_STATUS, (status, approval["course_id"]))
            self.notification_service.create_notification(
                recipient_id=approval["instructor_id"],
                issuer_id=reviewer_id,
                notification_type="COURSE_APPROVAL_RESULT",
                course_id=approval["course_id"],
                title=f"Course {status}",
                message=f'Your course "{approval["course_title"]}" has been {status}',
                cur=cur,
            )

        log.bind(course_id=approval["course_id"]).info(f"Approval {approval_id} decided: {status}")
        return {
            "id": approval_id,
            "course_id": approval["course_id"],
            "reviewer_id": reviewer_id,
            "status": status,
            "comments": decision["comments"] or "",
            "quality_score": decision["quality_score"],
            "reviewed_at": recorded[0],
        }
