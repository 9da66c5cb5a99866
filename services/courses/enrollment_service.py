"""Service for course enrollments."""

from __future__ import annotations

from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.structured_logging import get_structured_logger

from .queries import (
    GET_COURSE_INSTRUCTOR,
    GET_ENROLLMENT,
    GET_ENROLLMENT_BY_ID,
    INSERT_ENROLLMENT,
    LIST_COURSE_ENROLLMENTS,
    UPDATE_ENROLLMENT_STATUS,
)

logger = get_structured_logger(__name__)

ENROLLMENT_STATUSES = ("ENROLLED", "COMPLETED", "DROPPED")


class EnrollmentService:
    """Service for enrolling students and managing their enrollment status."""

    def __init__(self, database: Database, notification_service: NotificationService | None = None):
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)

    def enroll(self, course_id: int, student_id: int) -> dict[str, Any] | None:
        """Enroll a student and notify the instructor in one transaction.

        Returns:
            {"success": bool, "message": str}, or None if the course does not exist

        Raises:
            ValueError: If the instructor tries to enroll in their own course
        """
        log = logger.bind(course_id=course_id, user_id=student_id)
        with self.db.transaction() as cur:
            cur.execute(GET_COURSE_INSTRUCTOR, (course_id,))
            row = cur.fetchone()
            if not row:
                return None
            instructor_id, title = row
            if instructor_id == student_id:
                raise ValueError("You cannot enroll in your own course")

            cur.execute(INSERT_ENROLLMENT, (course_id, student_id))
            inserted = cur.fetchone()
            if inserted is None:
                return {"success": False, "message": "Already enrolled in this course."}

            self.notification_service.create_notification(
                recipient_id=instructor_id,
                issuer_id=student_id,
                notification_type="COURSE_ENROLLMENT",
                course_id=course_id,
                title="New enrollment",
                message=f"New enrollment in {title}",
                cur=cur,
            )

        log.info(f"Enrolled (enrollment {inserted[0]})")
        return {"success": True, "message": "Enrolled successfully.", "enrollment_id": inserted[0]}

    def get_enrollment(self, course_id: int, student_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_ENROLLMENT, (course_id, student_id))
            return row_to_dict(cur)

    def is_enrolled(self, course_id: int, student_id: int) -> bool:
        """True only while the enrollment status is ENROLLED."""
        enrollment = self.get_enrollment(course_id, student_id)
        return bool(enrollment) and enrollment["status"] == "ENROLLED"

    def list_enrollments(self, course_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(LIST_COURSE_ENROLLMENTS, (course_id,))
            return rows_to_dicts(cur)

    def get_enrollment_by_id(self, enrollment_id: int) -> dict[str, Any] | None:
        """Enrollment row plus the course's instructor_id."""
        with self.db.get_cursor() as cur:
            cur.execute(GET_ENROLLMENT_BY_ID, (enrollment_id,))
            return row_to_dict(cur)

    def update_status(self, enrollment_id: int, status: str) -> bool:
        if status not in ENROLLMENT_STATUSES:
            raise ValueError(
                f"Invalid status. Must be one of: {', '.join(ENROLLMENT_STATUSES)}"
            )
        with self.db.get_cursor() as cur:
            cur.execute(UPDATE_ENROLLMENT_STATUS, (status, enrollment_id))
            updated = cur.fetchone() is not None
        if updated:
            logger.bind(enrollment_id=enrollment_id).info(f"Status set to {status}")
        return updated
