"""Service for job postings, job likes and saved jobs."""

from __future__ import annotations

import logging
from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.pagination import build_page
from services.shared.validation import FieldValidator

from .queries import (
    COUNT_EXISTING_COURSES,
    DELETE_JOB,
    DELETE_JOB_LIKE,
    DELETE_SAVED_JOB,
    GET_JOB_BY_ID,
    GET_JOB_COURSES,
    GET_JOB_LIKE_INFO,
    GET_JOB_OWNER,
    GET_SAVED_JOB,
    INSERT_JOB,
    INSERT_JOB_COURSE,
    INSERT_JOB_LIKE,
    LIST_JOBS,
    LIST_SAVED_JOBS,
    UPSERT_SAVED_JOB,
)

logger = logging.getLogger(__name__)

JOB_TYPES = ("FULL_TIME", "PART_TIME", "INTERNSHIP")
MAX_DESCRIPTION_LENGTH = 1000
MAX_REQUIREMENT_LENGTH = 1000


def parse_job_types(raw: str | None) -> list[str] | None:
    """Parse a comma-separated ``type`` filter, dropping unknown values.

    Returns:
        List of job types, or None when no filter applies
    """
    if not raw:
        return None
    types = [t.strip().upper() for t in raw.split(",")]
    valid = [t for t in types if t in JOB_TYPES]
    return valid or None


def validate_job(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a job payload and return the cleaned values.

    Raises:
        ValidationError: With one message per invalid field
    """
    v = FieldValidator(data)
    job = {
        "title": v.string("title", required=True, max_length=255),
        "description": v.string(
            "description", required=True, min_length=1, max_length=MAX_DESCRIPTION_LENGTH
        ),
        "weekly_hours": v.number("weekly_hours", minimum=0, maximum=100),
        "location": v.string("location", max_length=100),
        "type": v.choice("type", JOB_TYPES, required=True),
        "experience_level": v.string("experience_level", required=True, max_length=100),
        "duration": v.number("duration", required=True, minimum=1),
        "salary": v.number("salary", required=True, minimum=1),
        "requirements": v.string_list("requirements", max_item_length=MAX_REQUIREMENT_LENGTH),
        "skills": v.string_list("skills", max_item_length=100),
        "start_date": v.date("start_date"),
        "end_date": v.date("end_date"),
        "course_ids": v.int_list("course_ids"),
    }
    if job["start_date"] and job["end_date"] and job["end_date"] < job["start_date"]:
        v.add_error("end_date", "End date cannot be before start date")
    v.raise_if_errors()
    return job


class JobService:
    """Service for listing, posting and reacting to jobs."""

    def __init__(
        self,
        database: Database,
        notification_service: NotificationService | None = None,
        page_size: int = 10,
    ):
        """Initialize the job service.

        Args:
            database: Database connection interface
            notification_service: Used to notify posters of likes
            page_size: Number of jobs per page
        """
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)
        self.page_size = page_size

    def list_jobs(
        self,
        viewer_id: int,
        cursor: int | None = None,
        query: str | None = None,
        job_types: list[str] | None = None,
    ) -> dict[str, Any]:
        """List jobs newest first.

        Args:
            viewer_id: Caller, used for the is-liked / is-saved flags
            cursor: Id of the first job of the page (inclusive)
            query: Case-insensitive title fragment
            job_types: Job types to keep (None keeps all)

        Returns:
            Dictionary with "jobs" and "nextCursor"
        """
        term = query.strip() if query and query.strip() else None
        types = job_types or None
        with self.db.get_cursor() as cur:
            cur.execute(
                LIST_JOBS,
                (
                    viewer_id,
                    viewer_id,
                    term,
                    term,
                    types,
                    types,
                    cursor,
                    cursor,
                    self.page_size + 1,
                ),
            )
            rows = rows_to_dicts(cur)
        jobs, next_cursor = build_page(rows, self.page_size)
        return {"jobs": jobs, "nextCursor": next_cursor}

    def list_saved_jobs(self, user_id: int, cursor: int | None = None) -> dict[str, Any]:
        with self.db.get_cursor() as cur:
            cur.execute(
                LIST_SAVED_JOBS,
                (user_id, user_id, user_id, cursor, cursor, self.page_size + 1),
            )
            rows = rows_to_dicts(cur)
        jobs, next_cursor = build_page(rows, self.page_size)
        return {"jobs": jobs, "nextCursor": next_cursor}

    def get_job(self, job_id: int, viewer_id: int) -> dict[str, Any] | None:
        """Get a job with its linked courses, or None if it does not exist."""
        with self.db.get_cursor() as cur:
            cur.execute(GET_JOB_BY_ID, (viewer_id, viewer_id, job_id))
            job = row_to_dict(cur)
            if not job:
                return None
            cur.execute(GET_JOB_COURSES, (job_id,))
            job["courses"] = rows_to_dicts(cur)
        return job

    def get_job_owner(self, job_id: int) -> int | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_JOB_OWNER, (job_id,))
            row = cur.fetchone()
        return row[0] if row else None

    def create_job(self, user_id: int, data: dict[str, Any]) -> int:
        """Create a job posting and link the required courses.

        Raises:
            ValidationError: If the payload is invalid or a course does not exist

        Returns:
            Job ID
        """
        job = validate_job(data)
        course_ids = sorted(set(job["course_ids"]))

        with self.db.transaction() as cur:
            if course_ids:
                cur.execute(COUNT_EXISTING_COURSES, (course_ids,))
                if cur.fetchone()[0] != len(course_ids):
                    v = FieldValidator(data)
                    v.add_error("course_ids", "Unknown course")
                    v.raise_if_errors()

            cur.execute(
                INSERT_JOB,
                (
                    user_id,
                    job["title"],
                    job["description"],
                    job["weekly_hours"],
                    job["location"],
                    job["type"],
                    job["experience_level"],
                    job["duration"],
                    job["salary"],
                    job["requirements"],
                    job["skills"],
                    job["start_date"],
                    job["end_date"],
                ),
            )
            job_id = cur.fetchone()[0]
            for course_id in course_ids:
                cur.execute(INSERT_JOB_COURSE, (job_id, course_id))

        logger.info(f"User {user_id} created job {job_id} ({job['title']})")
        return job_id

    def delete_job(self, job_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_JOB, (job_id,))
            deleted = cur.rowcount > 0
        if deleted:
            logger.info(f"Deleted job {job_id}")
        return deleted

    def get_like_info(self, job_id: int, user_id: int) -> dict[str, Any] | None:
        if self.get_job_owner(job_id) is None:
            return None
        with self.db.get_cursor() as cur:
            cur.execute(GET_JOB_LIKE_INFO, (job_id, job_id, user_id))
            likes, is_liked = cur.fetchone()
        return {"likes": likes, "isLikedByUser": bool(is_liked)}

    def like_job(self, job_id: int, user_id: int) -> bool | None:
        """Like a job; the like and the poster's LIKE notification share a transaction.

        Returns:
            True if newly liked, False if already liked, None if the job does not exist
        """
        owner_id = self.get_job_owner(job_id)
        if owner_id is None:
            return None

        with self.db.transaction() as cur:
            cur.execute(INSERT_JOB_LIKE, (user_id, job_id))
            if cur.fetchone() is None:
                return False
            if owner_id != user_id:
                self.notification_service.create_notification(
                    recipient_id=owner_id,
                    issuer_id=user_id,
                    notification_type="LIKE",
                    job_id=job_id,
                    cur=cur,
                )
        logger.info(f"User {user_id} liked job {job_id}")
        return True

    def unlike_job(self, job_id: int, user_id: int) -> bool | None:
        """Remove a job like and its LIKE notification.

        Returns:
            True if a like was removed, False if there was none, None if the job does not exist
        """
        owner_id = self.get_job_owner(job_id)
        if owner_id is None:
            return None

        with self.db.transaction() as cur:
            cur.execute(DELETE_JOB_LIKE, (user_id, job_id))
            if cur.fetchone() is None:
                return False
            self.notification_service.delete_notifications(
                issuer_id=user_id,
                recipient_id=owner_id,
                notification_type="LIKE",
                job_id=job_id,
                cur=cur,
            )
        logger.info(f"User {user_id} unliked job {job_id}")
        return True

    def is_saved(self, job_id: int, user_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(GET_SAVED_JOB, (user_id, job_id))
            return cur.fetchone() is not None

    def save_job(self, job_id: int, user_id: int) -> bool | None:
        """Save a job (idempotent). Returns None if the job does not exist."""
        if self.get_job_owner(job_id) is None:
            return None
        with self.db.get_cursor() as cur:
            cur.execute(UPSERT_SAVED_JOB, (user_id, job_id))
        return True

    def unsave_job(self, job_id: int, user_id: int) -> None:
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_SAVED_JOB, (user_id, job_id))
