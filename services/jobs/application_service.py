"""Service for job applications."""

from __future__ import annotations

from typing import Any

from services.notifications import NotificationService
from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.structured_logging import get_structured_logger

from .queries import (
    GET_APPLICATION_BY_APPLICANT_AND_JOB,
    GET_APPLICATION_BY_ID,
    GET_APPLICATIONS_FOR_JOB,
    GET_APPLICATIONS_FOR_USER,
    GET_JOB_OWNER,
    INSERT_APPLICATION,
    UPDATE_APPLICATION_STATUS,
)

logger = get_structured_logger(__name__)

APPLICATION_STATUSES = ("pending", "reviewed", "accepted", "rejected")
ALREADY_APPLIED_MESSAGE = "Already applied to this job."


class ApplicationService:
    """Service for applying to jobs and reviewing applications."""

    def __init__(self, database: Database, notification_service: NotificationService | None = None):
        """Initialize the application service.

        Args:
            database: Database connection interface
            notification_service: Used to notify posters of new applications
        """
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.notification_service = notification_service or NotificationService(database)

    def apply(self, job_id: int, applicant_id: int) -> dict[str, Any] | None:
        """Apply to a job.

        The application row and the poster's JOB_APPLICATION notification are
        written in one transaction.

        Returns:
            {"success": bool, "message": str}, or None if the job does not exist

        Raises:
            ValueError: If the applicant posted the job
        """
        log = logger.bind(job_id=job_id, user_id=applicant_id)
        with self.db.transaction() as cur:
            cur.execute(GET_JOB_OWNER, (job_id,))
            row = cur.fetchone()
            if not row:
                return None
            owner_id, title = row
            if owner_id == applicant_id:
                raise ValueError("You cannot apply to your own job")

            cur.execute(INSERT_APPLICATION, (applicant_id, job_id))
            if cur.fetchone() is None:
                log.info("Duplicate application ignored")
                return {"success": False, "message": ALREADY_APPLIED_MESSAGE}

            self.notification_service.create_notification(
                recipient_id=owner_id,
                issuer_id=applicant_id,
                notification_type="JOB_APPLICATION",
                job_id=job_id,
                title="New job application",
                message=f"New application for {title}",
                cur=cur,
            )

        log.info("Application submitted")
        return {"success": True, "message": "Job application submitted successfully."}

    def get_application_for_job(self, job_id: int, applicant_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_APPLICATION_BY_APPLICANT_AND_JOB, (applicant_id, job_id))
            return row_to_dict(cur)

    def get_application(self, application_id: int) -> dict[str, Any] | None:
        """Get an application together with the id of the job's poster."""
        with self.db.get_cursor() as cur:
            cur.execute(GET_APPLICATION_BY_ID, (application_id,))
            return row_to_dict(cur)

    def list_for_job(self, job_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(GET_APPLICATIONS_FOR_JOB, (job_id,))
            return rows_to_dicts(cur)

    def list_for_user(self, applicant_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(GET_APPLICATIONS_FOR_USER, (applicant_id,))
            return rows_to_dicts(cur)

    def update_status(self, application_id: int, status: str) -> bool:
        """Set the status of an application.

        Returns:
            True if the application exists

        Raises:
            ValueError: If the status is not a known application status
        """
        if status not in APPLICATION_STATUSES:
            raise ValueError(
                f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}"
            )
        try:
            with self.db.get_cursor() as cur:
                cur.execute(UPDATE_APPLICATION_STATUS, (status, application_id))
                updated = cur.fetchone() is not None
        except Exception as e:
            logger.error(f"Error updating application {application_id}: {e}", exc_info=True)
            raise
        if updated:
            logger.info(f"Application {application_id} set to {status}")
        return updated
