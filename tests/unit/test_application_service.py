"""Unit tests for ApplicationService."""

import pytest

from services.jobs.application_service import ALREADY_APPLIED_MESSAGE, ApplicationService


@pytest.fixture
def application_service(mock_database, mock_notification_service):
    return ApplicationService(
        database=mock_database, notification_service=mock_notification_service
    )


class TestApplicationService:
    """Test cases for ApplicationService."""

    def test_init_requires_database(self):
        with pytest.raises(ValueError, match="Database is required"):
            ApplicationService(database=None)

    def test_apply_creates_application_and_notification(
        self, application_service, mock_database, mock_cursor, mock_notification_service
    ):
        """Test the application and the poster's notification share one transaction."""
        mock_cursor.fetchone.side_effect = [(2, "Data Intern"), (31,)]

        result = application_service.apply(job_id=4, applicant_id=9)

        assert result == {"success": True, "message": "Job application submitted successfully."}
        mock_database.transaction.assert_called_once()
        kwargs = mock_notification_service.create_notification.call_args.kwargs
        assert kwargs["recipient_id"] == 2
        assert kwargs["issuer_id"] == 9
        assert kwargs["notification_type"] == "JOB_APPLICATION"
        assert kwargs["job_id"] == 4
        assert kwargs["cur"] is mock_cursor

    def test_apply_twice_returns_failure(
        self, application_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(2, "Data Intern"), None]

        result = application_service.apply(job_id=4, applicant_id=9)

        assert result == {"success": False, "message": ALREADY_APPLIED_MESSAGE}
        assert ALREADY_APPLIED_MESSAGE == "Already applied to this job."
        mock_notification_service.create_notification.assert_not_called()

    def test_apply_to_missing_job(self, application_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert application_service.apply(job_id=404, applicant_id=9) is None

    def test_poster_cannot_apply_to_own_job(self, application_service, mock_cursor):
        mock_cursor.fetchone.return_value = (9, "Data Intern")

        with pytest.raises(ValueError, match="cannot apply to your own job"):
            application_service.apply(job_id=4, applicant_id=9)

    def test_update_status_validates_value(self, application_service, mock_database):
        with pytest.raises(ValueError, match="Invalid status"):
            application_service.update_status(1, "hired")
        mock_database.get_cursor.assert_not_called()

    def test_update_status(self, application_service, mock_cursor):
        mock_cursor.fetchone.return_value = (1,)

        assert application_service.update_status(1, "reviewed") is True
        assert mock_cursor.execute.call_args[0][1] == ("reviewed", 1)

    def test_list_for_user(self, application_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id", "job_id", "status"], [(1, 4, "pending")])

        assert application_service.list_for_user(9) == [{"id": 1, "job_id": 4, "status": "pending"}]
