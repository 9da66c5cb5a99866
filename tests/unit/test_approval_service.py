"""Unit tests for CourseApprovalService."""

import pytest

from services.courses import ApprovalConflict, CourseApprovalService, validate_decision
from services.courses.queries import (
    FIND_REVIEWER,
    INSERT_APPROVAL,
    IS_ORGANIZATION_OWNER,
    LIST_REVIEWER_APPROVALS,
    RECORD_APPROVAL_DECISION,
    UPDATE_COURSE_STATUS,
)
from services.shared.validation import ValidationError

COURSE_COLUMNS = ["id", "instructor_id", "title", "status", "faculty_id", "organization_id"]
APPROVAL_COLUMNS = [
    "id",
    "course_id",
    "reviewer_id",
    "status",
    "course_title",
    "instructor_id",
    "organization_id",
]


@pytest.fixture
def approval_service(mock_database, mock_notification_service):
    return CourseApprovalService(
        database=mock_database, notification_service=mock_notification_service
    )


def _statements(cursor):
    return [c[0][0] for c in cursor.execute.call_args_list]


class TestValidateDecision:
    """Test reviewer decision payloads."""

    def test_valid_decision(self):
        decision = validate_decision(
            {"decision": "NEEDS_REVISION", "comments": " Add a syllabus ", "qualityScore": 70}
        )

        assert decision == {
            "decision": "NEEDS_REVISION",
            "comments": "Add a syllabus",
            "quality_score": 70,
        }

    @pytest.mark.parametrize(
        "payload,field",
        [
            ({}, "decision"),
            ({"decision": "UNDER_REVIEW"}, "decision"),
            ({"decision": "PUBLISHED", "qualityScore": 101}, "qualityScore"),
            ({"decision": "PUBLISHED", "qualityScore": -1}, "qualityScore"),
        ],
    )
    def test_invalid_decision(self, payload, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_decision(payload)

        assert field in exc_info.value.field_errors


class TestSubmit:
    """Test submitting a course for review."""

    def test_submit_assigns_reviewer_and_notifies(
        self, approval_service, mock_database, mock_cursor, mock_notification_service
    ):
        mock_cursor.description = [(c,) for c in COURSE_COLUMNS]
        mock_cursor.fetchone.side_effect = [
            (12, 3, "Databases", "DRAFT", 4, 1),
            None,
            (50,),
            (80,),
        ]

        approval = approval_service.submit(course_id=12, user_id=3)

        assert approval == {
            "id": 80,
            "course_id": 12,
            "reviewer_id": 50,
            "status": "UNDER_REVIEW",
        }
        mock_database.transaction.assert_called_once()
        calls = [c[0] for c in mock_cursor.execute.call_args_list]
        assert (FIND_REVIEWER, (1,)) in calls
        assert (UPDATE_COURSE_STATUS, ("UNDER_REVIEW", 12)) in calls
        assert (INSERT_APPROVAL, (12, 50)) in calls
        kwargs = mock_notification_service.create_notification.call_args.kwargs
        assert kwargs["notification_type"] == "COURSE_APPROVAL_REQUEST"
        assert kwargs["recipient_id"] == 50
        assert kwargs["issuer_id"] == 3
        assert kwargs["cur"] is mock_cursor

    def test_organization_owner_may_submit(self, approval_service, mock_cursor):
        mock_cursor.description = [(c,) for c in COURSE_COLUMNS]
        mock_cursor.fetchone.side_effect = [
            (12, 3, "Databases", "REJECTED", 4, 1),
            (1,),
            None,
            (50,),
            (81,),
        ]

        assert approval_service.submit(course_id=12, user_id=50)["id"] == 81
        assert mock_cursor.execute.call_args_list[1][0] == (IS_ORGANIZATION_OWNER, (1, 50))

    def test_missing_course(self, approval_service, mock_cursor, set_rows):
        set_rows(mock_cursor, COURSE_COLUMNS, [])

        assert approval_service.submit(course_id=404, user_id=3) is None

    def test_stranger_cannot_submit(self, approval_service, mock_cursor):
        mock_cursor.description = [(c,) for c in COURSE_COLUMNS]
        mock_cursor.fetchone.side_effect = [(12, 3, "Databases", "DRAFT", 4, 1), None]

        with pytest.raises(PermissionError):
            approval_service.submit(course_id=12, user_id=99)

    @pytest.mark.parametrize("status", ["PUBLISHED", "UNDER_REVIEW", "ARCHIVED"])
    def test_only_draft_like_courses(self, approval_service, mock_cursor, set_rows, status):
        set_rows(mock_cursor, COURSE_COLUMNS, [(12, 3, "Databases", status, 4, 1)])

        with pytest.raises(ValueError, match="Only draft"):
            approval_service.submit(course_id=12, user_id=3)

    def test_open_review_conflicts(self, approval_service, mock_cursor, mock_notification_service):
        mock_cursor.description = [(c,) for c in COURSE_COLUMNS]
        mock_cursor.fetchone.side_effect = [(12, 3, "Databases", "DRAFT", 4, 1), (70,)]

        with pytest.raises(ApprovalConflict, match="already under review"):
            approval_service.submit(course_id=12, user_id=3)

        assert UPDATE_COURSE_STATUS not in _statements(mock_cursor)
        mock_notification_service.create_notification.assert_not_called()

    def test_course_without_faculty(self, approval_service, mock_cursor):
        mock_cursor.description = [(c,) for c in COURSE_COLUMNS]
        mock_cursor.fetchone.side_effect = [(12, 3, "Databases", "DRAFT", None, None), None]

        with pytest.raises(ValueError, match="faculty"):
            approval_service.submit(course_id=12, user_id=3)

    def test_no_reviewer_available(self, approval_service, mock_cursor):
        mock_cursor.description = [(c,) for c in COURSE_COLUMNS]
        mock_cursor.fetchone.side_effect = [(12, 3, "Databases", "DRAFT", 4, 1), None, None]

        with pytest.raises(ValueError, match="No institution administrator"):
            approval_service.submit(course_id=12, user_id=3)

        assert INSERT_APPROVAL not in _statements(mock_cursor)


class TestReview:
    """Test listing, reading and deciding approvals."""

    def test_list_for_reviewer(self, mock_database, mock_cursor, set_rows):
        service = CourseApprovalService(database=mock_database, page_size=1)
        set_rows(mock_cursor, ["id"], [(3,), (4,)])

        page = service.list_for_reviewer(50, status="UNDER_REVIEW")

        assert page == {"approvals": [{"id": 3}], "nextCursor": 4}
        assert mock_cursor.execute.call_args[0] == (
            LIST_REVIEWER_APPROVALS,
            (50, "UNDER_REVIEW", "UNDER_REVIEW", None, None, 2),
        )

    def test_list_rejects_unknown_status(self, approval_service):
        with pytest.raises(ValueError, match="Invalid status"):
            approval_service.list_for_reviewer(50, status="DRAFT")

    @pytest.mark.parametrize("user_id", [50, 3])
    def test_reviewer_and_instructor_can_read(
        self, approval_service, mock_cursor, set_rows, user_id
    ):
        set_rows(mock_cursor, APPROVAL_COLUMNS, [(80, 12, 50, "UNDER_REVIEW", "Databases", 3, 1)])

        assert approval_service.get_approval(80, user_id)["id"] == 80

    def test_others_cannot_read(self, approval_service, mock_cursor):
        mock_cursor.description = [(c,) for c in APPROVAL_COLUMNS]
        mock_cursor.fetchone.side_effect = [
            (80, 12, 50, "UNDER_REVIEW", "Databases", 3, 1),
            None,
        ]

        with pytest.raises(PermissionError):
            approval_service.get_approval(80, 99)

    def test_decide_publishes_course(
        self, approval_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.description = [(c,) for c in APPROVAL_COLUMNS]
        mock_cursor.fetchone.side_effect = [
            (80, 12, 50, "UNDER_REVIEW", "Databases", 3, 1),
            ("2026-10-19 10:00",),
        ]

        approval = approval_service.decide(
            80, 50, {"decision": "PUBLISHED", "qualityScore": 90}
        )

        assert approval["status"] == "PUBLISHED"
        assert approval["comments"] == ""
        calls = [c[0] for c in mock_cursor.execute.call_args_list]
        assert (RECORD_APPROVAL_DECISION, ("PUBLISHED", "", 90, 80)) in calls
        assert (UPDATE_COURSE_STATUS, ("PUBLISHED", 12)) in calls
        kwargs = mock_notification_service.create_notification.call_args.kwargs
        assert kwargs["notification_type"] == "COURSE_APPROVAL_RESULT"
        assert kwargs["recipient_id"] == 3
        assert kwargs["title"] == "Course PUBLISHED"

    def test_only_reviewer_decides(self, approval_service, mock_cursor, set_rows):
        set_rows(mock_cursor, APPROVAL_COLUMNS, [(80, 12, 50, "UNDER_REVIEW", "Databases", 3, 1)])

        with pytest.raises(PermissionError):
            approval_service.decide(80, 3, {"decision": "PUBLISHED"})

    def test_decided_approval_conflicts(
        self, approval_service, mock_cursor, set_rows, mock_notification_service
    ):
        set_rows(mock_cursor, APPROVAL_COLUMNS, [(80, 12, 50, "REJECTED", "Databases", 3, 1)])

        with pytest.raises(ApprovalConflict):
            approval_service.decide(80, 50, {"decision": "PUBLISHED"})

        mock_notification_service.create_notification.assert_not_called()

    def test_decide_missing_approval(self, approval_service, mock_cursor, set_rows):
        set_rows(mock_cursor, APPROVAL_COLUMNS, [])

        assert approval_service.decide(404, 50, {"decision": "REJECTED"}) is None

    def test_decide_validates_before_touching_database(self, approval_service, mock_database):
        with pytest.raises(ValidationError):
            approval_service.decide(80, 50, {"decision": "MAYBE"})

        mock_database.transaction.assert_not_called()
