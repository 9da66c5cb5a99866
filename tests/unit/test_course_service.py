"""Unit tests for CourseService and EnrollmentService."""

from unittest.mock import patch

import pytest

from services.courses import CourseService, EnrollmentService, validate_course
from services.courses.queries import (
    DELETE_COURSE_SKILLS,
    FACULTY_EXISTS,
    INSERT_COURSE_SKILL,
    LIST_ENROLLED_COURSES,
    LIST_TAUGHT_COURSES,
)
from services.shared.validation import ValidationError


@pytest.fixture
def course_service(mock_database):
    return CourseService(database=mock_database)


@pytest.fixture
def enrollment_service(mock_database, mock_notification_service):
    return EnrollmentService(
        database=mock_database, notification_service=mock_notification_service
    )


@pytest.fixture
def valid_course():
    return {
        "title": "Databases",
        "description": "Relational modelling and SQL",
        "code": "COMP353",
        "credits": 4,
        "estimated_hours": 12,
        "status": "PUBLISHED",
        "skills": ["SQL", "Data Modelling"],
    }


class TestValidateCourse:
    """Test course payload validation."""

    def test_defaults_to_draft(self, valid_course):
        del valid_course["status"]

        assert validate_course(valid_course)["status"] == "DRAFT"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("code", "C" * 21),
            ("credits", 11),
            ("credits", 0),
            ("estimated_hours", 53),
            ("description", "d" * 5001),
            ("status", "LIVE"),
        ],
    )
    def test_out_of_range_values(self, valid_course, field, value):
        valid_course[field] = value

        with pytest.raises(ValidationError) as exc_info:
            validate_course(valid_course)

        assert field in exc_info.value.field_errors

    def test_title_required(self, valid_course):
        valid_course["title"] = "  "

        with pytest.raises(ValidationError) as exc_info:
            validate_course(valid_course)

        assert exc_info.value.field_errors["title"] == "Required"


class TestCourseService:
    """Test cases for CourseService."""

    def test_init_requires_database(self):
        with pytest.raises(ValueError, match="Database is required"):
            CourseService(database=None)

    def test_list_published_pages(self, mock_database, mock_cursor, set_rows):
        service = CourseService(database=mock_database, page_size=2)
        set_rows(mock_cursor, ["id"], [(9,), (8,), (7,)])

        page = service.list_published()

        assert page == {"courses": [{"id": 9}, {"id": 8}], "nextCursor": 7}

    def test_my_courses_for_professor(self, course_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id"], [])

        course_service.get_my_courses(3, "PROFESSOR")

        assert mock_cursor.execute.call_args[0][0] == LIST_TAUGHT_COURSES

    def test_my_courses_for_student(self, course_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id"], [])

        course_service.get_my_courses(3, "STUDENT")

        assert mock_cursor.execute.call_args[0][0] == LIST_ENROLLED_COURSES

    def test_create_course_attaches_skills(self, course_service, mock_cursor, valid_course):
        mock_cursor.fetchone.return_value = (12,)

        with patch(
            "services.courses.course_service.get_or_create_skill", side_effect=[1, 2]
        ) as get_skill:
            course_id = course_service.create_course(instructor_id=3, data=valid_course)

        assert course_id == 12
        assert [c.args[1] for c in get_skill.call_args_list] == ["SQL", "Data Modelling"]
        links = [c[0][1] for c in mock_cursor.execute.call_args_list if c[0][0] == INSERT_COURSE_SKILL]
        assert links == [(12, 1), (12, 2)]

    def test_create_course_checks_faculty(self, course_service, mock_cursor, valid_course):
        valid_course["faculty_id"] = 77
        mock_cursor.fetchone.return_value = None

        with pytest.raises(ValidationError) as exc_info:
            course_service.create_course(instructor_id=3, data=valid_course)

        assert exc_info.value.field_errors == {"faculty_id": "Unknown faculty"}
        statements = [c[0][0] for c in mock_cursor.execute.call_args_list]
        assert statements == [FACULTY_EXISTS]

    def test_create_course_with_known_faculty(self, course_service, mock_cursor, valid_course):
        valid_course["faculty_id"] = 4
        valid_course["skills"] = []
        mock_cursor.fetchone.side_effect = [(1,), (12,)]

        assert course_service.create_course(instructor_id=3, data=valid_course) == 12
        assert mock_cursor.execute.call_args_list[0][0] == (FACULTY_EXISTS, (4,))

    def test_set_course_skills_replaces_all(self, course_service, mock_database, mock_cursor):
        """Test old skills are removed and duplicates collapse within one transaction."""
        with patch(
            "services.courses.course_service.get_or_create_skill", side_effect=[5, 5, 6]
        ):
            skill_ids = course_service.set_course_skills(12, ["sql", "SQL", "Python"])

        assert skill_ids == [5, 6]
        mock_database.transaction.assert_called_once()
        statements = [c[0][0] for c in mock_cursor.execute.call_args_list]
        assert statements[0] == DELETE_COURSE_SKILLS
        assert statements.count(INSERT_COURSE_SKILL) == 2

    def test_set_course_skills_requires_list(self, course_service):
        with pytest.raises(ValidationError):
            course_service.set_course_skills(12, "SQL")


class TestEnrollmentService:
    """Test cases for EnrollmentService."""

    def test_enroll_notifies_instructor(
        self, enrollment_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(3, "Databases"), (40,)]

        result = enrollment_service.enroll(course_id=12, student_id=9)

        assert result["success"] is True
        assert result["enrollment_id"] == 40
        kwargs = mock_notification_service.create_notification.call_args.kwargs
        assert kwargs["notification_type"] == "COURSE_ENROLLMENT"
        assert kwargs["recipient_id"] == 3
        assert kwargs["course_id"] == 12

    def test_enroll_twice(self, enrollment_service, mock_cursor, mock_notification_service):
        mock_cursor.fetchone.side_effect = [(3, "Databases"), None]

        result = enrollment_service.enroll(course_id=12, student_id=9)

        assert result["success"] is False
        mock_notification_service.create_notification.assert_not_called()

    def test_enroll_missing_course(self, enrollment_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert enrollment_service.enroll(course_id=404, student_id=9) is None

    def test_instructor_cannot_enroll_in_own_course(self, enrollment_service, mock_cursor):
        mock_cursor.fetchone.return_value = (3, "Databases")

        with pytest.raises(ValueError, match="own course"):
            enrollment_service.enroll(course_id=12, student_id=3)

    @pytest.mark.parametrize(
        "status,expected", [("ENROLLED", True), ("COMPLETED", False), ("DROPPED", False)]
    )
    def test_is_enrolled_only_while_enrolled(
        self, enrollment_service, mock_cursor, set_rows, status, expected
    ):
        set_rows(mock_cursor, ["id", "status"], [(1, status)])

        assert enrollment_service.is_enrolled(12, 9) is expected

    def test_is_enrolled_without_enrollment(self, enrollment_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id", "status"], [])

        assert enrollment_service.is_enrolled(12, 9) is False

    def test_update_status_validates_value(self, enrollment_service):
        with pytest.raises(ValueError, match="Invalid status"):
            enrollment_service.update_status(1, "PAUSED")
