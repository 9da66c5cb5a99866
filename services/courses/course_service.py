"""Service for courses and their skills."""

from __future__ import annotations

import logging
from typing import Any

from services.shared.database import Database, row_to_dict, rows_to_dicts
from services.shared.pagination import build_page
from services.shared.validation import FieldValidator
from services.skills.skill_service import get_or_create_skill

from .queries import (
    DELETE_COURSE_SKILLS,
    FACULTY_EXISTS,
    GET_COURSE_BY_ID,
    GET_COURSE_INSTRUCTOR,
    INSERT_COURSE,
    INSERT_COURSE_SKILL,
    LIST_ENROLLED_COURSES,
    LIST_PUBLISHED_COURSES,
    LIST_TAUGHT_COURSES,
)

logger = logging.getLogger(__name__)

COURSE_STATUSES = (
    "DRAFT",
    "UNDER_REVIEW",
    "NEEDS_REVISION",
    "PUBLISHED",
    "REJECTED",
    "ARCHIVED",
)
# Review states are only reached through CourseApprovalService
CREATABLE_STATUSES = ("DRAFT", "PUBLISHED", "ARCHIVED")


def validate_course(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a course payload.

    Raises:
        ValidationError: With one message per invalid field
    """
    v = FieldValidator(data)
    course = {
        "title": v.string("title", required=True, max_length=255),
        "description": v.string("description", required=True, min_length=1, max_length=5000),
        "code": v.string("code", required=True, min_length=1, max_length=20),
        "difficulty": v.string("difficulty", max_length=100),
        "credits": v.number("credits", minimum=1, maximum=10),
        "estimated_hours": v.number("estimated_hours", minimum=1, maximum=52),
        "status": v.choice("status", CREATABLE_STATUSES) or "DRAFT",
        "faculty_id": v.number("faculty_id", minimum=1),
        "skills": v.string_list("skills", max_item_length=100),
    }
    v.raise_if_errors()
    return course


class CourseService:
    """Service for listing and authoring courses."""

    def __init__(self, database: Database, page_size: int = 10):
        if not database:
            raise ValueError("Database is required")
        self.db = database
        self.page_size = page_size

    def list_published(self, cursor: int | None = None) -> dict[str, Any]:
        """Published courses, newest first.

        Returns:
            Dictionary with "courses" and "nextCursor"
        """
        with self.db.get_cursor() as cur:
            cur.execute(LIST_PUBLISHED_COURSES, (cursor, cursor, self.page_size + 1))
            rows = rows_to_dicts(cur)
        courses, next_cursor = build_page(rows, self.page_size)
        return {"courses": courses, "nextCursor": next_cursor}

    def get_course(self, course_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_COURSE_BY_ID, (course_id,))
            return row_to_dict(cur)

    def get_instructor_id(self, course_id: int) -> int | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_COURSE_INSTRUCTOR, (course_id,))
            row = cur.fetchone()
        return row[0] if row else None

    def get_my_courses(self, user_id: int, role: str) -> list[dict[str, Any]]:
        """Courses taught by a professor, or the enrollments of anyone else."""
        query = LIST_TAUGHT_COURSES if role == "PROFESSOR" else LIST_ENROLLED_COURSES
        with self.db.get_cursor() as cur:
            cur.execute(query, (user_id,))
            return rows_to_dicts(cur)

    def create_course(self, instructor_id: int, data: dict[str, Any]) -> int:
        """Create a course and attach its skills in one transaction.

        Raises:
            ValidationError: If the payload is invalid or the faculty does not exist

        Returns:
            Course ID
        """
        course = validate_course(data)
        with self.db.transaction() as cur:
            if course["faculty_id"] is not None:
                cur.execute(FACULTY_EXISTS, (course["faculty_id"],))
                if cur.fetchone() is None:
                    v = FieldValidator(data)
                    v.add_error("faculty_id", "Unknown faculty")
                    v.raise_if_errors()

            cur.execute(
                INSERT_COURSE,
                (
                    instructor_id,
                    course["title"],
                    course["code"],
                    course["description"],
                    course["difficulty"],
                    course["credits"],
                    course["estimated_hours"],
                    course["status"],
                    course["faculty_id"],
                ),
            )
            course_id = cur.fetchone()[0]
            for name in course["skills"]:
                cur.execute(INSERT_COURSE_SKILL, (course_id, get_or_create_skill(cur, name)))

        logger.info(f"Instructor {instructor_id} created course {course_id} ({course['code']})")
        return course_id

    def set_course_skills(self, course_id: int, skill_names: Any) -> list[int]:
        """Replace all skills of a course.

        Returns:
            Skill IDs now attached to the course
        """
        v = FieldValidator({"skills": skill_names})
        names = v.string_list("skills", max_item_length=100, required=True)
        v.raise_if_errors()

        skill_ids: list[int] = []
        with self.db.transaction() as cur:
            cur.execute(DELETE_COURSE_SKILLS, (course_id,))
            for name in names:
                skill_id = get_or_create_skill(cur, name)
                if skill_id not in skill_ids:
                    cur.execute(INSERT_COURSE_SKILL, (course_id, skill_id))
                    skill_ids.append(skill_id)
        logger.info(f"Course {course_id} now has {len(skill_ids)} skills")
        return skill_ids
