"""Service for organizations and their academic structure (schools, faculties, members)."""

from __future__ import annotations

import logging
import re
from typing import Any

from services.shared.database import Database, row_to_dict, rows_to_dicts

from .queries import (
    ASSIGN_MEMBER_FACULTY,
    GET_FACULTY,
    GET_MEMBER_ROLE,
    GET_ORGANIZATION_FOR_USER,
    GET_SCHOOL,
    INSERT_FACULTY,
    INSERT_MEMBER,
    INSERT_ORGANIZATION,
    INSERT_SCHOOL,
    LIST_FACULTIES,
    LIST_MEMBERS,
    LIST_SCHOOLS,
    SLUG_EXISTS,
)

logger = logging.getLogger(__name__)


def create_slug(value: str) -> str:
    """Build a URL-friendly slug: lower-case, non-alphanumerics collapsed to '-'."""
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")
    return slug or "organization"


class OrganizationService:
    """Service for organizations, schools, faculties and members."""

    def __init__(self, database: Database):
        if not database:
            raise ValueError("Database is required")
        self.db = database

    def create_organization_for_user(self, user_id: int, name: str) -> int:
        """Create an organization owned by a user.

        The slug is derived from the name; a numeric suffix is appended when
        it is already taken.

        Returns:
            Organization ID
        """
        if not name or not name.strip():
            raise ValueError("Organization name is required")

        base_slug = create_slug(name)
        with self.db.transaction() as cur:
            slug = base_slug
            suffix = 1
            while True:
                cur.execute(SLUG_EXISTS, (slug,))
                if not cur.fetchone():
                    break
                suffix += 1
                slug = f"{base_slug}-{suffix}"

            cur.execute(INSERT_ORGANIZATION, (name.strip(), slug))
            organization_id = cur.fetchone()[0]
            cur.execute(INSERT_MEMBER, (organization_id, user_id, "owner"))

        logger.info(f"Created organization {organization_id} ({slug}) for user {user_id}")
        return organization_id

    def get_organization_for_user(self, user_id: int) -> dict[str, Any] | None:
        """Get the organization a user owns or belongs to."""
        with self.db.get_cursor() as cur:
            cur.execute(GET_ORGANIZATION_FOR_USER, (user_id,))
            return row_to_dict(cur)

    def is_owner(self, organization_id: int, user_id: int) -> bool:
        with self.db.get_cursor() as cur:
            cur.execute(GET_MEMBER_ROLE, (organization_id, user_id))
            row = cur.fetchone()
        return bool(row) and row[0] == "owner"

    def list_members(self, organization_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(LIST_MEMBERS, (organization_id,))
            return rows_to_dicts(cur)

    def add_member(self, organization_id: int, user_id: int) -> int | None:
        """Add a user to an organization as a plain member.

        Returns:
            Member ID, or None if the user already belongs to it
        """
        with self.db.get_cursor() as cur:
            cur.execute(INSERT_MEMBER, (organization_id, user_id, "member"))
            row = cur.fetchone()
        return row[0] if row else None

    def list_schools(self, organization_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(LIST_SCHOOLS, (organization_id,))
            return rows_to_dicts(cur)

    def get_school(self, school_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_SCHOOL, (school_id,))
            return row_to_dict(cur)

    def create_school(self, organization_id: int, name: str, description: str | None = None) -> int:
        """Create a school inside an organization.

        Raises:
            ValueError: If the name is missing or already used in the organization
        """
        if not name or not name.strip():
            raise ValueError("School name is required")
        with self.db.get_cursor() as cur:
            cur.execute(INSERT_SCHOOL, (organization_id, name.strip(), description))
            row = cur.fetchone()
        if not row:
            raise ValueError(f"School '{name.strip()}' already exists")
        logger.info(f"Created school {row[0]} in organization {organization_id}")
        return row[0]

    def list_faculties(self, school_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(LIST_FACULTIES, (school_id,))
            return rows_to_dicts(cur)

    def get_faculty(self, faculty_id: int) -> dict[str, Any] | None:
        with self.db.get_cursor() as cur:
            cur.execute(GET_FACULTY, (faculty_id,))
            return row_to_dict(cur)

    def create_faculty(self, school_id: int, name: str, description: str | None = None) -> int:
        """Create a faculty inside a school.

        Raises:
            ValueError: If the name is missing or already used in the school
        """
        if not name or not name.strip():
            raise ValueError("Faculty name is required")
        with self.db.get_cursor() as cur:
            cur.execute(INSERT_FACULTY, (school_id, name.strip(), description))
            row = cur.fetchone()
        if not row:
            raise ValueError(f"Faculty '{name.strip()}' already exists")
        logger.info(f"Created faculty {row[0]} in school {school_id}")
        return row[0]

    def assign_member_to_faculty(
        self, organization_id: int, member_id: int, faculty_id: int | None
    ) -> bool:
        """Attach a member to a faculty of the same organization (None detaches).

        Raises:
            ValueError: If the faculty belongs to another organization
        """
        if faculty_id is not None:
            faculty = self.get_faculty(faculty_id)
            if not faculty or faculty["organization_id"] != organization_id:
                raise ValueError("Faculty does not belong to this organization")
        with self.db.get_cursor() as cur:
            cur.execute(ASSIGN_MEMBER_FACULTY, (faculty_id, member_id, organization_id))
            return cur.fetchone() is not None
