"""Service for the skill catalogue and user skills."""

from __future__ import annotations

import logging
from typing import Any

from services.shared.database import Database, rows_to_dicts

from .queries import (
    DELETE_USER_SKILL,
    GET_SKILL_BY_NAME,
    GET_USER_SKILLS,
    INSERT_SKILL,
    INSERT_USER_SKILL,
    SEARCH_SKILLS,
)

logger = logging.getLogger(__name__)

MAX_SKILL_NAME_LENGTH = 100


def get_or_create_skill(cur, name: str) -> int:
    """Return the id of a skill, creating it when no case-insensitive match exists.

    Runs on the caller's cursor so it can take part in a transaction.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Skill name is required")
    if len(cleaned) > MAX_SKILL_NAME_LENGTH:
        raise ValueError(f"Skill name must be at most {MAX_SKILL_NAME_LENGTH} characters")

    cur.execute(GET_SKILL_BY_NAME, (cleaned,))
    row = cur.fetchone()
    if row:
        return row[0]

    cur.execute(INSERT_SKILL, (cleaned,))
    row = cur.fetchone()
    if row:
        return row[0]

    # Lost a race with a concurrent insert of the same name.
    cur.execute(GET_SKILL_BY_NAME, (cleaned,))
    return cur.fetchone()[0]


class SkillService:
    """Service for skills attached to users."""

    def __init__(self, database: Database):
        if not database:
            raise ValueError("Database is required")
        self.db = database

    def search_skills(self, query: str | None = None, limit: int = 20) -> list[dict[str, Any]]:
        """List catalogue skills, optionally filtered by a name fragment."""
        if limit <= 0:
            raise ValueError("Limit must be positive")
        term = query.strip() if query and query.strip() else None
        with self.db.get_cursor() as cur:
            cur.execute(SEARCH_SKILLS, (term, term, limit))
            return rows_to_dicts(cur)

    def get_user_skills(self, user_id: int) -> list[dict[str, Any]]:
        with self.db.get_cursor() as cur:
            cur.execute(GET_USER_SKILLS, (user_id,))
            return rows_to_dicts(cur)

    def add_user_skill(self, user_id: int, name: str) -> int:
        """Attach a skill to a user, creating the skill on demand.

        Returns:
            Skill ID
        """
        with self.db.transaction() as cur:
            skill_id = get_or_create_skill(cur, name)
            cur.execute(INSERT_USER_SKILL, (user_id, skill_id))
        logger.info(f"User {user_id} added skill {skill_id} ({name.strip()})")
        return skill_id

    def remove_user_skill(self, user_id: int, skill_id: int) -> bool:
        """Detach a skill from a user.

        Returns:
            True if the user had the skill
        """
        with self.db.get_cursor() as cur:
            cur.execute(DELETE_USER_SKILL, (user_id, skill_id))
            return cur.rowcount > 0
