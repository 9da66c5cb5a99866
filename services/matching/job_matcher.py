"""
Job Matcher

Scores how well a student's skills and enrolled courses cover a job's
requirements. The score is a weighted average of two overlap percentages:

    skill%  = 100 * matched / required   (0 when nothing is required)
    course% = 100 * matched / required   (0 when nothing is required)
    match%  = 0.7 * skill% + 0.3 * course%

Skill names compare case-insensitively. Only ENROLLED enrollments count.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from services.shared.database import Database, row_to_dict, rows_to_dicts

from .queries import (
    GET_ENROLLED_COURSE_IDS,
    GET_JOB_REQUIREMENTS,
    GET_STUDENT_SKILL_NAMES,
    LIST_JOB_REQUIREMENTS,
)

logger = logging.getLogger(__name__)

SKILL_WEIGHT = 0.7
COURSE_WEIGHT = 0.3


def _percentage(matched: int, required: int) -> float:
    return 100.0 * matched / required if required > 0 else 0.0


def _unique_skills(skills: Iterable[str]) -> list[str]:
    """Drop blank and case-insensitive duplicate names, keeping the first spelling."""
    seen: set[str] = set()
    unique = []
    for name in skills:
        key = (name or "").strip().lower()
        if key and key not in seen:
            seen.add(key)
            unique.append(name.strip())
    return unique


def calculate_match(
    job_skills: Sequence[str],
    job_courses: Sequence[tuple[int, str]],
    student_skills: Iterable[str],
    enrolled_course_ids: Iterable[int],
) -> dict[str, Any]:
    """
    Calculate the match between a job's requirements and a student.

    This is a pure calculation; it does not touch the database.

    Args:
        job_skills: Skill names required by the job, in job order
        job_courses: (course_id, title) pairs required by the job
        student_skills: Skill names the student has
        enrolled_course_ids: Ids of courses the student is ENROLLED in

    Returns:
        Dictionary with skillMatchPercentage, courseMatchPercentage,
        matchPercentage, requiredSkills, matchedSkills, requiredCourses,
        matchedCourses, missingSkills and missingCourses
    """
    required_skills = _unique_skills(job_skills)
    have = {s.strip().lower() for s in student_skills if s}
    missing_skills = [s for s in required_skills if s.lower() not in have]
    matched_skills = len(required_skills) - len(missing_skills)

    required_courses: dict[int, str] = {}
    for course_id, title in job_courses:
        required_courses.setdefault(course_id, title)
    enrolled = set(enrolled_course_ids)
    missing_courses = [t for cid, t in required_courses.items() if cid not in enrolled]
    matched_courses = len(required_courses) - len(missing_courses)

    skill_pct = _percentage(matched_skills, len(required_skills))
    course_pct = _percentage(matched_courses, len(required_courses))
    overall = SKILL_WEIGHT * skill_pct + COURSE_WEIGHT * course_pct

    return {
        "skillMatchPercentage": skill_pct,
        "courseMatchPercentage": course_pct,
        "matchPercentage": min(max(overall, 0.0), 100.0),
        "requiredSkills": len(required_skills),
        "matchedSkills": matched_skills,
        "requiredCourses": len(required_courses),
        "matchedCourses": matched_courses,
        "missingSkills": missing_skills,
        "missingCourses": missing_courses,
    }


class JobMatcher:
    """Loads job requirements and student records, then scores them."""

    def __init__(self, database: Database):
        if not database:
            raise ValueError("Database is required")
        self.db = database

    def _student_profile(self, cur, student_id: int) -> tuple[list[str], set[int]]:
        cur.execute(GET_STUDENT_SKILL_NAMES, (student_id,))
        skills = [row[0] for row in cur.fetchall()]
        cur.execute(GET_ENROLLED_COURSE_IDS, (student_id,))
        enrolled = {row[0] for row in cur.fetchall()}
        return skills, enrolled

    @staticmethod
    def _score(job: dict[str, Any], skills: list[str], enrolled: set[int]) -> dict[str, Any]:
        courses = list(zip(job["course_ids"] or [], job["course_titles"] or []))
        return calculate_match(job["skills"] or [], courses, skills, enrolled)

    def calculate_job_match(self, student_id: int, job_id: int) -> dict[str, Any] | None:
        """Match one job against a student.

        Returns:
            Match dictionary, or None if the job does not exist
        """
        with self.db.get_cursor() as cur:
            cur.execute(GET_JOB_REQUIREMENTS, (job_id,))
            job = row_to_dict(cur)
            if not job:
                return None
            skills, enrolled = self._student_profile(cur, student_id)

        result = self._score(job, skills, enrolled)
        logger.debug(
            f"Student {student_id} matches job {job_id} at {result['matchPercentage']:.1f}%"
        )
        return result

    def get_top_matches(
        self, student_id: int, limit: int = 5, candidates: int = 200
    ) -> list[dict[str, Any]]:
        """Best matching jobs for a student, highest match first.

        Args:
            student_id: Student user id
            limit: Number of matches to return
            candidates: How many of the newest jobs to score
        """
        if limit <= 0:
            raise ValueError("Limit must be positive")
        with self.db.get_cursor() as cur:
            cur.execute(LIST_JOB_REQUIREMENTS, (candidates,))
            jobs = rows_to_dicts(cur)
            skills, enrolled = self._student_profile(cur, student_id)

        scored = []
        for job in jobs:
            result = self._score(job, skills, enrolled)
            scored.append({"jobId": job["id"], "title": job["title"], **result})
        scored.sort(key=lambda m: m["matchPercentage"], reverse=True)
        return scored[:limit]
