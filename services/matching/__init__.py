"""Job/student match scoring."""

from .job_matcher import COURSE_WEIGHT, SKILL_WEIGHT, JobMatcher, calculate_match

__all__ = ["COURSE_WEIGHT", "JobMatcher", "SKILL_WEIGHT", "calculate_match"]
