"""Courses, course skills, enrollments and course approvals."""

from .approval_service import (
    APPROVAL_DECISIONS,
    ApprovalConflict,
    CourseApprovalService,
    validate_decision,
)
from .course_service import COURSE_STATUSES, CourseService, validate_course
from .enrollment_service import ENROLLMENT_STATUSES, EnrollmentService

__all__ = [
    "APPROVAL_DECISIONS",
    "ApprovalConflict",
    "COURSE_STATUSES",
    "CourseApprovalService",
    "CourseService",
    "ENROLLMENT_STATUSES",
    "EnrollmentService",
    "validate_course",
    "validate_decision",
]
