"""Job postings and job applications."""

from .application_service import APPLICATION_STATUSES, ApplicationService
from .job_service import JOB_TYPES, JobService, parse_job_types, validate_job

__all__ = [
    "APPLICATION_STATUSES",
    "ApplicationService",
    "JOB_TYPES",
    "JobService",
    "parse_job_types",
    "validate_job",
]
