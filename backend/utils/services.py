import os

from flask import current_app

from services.auth import AuthService, UserService
from services.courses import CourseApprovalService, CourseService, EnrollmentService
from services.jobs import ApplicationService, JobService
from services.matching import JobMatcher
from services.notifications import NotificationService
from services.organizations import OrganizationService
from services.posts import CommentService, PostService
from services.researches import ResearchService
from services.shared import PostgreSQLDatabase
from services.skills import SkillService
from services.social import FollowService


def build_db_connection_string() -> str:
    """
    Build PostgreSQL connection string from environment variables.

    Checks DATABASE_URL first, then falls back to individual POSTGRES_* variables.

    Returns:
        PostgreSQL connection string
    """
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db = os.getenv("POSTGRES_DB", "atcampus")
    ssl_mode = os.getenv("POSTGRES_SSL_MODE", "")

    conn_str = f"postgresql://{user}:{password}@{host}:{port}/{db}"
    if ssl_mode:
        conn_str += f"?sslmode={ssl_mode}"
    return conn_str


def get_database() -> PostgreSQLDatabase:
    return PostgreSQLDatabase(connection_string=build_db_connection_string())


def _page_size(key: str, default: int) -> int:
    return current_app.config.get(key, default)


def get_user_service() -> UserService:
    """
    Get UserService instance with database connection.

    Returns:
        UserService instance
    """
    return UserService(database=get_database())


def get_organization_service() -> OrganizationService:
    return OrganizationService(database=get_database())


def get_auth_service() -> AuthService:
    """
    Get AuthService instance wired to the user and organization services.

    Returns:
        AuthService instance
    """
    database = get_database()
    return AuthService(
        user_service=UserService(database=database),
        organization_service=OrganizationService(database=database),
    )


def get_skill_service() -> SkillService:
    return SkillService(database=get_database())


def get_notification_service() -> NotificationService:
    return NotificationService(
        database=get_database(), page_size=_page_size("NOTIFICATIONS_PAGE_SIZE", 20)
    )


def get_post_service() -> PostService:
    """
    Get PostService instance with database connection.

    Returns:
        PostService instance
    """
    database = get_database()
    return PostService(
        database=database,
        notification_service=NotificationService(database=database),
        page_size=_page_size("FEED_PAGE_SIZE", 10),
    )


def get_comment_service() -> CommentService:
    database = get_database()
    return CommentService(
        database=database,
        notification_service=NotificationService(database=database),
        page_size=_page_size("COMMENTS_PAGE_SIZE", 5),
    )


def get_job_service() -> JobService:
    """
    Get JobService instance with database connection.

    Returns:
        JobService instance
    """
    database = get_database()
    return JobService(
        database=database,
        notification_service=NotificationService(database=database),
        page_size=_page_size("JOBS_PAGE_SIZE", 10),
    )


def get_application_service() -> ApplicationService:
    database = get_database()
    return ApplicationService(
        database=database, notification_service=NotificationService(database=database)
    )


def get_course_service() -> CourseService:
    return CourseService(
        database=get_database(), page_size=_page_size("COURSES_PAGE_SIZE", 10)
    )


def get_enrollment_service() -> EnrollmentService:
    database = get_database()
    return EnrollmentService(
        database=database, notification_service=NotificationService(database=database)
    )


def get_follow_service() -> FollowService:
    database = get_database()
    return FollowService(
        database=database, notification_service=NotificationService(database=database)
    )


def get_job_matcher() -> JobMatcher:
    return JobMatcher(database=get_database())


def get_course_approval_service() -> CourseApprovalService:
    database = get_database()
    return CourseApprovalService(
        database=database,
        notification_service=NotificationService(database=database),
        page_size=_page_size("APPROVALS_PAGE_SIZE", 10),
    )


def get_research_service() -> ResearchService:
    """
    Get ResearchService instance with database connection.

    Returns:
        ResearchService instance
    """
    database = get_database()
    return ResearchService(
        database=database,
        notification_service=NotificationService(database=database),
        page_size=_page_size("RESEARCHES_PAGE_SIZE", 10),
    )
