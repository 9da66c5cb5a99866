import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
repo_root = Path(__file__).resolve().parents[1]
environment = os.getenv("ENVIRONMENT", "development")
env_file = repo_root / f".env.{environment}"
if env_file.exists():
    load_dotenv(env_file, override=True)
else:
    env_path = repo_root / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)
load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    return int(value) if value else default


class Config:
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY") or "dev-secret-key-change-in-production"

    # JWT configuration
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=_int_env("JWT_ACCESS_TOKEN_HOURS", 24))
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"

    # CORS configuration: allowed frontend origin(s) via env (comma-separated)
    _cors_env = os.getenv("CORS_ORIGINS", "").strip()
    CORS_ORIGINS = (
        [o.strip() for o in _cors_env.split(",") if o.strip()]
        if _cors_env
        else ["http://localhost:3000", "http://localhost:5173"]
    )

    # Page sizes for cursor-paginated lists
    FEED_PAGE_SIZE = _int_env("FEED_PAGE_SIZE", 10)
    JOBS_PAGE_SIZE = _int_env("JOBS_PAGE_SIZE", 10)
    COURSES_PAGE_SIZE = _int_env("COURSES_PAGE_SIZE", 10)
    APPROVALS_PAGE_SIZE = _int_env("APPROVALS_PAGE_SIZE", 10)
    RESEARCHES_PAGE_SIZE = _int_env("RESEARCHES_PAGE_SIZE", 10)
    COMMENTS_PAGE_SIZE = _int_env("COMMENTS_PAGE_SIZE", 5)
    NOTIFICATIONS_PAGE_SIZE = _int_env("NOTIFICATIONS_PAGE_SIZE", 20)

    # Roles allowed to author content
    JOB_POSTER_ROLES = {"ORGANIZATION", "ADMIN"}
    COURSE_AUTHOR_ROLES = {"PROFESSOR", "ADMIN"}
