"""User management service for authentication and profiles."""

import logging
from typing import Any

import bcrypt

from services.shared.database import Database, row_to_dict, rows_to_dicts

from .queries import (
    GET_PUBLIC_PROFILE_BY_USERNAME,
    GET_USER_BY_EMAIL,
    GET_USER_BY_ID,
    GET_USER_BY_USERNAME,
    INSERT_USER,
    LIST_USERS,
    UPDATE_USER_LAST_LOGIN,
    UPDATE_USER_PASSWORD,
    UPDATE_USER_PROFILE,
    UPDATE_USER_ROLE,
    UPDATE_USER_STATUS,
)

logger = logging.getLogger(__name__)

ROLES = ("STUDENT", "PROFESSOR", "INSTITUTION", "ORGANIZATION", "ADMIN")
SELF_SERVICE_ROLES = ("STUDENT", "PROFESSOR", "INSTITUTION", "ORGANIZATION")
STATUSES = ("PENDING", "ACTIVE", "REJECTED", "SUSPENDED")

# Institutions and organizations wait for an administrator before they can sign in.
ROLES_REQUIRING_APPROVAL = ("INSTITUTION", "ORGANIZATION")

MIN_PASSWORD_LENGTH = 8


class UserService:
    """Service for user management and authentication."""

    def __init__(self, database: Database):
        """Initialize the user service.

        Args:
            database: Database connection interface
        """
        if not database:
            raise ValueError("Database is required")
        self.db = database

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        role: str = "STUDENT",
        name: str | None = None,
        status: str | None = None,
    ) -> int:
        """Create a new user account.

        Args:
            username: Unique username
            email: Unique email address
            password: Plain text password (will be hashed)
            role: One of ROLES, defaults to 'STUDENT'
            name: Display name (optional)
            status: Initial status; derived from the role when omitted

        Returns:
            User ID of the created user

        Raises:
            ValueError: If username or email already exists, or if validation fails
        """
        if not username or not username.strip():
            raise ValueError("Username is required")
        if not email or not email.strip():
            raise ValueError("Email is required")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if role not in ROLES:
            raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
        if status is None:
            status = "PENDING" if role in ROLES_REQUIRING_APPROVAL else "ACTIVE"
        if status not in STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(STATUSES)}")

        if self.get_user_by_username(username.strip()):
            raise ValueError(f"Username '{username}' already exists")
        if self.get_user_by_email(email.strip()):
            raise ValueError(f"Email '{email}' already exists")

        password_hash = self._hash_password(password)

        try:
            with self.db.get_cursor() as cur:
                cur.execute(
                    INSERT_USER,
                    (
                        username.strip(),
                        email.strip().lower(),
                        password_hash,
                        name.strip() if name else None,
                        role,
                        status,
                    ),
                )
                result = cur.fetchone()
                if not result:
                    raise ValueError("Failed to create user")
                user_id = result[0]
                logger.info(f"Created user: {username} (ID: {user_id}, role: {role}, status: {status})")
                return user_id
        except Exception as e:
            logger.error(f"Error creating user {username}: {e}", exc_info=True)
            raise

    def get_user_by_username(self, username: str) -> dict[str, Any] | None:
        """Get user by username.

        Args:
            username: Username to lookup

        Returns:
            User dictionary or None if not found
        """
        with self.db.get_cursor() as cur:
            cur.execute(GET_USER_BY_USERNAME, (username.strip(),))
            return row_to_dict(cur)

    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Get user by email (case-insensitive)."""
        with self.db.get_cursor() as cur:
            cur.execute(GET_USER_BY_EMAIL, (email.strip().lower(),))
            return row_to_dict(cur)

    def get_user_by_id(self, user_id: int) -> dict[str, Any] | None:
        """Get user by ID.

        Args:
            user_id: User ID to lookup

        Returns:
            User dictionary or None if not found
        """
        with self.db.get_cursor() as cur:
            cur.execute(GET_USER_BY_ID, (user_id,))
            return row_to_dict(cur)

    def get_public_profile(self, username: str, viewer_id: int) -> dict[str, Any] | None:
        """Get a user's public profile with follower/following/post counts."""
        with self.db.get_cursor() as cur:
            cur.execute(GET_PUBLIC_PROFILE_BY_USERNAME, (viewer_id, username.strip()))
            return row_to_dict(cur)

    def list_users(self) -> list[dict[str, Any]]:
        """List all users (admin view), newest first."""
        with self.db.get_cursor() as cur:
            cur.execute(LIST_USERS)
            return rows_to_dicts(cur)

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        Returns:
            True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except Exception as e:
            logger.error(f"Error verifying password: {e}", exc_info=True)
            return False

    def update_last_login(self, user_id: int) -> None:
        try:
            with self.db.get_cursor() as cur:
                cur.execute(UPDATE_USER_LAST_LOGIN, (user_id,))
        except Exception as e:
            logger.error(f"Error updating last login for user {user_id}: {e}", exc_info=True)
            raise

    def update_user_password(self, user_id: int, new_password: str) -> None:
        """Update user's password.

        Raises:
            ValueError: If password is too short or the user does not exist
        """
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        password_hash = self._hash_password(new_password)
        with self.db.get_cursor() as cur:
            cur.execute(UPDATE_USER_PASSWORD, (password_hash, user_id))
            if cur.rowcount == 0:
                raise ValueError(f"User {user_id} not found")
        logger.info(f"Updated password for user {user_id}")

    def update_profile(self, user_id: int, name: str | None = None, bio: str | None = None) -> bool:
        """Update display name and/or bio. ``None`` leaves a field untouched.

        Returns:
            True if the user exists and was updated
        """
        if name is not None and len(name) > 255:
            raise ValueError("Name must be at most 255 characters")
        if bio is not None and len(bio) > 1000:
            raise ValueError("Bio must be at most 1000 characters")
        with self.db.get_cursor() as cur:
            cur.execute(UPDATE_USER_PROFILE, (name, bio, user_id))
            return cur.fetchone() is not None

    def update_user_role(self, user_id: int, role: str) -> bool:
        """Change a user's role.

        Raises:
            ValueError: If the role is invalid
        """
        if role not in ROLES:
            raise ValueError("Invalid role specified")
        with self.db.get_cursor() as cur:
            cur.execute(UPDATE_USER_ROLE, (role, user_id))
            updated = cur.fetchone() is not None
        if updated:
            logger.info(f"Updated role of user {user_id} to {role}")
        return updated

    def update_user_status(self, user_id: int, status: str) -> bool:
        """Change a user's account status.

        Raises:
            ValueError: If the status is invalid
        """
        if status not in STATUSES:
            raise ValueError("Invalid status specified")
        with self.db.get_cursor() as cur:
            cur.execute(UPDATE_USER_STATUS, (status, user_id))
            updated = cur.fetchone() is not None
        if updated:
            logger.info(f"Updated status of user {user_id} to {status}")
        return updated

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
