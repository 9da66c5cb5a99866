"""Authentication service for registration and login."""

import logging
from typing import Any

from .user_service import ROLES_REQUIRING_APPROVAL, SELF_SERVICE_ROLES, UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_service: UserService, organization_service=None):
        """Initialize the auth service.

        Args:
            user_service: UserService instance for user operations
            organization_service: OrganizationService used to create the
                organization of institution/organization accounts (optional)
        """
        if not user_service:
            raise ValueError("UserService is required")
        self.user_service = user_service
        self.organization_service = organization_service

    def authenticate_user(self, username: str, password: str) -> dict[str, Any] | None:
        """Authenticate a user by username or email and password.

        Args:
            username: Username or email
            password: Plain text password

        Returns:
            User dictionary (without password hash) if authentication succeeds, None otherwise
        """
        if not username or not password:
            return None

        user = self.user_service.get_user_by_username(username.strip())
        if not user:
            user = self.user_service.get_user_by_email(username.strip())

        if not user:
            logger.warning(f"Authentication failed: user not found: {username}")
            return None

        if not self.user_service.verify_password(password, user["password_hash"]):
            logger.warning(f"Authentication failed: invalid password for user: {username}")
            return None

        try:
            self.user_service.update_last_login(user["user_id"])
        except Exception as e:
            # Login still succeeds.
            logger.error(f"Error updating last login: {e}", exc_info=True)

        user_clean = {k: v for k, v in user.items() if k != "password_hash"}
        logger.info(f"User authenticated: {user['username']} (ID: {user['user_id']})")
        return user_clean

    def login_block_reason(self, user: dict[str, Any]) -> str | None:
        """Return why an authenticated user may not sign in, or None.

        Suspended accounts keep access; pending and rejected ones do not.
        """
        status = user.get("status")
        if status == "PENDING":
            return "Your account is pending approval"
        if status == "REJECTED":
            return "Your account has been rejected"
        return None

    def register_user(
        self,
        username: str,
        email: str,
        password: str,
        role: str = "STUDENT",
        name: str | None = None,
        institution: str | None = None,
    ) -> int:
        """Register a new user.

        Institution and organization accounts start PENDING and get an
        organization with the new user as owner.

        Returns:
            User ID of the created user

        Raises:
            ValueError: If the role cannot be self-assigned, or user creation fails validation
        """
        if role not in SELF_SERVICE_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(SELF_SERVICE_ROLES)}")

        user_id = self.user_service.create_user(
            username=username, email=email, password=password, role=role, name=name
        )

        if role in ROLES_REQUIRING_APPROVAL and self.organization_service:
            org_name = institution or f"{name or username}'s {role.title()}"
            try:
                self.organization_service.create_organization_for_user(
                    user_id=user_id, name=org_name
                )
            except Exception as e:
                # Registration stands; the organization can be created later.
                logger.error(
                    f"Error creating organization for user {user_id}: {e}", exc_info=True
                )
        return user_id

    def is_admin(self, user: dict[str, Any]) -> bool:
        return user.get("role") == "ADMIN"
