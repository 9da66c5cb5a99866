"""User accounts and authentication services."""

from .auth_service import AuthService
from .user_service import ROLES, STATUSES, UserService

__all__ = ["AuthService", "UserService", "ROLES", "STATUSES"]
