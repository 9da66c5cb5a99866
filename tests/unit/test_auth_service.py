"""Unit tests for authentication services."""

from unittest.mock import Mock

import pytest

from services.auth.auth_service import AuthService
from services.auth.user_service import UserService
from services.organizations import OrganizationService


@pytest.fixture
def mock_user_service():
    """Create a mock UserService."""
    return Mock(spec=UserService)


@pytest.fixture
def mock_organization_service():
    return Mock(spec=OrganizationService)


@pytest.fixture
def auth_service(mock_user_service, mock_organization_service):
    """Create an AuthService instance with mocked dependencies."""
    return AuthService(
        user_service=mock_user_service, organization_service=mock_organization_service
    )


@pytest.fixture
def stored_user():
    return {
        "user_id": 1,
        "username": "testuser",
        "email": "test@example.com",
        "password_hash": "$2b$12$hashed_password",
        "role": "STUDENT",
        "status": "ACTIVE",
    }


class TestAuthService:
    """Test cases for AuthService."""

    def test_init_requires_user_service(self):
        """Test that AuthService requires a UserService."""
        with pytest.raises(ValueError, match="UserService is required"):
            AuthService(user_service=None)

    def test_authenticate_user_success_by_username(
        self, auth_service, mock_user_service, stored_user
    ):
        """Test successful authentication by username."""
        mock_user_service.get_user_by_username.return_value = stored_user
        mock_user_service.verify_password.return_value = True

        result = auth_service.authenticate_user("testuser", "password123")

        assert result["user_id"] == 1
        assert "password_hash" not in result  # Password hash should be excluded
        mock_user_service.get_user_by_username.assert_called_once_with("testuser")
        mock_user_service.update_last_login.assert_called_once_with(1)

    def test_authenticate_user_success_by_email(self, auth_service, mock_user_service, stored_user):
        """Test successful authentication by email."""
        mock_user_service.get_user_by_username.return_value = None
        mock_user_service.get_user_by_email.return_value = stored_user
        mock_user_service.verify_password.return_value = True

        result = auth_service.authenticate_user("test@example.com", "password123")

        assert result["user_id"] == 1
        mock_user_service.get_user_by_email.assert_called_once_with("test@example.com")

    def test_authenticate_user_unknown_user(self, auth_service, mock_user_service):
        mock_user_service.get_user_by_username.return_value = None
        mock_user_service.get_user_by_email.return_value = None

        assert auth_service.authenticate_user("invaliduser", "password123") is None
        mock_user_service.verify_password.assert_not_called()

    def test_authenticate_user_invalid_password(self, auth_service, mock_user_service, stored_user):
        mock_user_service.get_user_by_username.return_value = stored_user
        mock_user_service.verify_password.return_value = False

        assert auth_service.authenticate_user("testuser", "wrongpassword") is None

    def test_authenticate_user_empty_credentials(self, auth_service):
        """Test authentication with empty credentials."""
        assert auth_service.authenticate_user("", "password") is None
        assert auth_service.authenticate_user("username", "") is None

    def test_authenticate_user_handles_last_login_error(
        self, auth_service, mock_user_service, stored_user
    ):
        """Test that authentication succeeds even if last login update fails."""
        mock_user_service.get_user_by_username.return_value = stored_user
        mock_user_service.verify_password.return_value = True
        mock_user_service.update_last_login.side_effect = Exception("Database error")

        assert auth_service.authenticate_user("testuser", "password123") is not None

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("ACTIVE", None),
            ("SUSPENDED", None),
            ("PENDING", "Your account is pending approval"),
            ("REJECTED", "Your account has been rejected"),
        ],
    )
    def test_login_block_reason(self, auth_service, status, expected):
        assert auth_service.login_block_reason({"status": status}) == expected

    def test_register_student(self, auth_service, mock_user_service, mock_organization_service):
        """Test students are registered without an organization."""
        mock_user_service.create_user.return_value = 1

        user_id = auth_service.register_user(
            username="newuser", email="newuser@example.com", password="password123"
        )

        assert user_id == 1
        mock_user_service.create_user.assert_called_once_with(
            username="newuser",
            email="newuser@example.com",
            password="password123",
            role="STUDENT",
            name=None,
        )
        mock_organization_service.create_organization_for_user.assert_not_called()

    def test_register_institution_creates_organization(
        self, auth_service, mock_user_service, mock_organization_service
    ):
        mock_user_service.create_user.return_value = 9

        auth_service.register_user(
            username="uni",
            email="uni@example.com",
            password="password123",
            role="INSTITUTION",
            institution="Example University",
        )

        mock_organization_service.create_organization_for_user.assert_called_once_with(
            user_id=9, name="Example University"
        )

    def test_register_survives_organization_failure(
        self, auth_service, mock_user_service, mock_organization_service
    ):
        mock_user_service.create_user.return_value = 4
        mock_organization_service.create_organization_for_user.side_effect = Exception("boom")

        user_id = auth_service.register_user(
            username="acme", email="acme@example.com", password="password123", role="ORGANIZATION"
        )

        assert user_id == 4

    def test_register_rejects_admin_role(self, auth_service, mock_user_service):
        """Test the admin role cannot be self-assigned."""
        with pytest.raises(ValueError, match="Role must be one of"):
            auth_service.register_user(
                username="sneaky", email="s@example.com", password="password123", role="ADMIN"
            )
        mock_user_service.create_user.assert_not_called()

    def test_is_admin(self, auth_service):
        assert auth_service.is_admin({"role": "ADMIN"}) is True
        assert auth_service.is_admin({"role": "STUDENT"}) is False
        assert auth_service.is_admin({}) is False
