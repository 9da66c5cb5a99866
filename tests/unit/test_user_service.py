"""Unit tests for UserService."""

import bcrypt
import pytest

from services.auth.user_service import UserService


@pytest.fixture
def user_service(mock_database):
    """Create a UserService instance with mocked database."""
    return UserService(database=mock_database)


class TestUserService:
    """Test cases for UserService."""

    def test_init_requires_database(self):
        """Test that UserService requires a database."""
        with pytest.raises(ValueError, match="Database is required"):
            UserService(database=None)

    def test_hash_password(self, user_service):
        """Test password hashing."""
        hash_result = user_service._hash_password("testpassword123")

        assert hash_result.startswith("$2b$")  # bcrypt hash prefix
        assert len(hash_result) > 20

    def test_verify_password_correct(self, user_service):
        """Test password verification with correct password."""
        password = "testpassword123"
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

        assert user_service.verify_password(password, password_hash) is True

    def test_verify_password_incorrect(self, user_service):
        """Test password verification with incorrect password."""
        password_hash = bcrypt.hashpw(b"testpassword123", bcrypt.gensalt()).decode("utf-8")

        assert user_service.verify_password("wrongpassword", password_hash) is False

    def test_verify_password_handles_exceptions(self, user_service):
        """Test verify_password handles a malformed hash."""
        assert user_service.verify_password("password", "invalid_hash") is False

    def test_create_user_validation_empty_username(self, user_service):
        with pytest.raises(ValueError, match="Username is required"):
            user_service.create_user(username="", email="test@example.com", password="password123")

    def test_create_user_validation_empty_email(self, user_service):
        with pytest.raises(ValueError, match="Email is required"):
            user_service.create_user(username="testuser", email="", password="password123")

    def test_create_user_validation_short_password(self, user_service):
        """Test create_user validates password length."""
        with pytest.raises(ValueError, match="Password must be at least 8 characters"):
            user_service.create_user(
                username="testuser", email="test@example.com", password="short12"
            )

    def test_create_user_validation_invalid_role(self, user_service):
        with pytest.raises(ValueError, match="Role must be one of"):
            user_service.create_user(
                username="testuser",
                email="test@example.com",
                password="password123",
                role="WIZARD",
            )

    def test_create_user_checks_username_exists(self, user_service):
        """Test create_user checks if username already exists."""
        user_service.get_user_by_username = lambda username: {"user_id": 1}

        with pytest.raises(ValueError, match="Username 'existinguser' already exists"):
            user_service.create_user(
                username="existinguser", email="test@example.com", password="password123"
            )

    def test_create_user_checks_email_exists(self, user_service):
        """Test create_user checks if email already exists."""
        user_service.get_user_by_username = lambda username: None
        user_service.get_user_by_email = lambda email: {"user_id": 1}

        with pytest.raises(ValueError, match="Email 'existing@example.com' already exists"):
            user_service.create_user(
                username="newuser", email="existing@example.com", password="password123"
            )

    def test_create_student_is_active(self, user_service, mock_cursor):
        """Test students are created ACTIVE with a hashed password and lower-cased email."""
        user_service.get_user_by_username = lambda username: None
        user_service.get_user_by_email = lambda email: None
        mock_cursor.fetchone.return_value = (1,)

        user_id = user_service.create_user(
            username="newuser", email="NewUser@Example.com", password="password123"
        )

        assert user_id == 1
        params = mock_cursor.execute.call_args[0][1]
        assert params[1] == "newuser@example.com"
        assert params[2].startswith("$2b$")
        assert params[4:] == ("STUDENT", "ACTIVE")

    @pytest.mark.parametrize("role", ["INSTITUTION", "ORGANIZATION"])
    def test_create_user_needing_approval_is_pending(self, user_service, mock_cursor, role):
        user_service.get_user_by_username = lambda username: None
        user_service.get_user_by_email = lambda email: None
        mock_cursor.fetchone.return_value = (5,)

        user_service.create_user(
            username="uni", email="uni@example.com", password="password123", role=role
        )

        assert mock_cursor.execute.call_args[0][1][5] == "PENDING"

    def test_get_user_by_username_not_found(self, user_service, mock_cursor, set_rows):
        """Test get_user_by_username returns None when user not found."""
        set_rows(mock_cursor, ["user_id", "username", "email"], [])

        assert user_service.get_user_by_username("nonexistent") is None

    def test_get_user_by_id_found(self, user_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["user_id", "username", "role"], [(7, "ada", "STUDENT")])

        assert user_service.get_user_by_id(7) == {"user_id": 7, "username": "ada", "role": "STUDENT"}

    def test_update_user_role_rejects_unknown_role(self, user_service, mock_database):
        with pytest.raises(ValueError, match="Invalid role specified"):
            user_service.update_user_role(1, "SUPERUSER")
        mock_database.get_cursor.assert_not_called()

    def test_update_user_status_rejects_unknown_status(self, user_service):
        with pytest.raises(ValueError, match="Invalid status specified"):
            user_service.update_user_status(1, "BANNED")

    def test_update_user_status_returns_false_for_missing_user(self, user_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert user_service.update_user_status(404, "ACTIVE") is False

    def test_update_user_password_missing_user(self, user_service, mock_cursor):
        mock_cursor.rowcount = 0

        with pytest.raises(ValueError, match="User 3 not found"):
            user_service.update_user_password(3, "longenough1")

    def test_update_profile_rejects_long_bio(self, user_service):
        with pytest.raises(ValueError, match="Bio must be at most"):
            user_service.update_profile(1, bio="x" * 1001)
