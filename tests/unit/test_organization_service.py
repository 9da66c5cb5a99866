"""Unit tests for OrganizationService."""

import pytest

from services.organizations.organization_service import OrganizationService, create_slug
from services.organizations.queries import INSERT_MEMBER, INSERT_ORGANIZATION


@pytest.fixture
def organization_service(mock_database):
    return OrganizationService(database=mock_database)


class TestCreateSlug:
    """Test slug generation."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Concordia University", "concordia-university"),
            ("  Gina Cody School!! ", "gina-cody-school"),
            ("École", "cole"),
            ("***", "organization"),
        ],
    )
    def test_create_slug(self, name, expected):
        assert create_slug(name) == expected


class TestOrganizationService:
    """Test cases for OrganizationService."""

    def test_create_adds_owner(self, organization_service, mock_cursor):
        mock_cursor.fetchone.side_effect = [None, (8,), (1,)]

        assert organization_service.create_organization_for_user(3, "Concordia") == 8

        calls = {c[0][0]: c[0][1] for c in mock_cursor.execute.call_args_list}
        assert calls[INSERT_ORGANIZATION] == ("Concordia", "concordia")
        assert calls[INSERT_MEMBER] == (8, 3, "owner")

    def test_taken_slug_gets_suffix(self, organization_service, mock_cursor):
        mock_cursor.fetchone.side_effect = [(1,), (1,), None, (8,), (1,)]

        organization_service.create_organization_for_user(3, "Concordia")

        calls = {c[0][0]: c[0][1] for c in mock_cursor.execute.call_args_list}
        assert calls[INSERT_ORGANIZATION] == ("Concordia", "concordia-3")

    def test_name_required(self, organization_service):
        with pytest.raises(ValueError, match="name is required"):
            organization_service.create_organization_for_user(3, "  ")

    @pytest.mark.parametrize("role,expected", [("owner", True), ("member", False)])
    def test_is_owner(self, organization_service, mock_cursor, role, expected):
        mock_cursor.fetchone.return_value = (role,)

        assert organization_service.is_owner(8, 3) is expected

    def test_duplicate_school(self, organization_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        with pytest.raises(ValueError, match="already exists"):
            organization_service.create_school(8, "Engineering")

    def test_faculty_from_other_organization(self, organization_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["faculty_id", "organization_id"], [(2, 99)])

        with pytest.raises(ValueError, match="does not belong"):
            organization_service.assign_member_to_faculty(8, 5, 2)

    def test_detach_member_from_faculty(self, organization_service, mock_cursor):
        mock_cursor.fetchone.return_value = (5,)

        assert organization_service.assign_member_to_faculty(8, 5, None) is True
        assert mock_cursor.execute.call_args[0][1] == (None, 5, 8)
