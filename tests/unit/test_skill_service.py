"""Unit tests for SkillService."""

import pytest

from services.skills import SkillService
from services.skills.queries import INSERT_SKILL, INSERT_USER_SKILL
from services.skills.skill_service import get_or_create_skill


class TestGetOrCreateSkill:
    """Test skill lookup and creation."""

    def test_reuses_existing_skill(self, mock_cursor):
        mock_cursor.fetchone.return_value = (4, "Python")

        assert get_or_create_skill(mock_cursor, " python ") == 4
        assert mock_cursor.execute.call_count == 1

    def test_creates_missing_skill(self, mock_cursor):
        mock_cursor.fetchone.side_effect = [None, (9,)]

        assert get_or_create_skill(mock_cursor, "Rust") == 9
        assert mock_cursor.execute.call_args[0] == (INSERT_SKILL, ("Rust",))

    def test_concurrent_insert_falls_back_to_lookup(self, mock_cursor):
        mock_cursor.fetchone.side_effect = [None, None, (9, "Rust")]

        assert get_or_create_skill(mock_cursor, "Rust") == 9

    @pytest.mark.parametrize("name", ["", "   ", None, "x" * 101])
    def test_invalid_names(self, mock_cursor, name):
        with pytest.raises(ValueError):
            get_or_create_skill(mock_cursor, name)


class TestSkillService:
    """Test cases for SkillService."""

    def test_add_user_skill(self, mock_database, mock_cursor):
        mock_cursor.fetchone.return_value = (4, "Python")

        assert SkillService(mock_database).add_user_skill(3, "Python") == 4
        assert mock_cursor.execute.call_args[0] == (INSERT_USER_SKILL, (3, 4))

    def test_search_passes_term(self, mock_database, mock_cursor, set_rows):
        set_rows(mock_cursor, ["skill_id", "name"], [(4, "Python")])

        skills = SkillService(mock_database).search_skills(" py ", limit=5)

        assert skills == [{"skill_id": 4, "name": "Python"}]
        assert mock_cursor.execute.call_args[0][1] == ("py", "py", 5)

    def test_search_rejects_bad_limit(self, mock_database):
        with pytest.raises(ValueError):
            SkillService(mock_database).search_skills(limit=0)

    def test_remove_missing_skill(self, mock_database, mock_cursor):
        mock_cursor.rowcount = 0

        assert SkillService(mock_database).remove_user_skill(3, 4) is False
