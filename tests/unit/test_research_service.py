"""Unit tests for ResearchService."""

import pytest

from services.researches import ResearchService, validate_research
from services.researches.queries import (
    DELETE_SAVED_RESEARCH,
    INSERT_RESEARCH,
    LIST_RESEARCHES,
    LIST_SAVED_RESEARCHES,
    LIST_USER_RESEARCHES,
    UPSERT_SAVED_RESEARCH,
)
from services.shared.validation import ValidationError


@pytest.fixture
def research_service(mock_database, mock_notification_service):
    return ResearchService(
        database=mock_database, notification_service=mock_notification_service
    )


class TestValidateResearch:
    """Test research payload validation."""

    def test_strips_values(self):
        research = validate_research({"title": " Graph neural nets ", "description": " GNNs "})

        assert research == {"title": "Graph neural nets", "description": "GNNs"}

    def test_reports_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_research({"title": "  "})

        assert exc_info.value.field_errors == {"title": "Required", "description": "Required"}

    def test_title_length_limit(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_research({"title": "t" * 256, "description": "d"})

        assert "title" in exc_info.value.field_errors


class TestResearchService:
    """Test cases for ResearchService."""

    def test_init_requires_database(self):
        with pytest.raises(ValueError, match="Database is required"):
            ResearchService(database=None)

    def test_list_researches_takes_one_extra_row(self, mock_database, mock_cursor, set_rows):
        service = ResearchService(database=mock_database, page_size=2)
        set_rows(mock_cursor, ["id", "title"], [(9, "c"), (8, "b"), (7, "a")])

        page = service.list_researches(viewer_id=3, query="  quantum ")

        assert page == {
            "researches": [{"id": 9, "title": "c"}, {"id": 8, "title": "b"}],
            "nextCursor": 7,
        }
        query, params = mock_cursor.execute.call_args[0]
        assert query == LIST_RESEARCHES
        assert params == (3, 3, "quantum", "quantum", None, None, 3)

    def test_blank_query_means_no_filter(self, research_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id"], [])

        page = research_service.list_researches(viewer_id=3, cursor=5, query="   ")

        assert page == {"researches": [], "nextCursor": None}
        assert mock_cursor.execute.call_args[0][1][2:6] == (None, None, 5, 5)

    def test_my_researches(self, research_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id"], [(4,)])

        page = research_service.list_user_researches(user_id=3, viewer_id=3)

        assert page["researches"] == [{"id": 4}]
        assert mock_cursor.execute.call_args[0][0] == LIST_USER_RESEARCHES

    def test_saved_researches(self, research_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id"], [])

        research_service.list_saved_researches(user_id=3)

        assert mock_cursor.execute.call_args[0][0] == LIST_SAVED_RESEARCHES

    def test_create_research(self, research_service, mock_cursor):
        mock_cursor.fetchone.return_value = (21,)

        research_id = research_service.create_research(
            3, {"title": "Campus energy use", "description": "Metering study"}
        )

        assert research_id == 21
        assert mock_cursor.execute.call_args[0] == (
            INSERT_RESEARCH,
            (3, "Campus energy use", "Metering study"),
        )

    def test_create_research_rejects_bad_payload(self, research_service, mock_database):
        with pytest.raises(ValidationError):
            research_service.create_research(3, {})

        mock_database.get_cursor.assert_not_called()

    def test_like_research_notifies_author(
        self, research_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(2,), (55,)]

        assert research_service.like_research(research_id=4, user_id=8) is True

        mock_notification_service.create_notification.assert_called_once_with(
            recipient_id=2,
            issuer_id=8,
            notification_type="LIKE",
            research_id=4,
            cur=mock_cursor,
        )

    def test_like_own_research_does_not_notify(
        self, research_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(8,), (55,)]

        assert research_service.like_research(research_id=4, user_id=8) is True
        mock_notification_service.create_notification.assert_not_called()

    def test_like_twice_is_idempotent(
        self, research_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(2,), None]

        assert research_service.like_research(research_id=4, user_id=8) is False
        mock_notification_service.create_notification.assert_not_called()

    def test_like_missing_research(self, research_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert research_service.like_research(research_id=404, user_id=8) is None

    def test_unlike_removes_notification(
        self, research_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(2,), (55,)]

        assert research_service.unlike_research(research_id=4, user_id=8) is True

        mock_notification_service.delete_notifications.assert_called_once_with(
            issuer_id=8,
            recipient_id=2,
            notification_type="LIKE",
            research_id=4,
            cur=mock_cursor,
        )

    def test_unlike_without_like(self, research_service, mock_cursor, mock_notification_service):
        mock_cursor.fetchone.side_effect = [(2,), None]

        assert research_service.unlike_research(research_id=4, user_id=8) is False
        mock_notification_service.delete_notifications.assert_not_called()

    def test_get_like_info(self, research_service, mock_cursor):
        mock_cursor.fetchone.side_effect = [(2,), (3, False)]

        assert research_service.get_like_info(4, 8) == {"likes": 3, "isLikedByUser": False}

    def test_like_info_for_missing_research(self, research_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert research_service.get_like_info(404, 8) is None

    def test_save_research(self, research_service, mock_cursor):
        mock_cursor.fetchone.return_value = (2,)

        assert research_service.save_research(research_id=4, user_id=8) is True
        assert mock_cursor.execute.call_args[0] == (UPSERT_SAVED_RESEARCH, (8, 4))

    def test_save_missing_research(self, research_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert research_service.save_research(research_id=404, user_id=8) is None

    def test_unsave_research(self, research_service, mock_cursor):
        research_service.unsave_research(research_id=4, user_id=8)

        assert mock_cursor.execute.call_args[0] == (DELETE_SAVED_RESEARCH, (8, 4))

    def test_is_saved(self, research_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert research_service.is_saved(4, 8) is False

    def test_delete_research(self, research_service, mock_cursor):
        mock_cursor.rowcount = 1

        assert research_service.delete_research(4) is True
