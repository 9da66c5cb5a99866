"""Unit tests for PostService and CommentService."""

from datetime import datetime

import pytest

from services.posts import CommentService, PostService
from services.posts.queries import INSERT_COMMENT, SEARCH_POSTS
from services.shared.validation import ValidationError


@pytest.fixture
def post_service(mock_database, mock_notification_service):
    return PostService(database=mock_database, notification_service=mock_notification_service)


@pytest.fixture
def comment_service(mock_database, mock_notification_service):
    return CommentService(
        database=mock_database, notification_service=mock_notification_service, page_size=2
    )


class TestPostService:
    """Test cases for PostService."""

    def test_create_post(self, post_service, mock_cursor):
        mock_cursor.fetchone.return_value = (17,)

        assert post_service.create_post(3, "  Hello campus  ") == 17
        assert mock_cursor.execute.call_args[0][1] == (3, "Hello campus", None)

    @pytest.mark.parametrize("content", [None, "", "   ", "x" * 2001])
    def test_create_post_rejects_bad_content(self, post_service, content):
        with pytest.raises(ValidationError) as exc_info:
            post_service.create_post(3, content)

        assert "content" in exc_info.value.field_errors

    def test_feed_pages_with_cursor(self, mock_database, mock_cursor, set_rows):
        service = PostService(database=mock_database, page_size=2)
        set_rows(mock_cursor, ["id", "content"], [(30, "c"), (20, "b"), (10, "a")])

        page = service.get_following_feed(3, cursor=30)

        assert [p["id"] for p in page["posts"]] == [30, 20]
        assert page["nextCursor"] == 10
        assert mock_cursor.execute.call_args[0][1] == (3, 3, 3, 30, 30, 3)

    def test_search_posts_matches_content_and_author(
        self, mock_database, mock_cursor, set_rows
    ):
        service = PostService(database=mock_database, page_size=1)
        set_rows(mock_cursor, ["id"], [(8,), (5,)])

        page = service.search_posts("  Ana ", viewer_id=3, cursor=8)

        assert page == {"posts": [{"id": 8}], "nextCursor": 5}
        query, params = mock_cursor.execute.call_args[0]
        assert query == SEARCH_POSTS
        assert params == (3, 3, "Ana", "Ana", "Ana", 8, 8, 2)

    def test_empty_search_matches_everything(self, post_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id"], [])

        post_service.search_posts(None, viewer_id=3)

        assert mock_cursor.execute.call_args[0][1][2:5] == ("", "", "")

    def test_last_page_has_no_cursor(self, post_service, mock_cursor, set_rows):
        set_rows(mock_cursor, ["id"], [(1,)])

        assert post_service.get_bookmarked_posts(3)["nextCursor"] is None

    def test_like_own_post_does_not_notify(
        self, post_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(3,), (1,)]

        assert post_service.like_post(17, 3) is True
        mock_notification_service.create_notification.assert_not_called()

    def test_like_post_notifies_author(
        self, post_service, mock_cursor, mock_notification_service
    ):
        mock_cursor.fetchone.side_effect = [(5,), (1,)]

        assert post_service.like_post(17, 3) is True
        kwargs = mock_notification_service.create_notification.call_args.kwargs
        assert kwargs["post_id"] == 17
        assert kwargs["notification_type"] == "LIKE"

    def test_like_missing_post(self, post_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert post_service.like_post(404, 3) is None

    def test_unlike_without_like(self, post_service, mock_cursor, mock_notification_service):
        mock_cursor.fetchone.side_effect = [(5,), None]

        assert post_service.unlike_post(17, 3) is False
        mock_notification_service.delete_notifications.assert_not_called()

    def test_bookmark_missing_post(self, post_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert post_service.bookmark_post(404, 3) is None

    def test_delete_post(self, post_service, mock_cursor):
        mock_cursor.rowcount = 1

        assert post_service.delete_post(17) is True


class TestCommentService:
    """Test cases for CommentService."""

    def test_add_comment_notifies_author(
        self, comment_service, mock_cursor, mock_notification_service
    ):
        created = datetime(2026, 3, 1, 12, 0)
        mock_cursor.fetchone.side_effect = [(5,), (40, created)]

        comment = comment_service.add_comment(17, 3, " Nice ")

        assert comment == {
            "id": 40,
            "post_id": 17,
            "user_id": 3,
            "content": "Nice",
            "created_at": created,
        }
        kwargs = mock_notification_service.create_notification.call_args.kwargs
        assert kwargs["notification_type"] == "COMMENT"
        assert kwargs["cur"] is mock_cursor

    def test_add_comment_to_missing_post(self, comment_service, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert comment_service.add_comment(404, 3, "Hi") is None
        queries = [c[0][0] for c in mock_cursor.execute.call_args_list]
        assert INSERT_COMMENT not in queries

    def test_comment_too_long(self, comment_service, mock_database):
        with pytest.raises(ValidationError):
            comment_service.add_comment(17, 3, "x" * 1001)
        mock_database.transaction.assert_not_called()

    def test_comments_are_oldest_first(self, comment_service, mock_cursor, set_rows):
        """Test the extra (oldest) row becomes the previous cursor."""
        set_rows(mock_cursor, ["id"], [(9,), (8,), (7,)])

        page = comment_service.get_comments(17)

        assert [c["id"] for c in page["comments"]] == [8, 9]
        assert page["previousCursor"] == 7
