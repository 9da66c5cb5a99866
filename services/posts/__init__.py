"""Posts, likes, bookmarks and comments."""

from .comment_service import CommentService
from .post_service import PostService

__all__ = ["PostService", "CommentService"]
