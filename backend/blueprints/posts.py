import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id, current_user_role, rate_limit
from backend.utils.errors import _sanitize_error_message, validation_error_response
from backend.utils.services import get_comment_service, get_post_service
from backend.utils.validators import get_cursor_arg
from services.shared.validation import ValidationError

logger = logging.getLogger(__name__)
posts_bp = Blueprint("posts", __name__, url_prefix="/api/posts")


@posts_bp.route("", methods=["POST"])
@jwt_required()
@rate_limit(max_calls=30, window_seconds=60)
def api_create_post():
    """Create a post API endpoint."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        post_service = get_post_service()
        post_id = post_service.create_post(user_id, data.get("content"), data.get("image_url"))
        return jsonify({"post": post_service.get_post(post_id, user_id)}), 201
    except ValidationError as e:
        return validation_error_response(e)
    except Exception as e:
        logger.error(f"Error creating post: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/feed", methods=["GET"])
@jwt_required()
def api_following_feed():
    """Posts of the users the caller follows."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_post_service().get_following_feed(user_id, get_cursor_arg())
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching feed: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/search", methods=["GET"])
@jwt_required()
def api_search_posts():
    """Search posts by content or author; ``q`` may be empty."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_post_service().search_posts(
            request.args.get("q"), user_id, get_cursor_arg()
        )
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error searching posts: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/bookmarks", methods=["GET"])
@jwt_required()
def api_bookmarked_posts():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_post_service().get_bookmarked_posts(user_id, get_cursor_arg())
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching bookmarks: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>", methods=["GET"])
@jwt_required()
def api_get_post(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        post = get_post_service().get_post(post_id, user_id)
        if not post:
            return jsonify({"error": "Post not found"}), 404
        return jsonify({"post": post}), 200
    except Exception as e:
        logger.error(f"Error fetching post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>", methods=["DELETE"])
@jwt_required()
def api_delete_post(post_id: int):
    """Delete a post. Authors may delete their own posts, admins any post."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        post_service = get_post_service()
        owner_id = post_service.get_post_owner(post_id)
        if owner_id is None:
            return jsonify({"error": "Post not found"}), 404
        if owner_id != user_id and current_user_role(user_id) != "ADMIN":
            return jsonify({"error": "You do not have permission to delete this post"}), 403

        post_service.delete_post(post_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error deleting post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/likes", methods=["GET"])
@jwt_required()
def api_get_post_likes(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        info = get_post_service().get_like_info(post_id, user_id)
        if info is None:
            return jsonify({"error": "Post not found"}), 404
        return jsonify(info), 200
    except Exception as e:
        logger.error(f"Error fetching likes of post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/likes", methods=["POST"])
@jwt_required()
def api_like_post(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if get_post_service().like_post(post_id, user_id) is None:
            return jsonify({"error": "Post not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error liking post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/likes", methods=["DELETE"])
@jwt_required()
def api_unlike_post(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        result = get_post_service().unlike_post(post_id, user_id)
        if result is None:
            return jsonify({"error": "Post not found"}), 404
        if result is False:
            return jsonify({"error": "Like not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error unliking post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/bookmark", methods=["GET"])
@jwt_required()
def api_get_bookmark(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        is_bookmarked = get_post_service().is_bookmarked(post_id, user_id)
        return jsonify({"isBookmarkedByUser": is_bookmarked}), 200
    except Exception as e:
        logger.error(f"Error fetching bookmark of post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/bookmark", methods=["POST"])
@jwt_required()
def api_bookmark_post(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if get_post_service().bookmark_post(post_id, user_id) is None:
            return jsonify({"error": "Post not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error bookmarking post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/bookmark", methods=["DELETE"])
@jwt_required()
def api_remove_bookmark(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        get_post_service().remove_bookmark(post_id, user_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error removing bookmark of post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/comments", methods=["GET"])
@jwt_required()
def api_get_comments(post_id: int):
    """Comments of a post, paged backwards with ``previousCursor``."""
    try:
        cursor = get_cursor_arg()
        if get_post_service().get_post_owner(post_id) is None:
            return jsonify({"error": "Post not found"}), 404
        return jsonify(get_comment_service().get_comments(post_id, cursor)), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching comments of post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/comments", methods=["POST"])
@jwt_required()
def api_add_comment(post_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        comment = get_comment_service().add_comment(post_id, user_id, data.get("content"))
        if comment is None:
            return jsonify({"error": "Post not found"}), 404
        return jsonify({"comment": comment}), 201
    except ValidationError as e:
        return validation_error_response(e)
    except Exception as e:
        logger.error(f"Error commenting on post {post_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@posts_bp.route("/<int:post_id>/comments/<int:comment_id>", methods=["DELETE"])
@jwt_required()
def api_delete_comment(post_id: int, comment_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        comment_service = get_comment_service()
        comment = comment_service.get_comment(comment_id)
        if not comment or comment["post_id"] != post_id:
            return jsonify({"error": "Comment not found"}), 404
        if comment["user_id"] != user_id and current_user_role(user_id) != "ADMIN":
            return jsonify({"error": "You do not have permission to delete this comment"}), 403
        comment_service.delete_comment(comment_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error deleting comment {comment_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
