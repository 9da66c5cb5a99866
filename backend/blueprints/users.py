import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id
from backend.utils.errors import _sanitize_error_message
from backend.utils.services import get_post_service, get_skill_service, get_user_service
from backend.utils.validators import get_cursor_arg

logger = logging.getLogger(__name__)
users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("/<username>", methods=["GET"])
@jwt_required()
def api_get_user(username: str):
    """Public profile with follower, following and post counts."""
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        profile = get_user_service().get_public_profile(username, viewer_id)
        if not profile:
            return jsonify({"error": "User not found"}), 404
        return jsonify({"user": profile}), 200
    except Exception as e:
        logger.error(f"Error fetching user {username}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@users_bp.route("/<username>/posts", methods=["GET"])
@jwt_required()
def api_get_user_posts(username: str):
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        cursor = get_cursor_arg()
        user = get_user_service().get_user_by_username(username)
        if not user:
            return jsonify({"error": "User not found"}), 404
        page = get_post_service().get_user_posts(user["user_id"], viewer_id, cursor)
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching posts of {username}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@users_bp.route("/<username>/skills", methods=["GET"])
@jwt_required()
def api_get_user_skills(username: str):
    try:
        user = get_user_service().get_user_by_username(username)
        if not user:
            return jsonify({"error": "User not found"}), 404
        return jsonify({"skills": get_skill_service().get_user_skills(user["user_id"])}), 200
    except Exception as e:
        logger.error(f"Error fetching skills of {username}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@users_bp.route("/skills/search", methods=["GET"])
@jwt_required()
def api_search_skills():
    """Search the skill catalogue by name fragment."""
    try:
        limit = request.args.get("limit", default=20, type=int)
        skills = get_skill_service().search_skills(request.args.get("q"), limit=limit)
        return jsonify({"skills": skills}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error searching skills: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
