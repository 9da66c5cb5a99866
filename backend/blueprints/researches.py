import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id, current_user_role, rate_limit
from backend.utils.errors import _sanitize_error_message, validation_error_response
from backend.utils.services import get_research_service
from backend.utils.validators import get_cursor_arg
from services.shared.validation import ValidationError

logger = logging.getLogger(__name__)
researches_bp = Blueprint("researches", __name__, url_prefix="/api/researches")


@researches_bp.route("", methods=["GET"])
@jwt_required()
def api_list_researches():
    """Researches list API endpoint with an optional ``q`` title filter."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_research_service().list_researches(
            viewer_id=user_id, cursor=get_cursor_arg(), query=request.args.get("q")
        )
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching researches: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("", methods=["POST"])
@jwt_required()
@rate_limit(max_calls=10, window_seconds=60)
def api_create_research():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        research_service = get_research_service()
        research_id = research_service.create_research(user_id, data)
        return jsonify({"research": research_service.get_research(research_id, user_id)}), 201
    except ValidationError as e:
        return validation_error_response(e)
    except Exception as e:
        logger.error(f"Error creating research: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/mine", methods=["GET"])
@jwt_required()
def api_my_researches():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_research_service().list_user_researches(user_id, user_id, get_cursor_arg())
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching own researches: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/saved", methods=["GET"])
@jwt_required()
def api_saved_researches():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_research_service().list_saved_researches(user_id, get_cursor_arg())
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching saved researches: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>", methods=["GET"])
@jwt_required()
def api_get_research(research_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        research = get_research_service().get_research(research_id, user_id)
        if not research:
            return jsonify({"error": "Research not found"}), 404
        return jsonify({"research": research}), 200
    except Exception as e:
        logger.error(f"Error fetching research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>", methods=["DELETE"])
@jwt_required()
def api_delete_research(research_id: int):
    """Authors delete their own research; admins may delete any."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        research_service = get_research_service()
        owner_id = research_service.get_research_owner(research_id)
        if owner_id is None:
            return jsonify({"error": "Research not found"}), 404
        if owner_id != user_id and current_user_role(user_id) != "ADMIN":
            return jsonify({"error": "You do not have permission to delete this research"}), 403
        research_service.delete_research(research_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error deleting research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>/likes", methods=["GET"])
@jwt_required()
def api_get_research_likes(research_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        info = get_research_service().get_like_info(research_id, user_id)
        if info is None:
            return jsonify({"error": "Research not found"}), 404
        return jsonify(info), 200
    except Exception as e:
        logger.error(f"Error fetching likes of research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>/likes", methods=["POST"])
@jwt_required()
def api_like_research(research_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if get_research_service().like_research(research_id, user_id) is None:
            return jsonify({"error": "Research not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error liking research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>/likes", methods=["DELETE"])
@jwt_required()
def api_unlike_research(research_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        result = get_research_service().unlike_research(research_id, user_id)
        if result is None:
            return jsonify({"error": "Research not found"}), 404
        if result is False:
            return jsonify({"error": "Like not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error unliking research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>/save", methods=["GET"])
@jwt_required()
def api_get_research_saved_state(research_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        saved = get_research_service().is_saved(research_id, user_id)
        return jsonify({"isSaveResearchByUser": saved}), 200
    except Exception as e:
        logger.error(f"Error fetching saved state of research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>/save", methods=["POST"])
@jwt_required()
def api_save_research(research_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if get_research_service().save_research(research_id, user_id) is None:
            return jsonify({"error": "Research not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error saving research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@researches_bp.route("/<int:research_id>/save", methods=["DELETE"])
@jwt_required()
def api_unsave_research(research_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        get_research_service().unsave_research(research_id, user_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error unsaving research {research_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
