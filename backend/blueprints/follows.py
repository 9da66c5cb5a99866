import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id, rate_limit
from backend.utils.errors import _sanitize_error_message
from backend.utils.services import get_follow_service
from services.social import FollowRequestNotFound

logger = logging.getLogger(__name__)
follows_bp = Blueprint("follows", __name__, url_prefix="/api/follows")


@follows_bp.route("/<int:user_id>", methods=["GET"])
@jwt_required()
def api_follow_info(user_id: int):
    """Follower count of a user and whether the caller follows them."""
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify(get_follow_service().get_follow_info(user_id, viewer_id)), 200
    except Exception as e:
        logger.error(f"Error fetching follow info of user {user_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/<int:user_id>", methods=["POST"])
@jwt_required()
def api_follow(user_id: int):
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if get_follow_service().follow(viewer_id, user_id) is None:
            return jsonify({"error": "User not found"}), 404
        return jsonify({"success": True}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error following user {user_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/<int:user_id>", methods=["DELETE"])
@jwt_required()
def api_unfollow(user_id: int):
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        get_follow_service().unfollow(viewer_id, user_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error unfollowing user {user_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/<int:user_id>/followers", methods=["GET"])
@jwt_required()
def api_user_followers(user_id: int):
    try:
        return jsonify({"users": get_follow_service().get_followers(user_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching followers of user {user_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/<int:user_id>/following", methods=["GET"])
@jwt_required()
def api_user_following(user_id: int):
    try:
        return jsonify({"users": get_follow_service().get_following(user_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching following of user {user_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/followers", methods=["GET"])
@jwt_required()
def api_my_followers():
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify({"users": get_follow_service().get_followers(viewer_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching followers: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/following", methods=["GET"])
@jwt_required()
def api_my_following():
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify({"users": get_follow_service().get_following(viewer_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching following: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/suggestions", methods=["GET"])
@jwt_required()
def api_follow_suggestions():
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        limit = request.args.get("limit", default=10, type=int)
        return jsonify({"users": get_follow_service().get_suggestions(viewer_id, limit)}), 200
    except Exception as e:
        logger.error(f"Error fetching suggestions: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/requests", methods=["POST"])
@jwt_required()
@rate_limit(max_calls=20, window_seconds=60)
def api_send_follow_request():
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        target_id = data.get("target_id")
        if not isinstance(target_id, int) or isinstance(target_id, bool):
            return jsonify({"error": "target_id is required"}), 400

        request_id = get_follow_service().send_follow_request(
            viewer_id, target_id, data.get("message")
        )
        if request_id is None:
            return jsonify({"error": "User not found"}), 404
        return jsonify({"success": True, "request_id": request_id}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error sending follow request: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/requests", methods=["GET"])
@jwt_required()
def api_pending_follow_requests():
    """Pending requests received by the caller."""
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify({"requests": get_follow_service().get_pending_requests(viewer_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching follow requests: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/requests/sent", methods=["GET"])
@jwt_required()
def api_sent_follow_requests():
    try:
        viewer_id = current_user_id()
        if viewer_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify({"requests": get_follow_service().get_sent_requests(viewer_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching sent follow requests: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


def _respond(action: str, request_id: int):
    viewer_id = current_user_id()
    if viewer_id is None:
        return jsonify({"error": "Unauthorized"}), 401
    follow_service = get_follow_service()
    handlers = {
        "accept": follow_service.accept_request,
        "reject": follow_service.reject_request,
        "cancel": follow_service.cancel_request,
    }
    try:
        handlers[action](request_id, viewer_id)
        return jsonify({"success": True}), 200
    except FollowRequestNotFound:
        return jsonify({"error": "Follow request not found"}), 404
    except PermissionError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@follows_bp.route("/requests/<int:request_id>/accept", methods=["POST"])
@jwt_required()
def api_accept_follow_request(request_id: int):
    try:
        return _respond("accept", request_id)
    except Exception as e:
        logger.error(f"Error accepting follow request {request_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/requests/<int:request_id>/reject", methods=["POST"])
@jwt_required()
def api_reject_follow_request(request_id: int):
    try:
        return _respond("reject", request_id)
    except Exception as e:
        logger.error(f"Error rejecting follow request {request_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@follows_bp.route("/requests/<int:request_id>", methods=["DELETE"])
@jwt_required()
def api_cancel_follow_request(request_id: int):
    try:
        return _respond("cancel", request_id)
    except Exception as e:
        logger.error(f"Error cancelling follow request {request_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
