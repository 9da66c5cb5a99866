import logging

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id, optional_user_id
from backend.utils.errors import _sanitize_error_message
from backend.utils.services import get_notification_service
from backend.utils.validators import get_cursor_arg

logger = logging.getLogger(__name__)
notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.route("", methods=["GET"])
@jwt_required()
def api_list_notifications():
    """Notifications of the caller, newest first."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_notification_service().get_notifications(user_id, get_cursor_arg())
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching notifications: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@notifications_bp.route("/unread-count", methods=["GET"])
def api_unread_count():
    """Unread count; anonymous callers get 0."""
    try:
        user_id = optional_user_id()
        if user_id is None:
            return jsonify({"unreadCount": 0}), 200
        return jsonify({"unreadCount": get_notification_service().get_unread_count(user_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching unread count: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@notifications_bp.route("/<int:notification_id>/read", methods=["POST"])
@jwt_required()
def api_mark_read(notification_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        notification_service = get_notification_service()
        notification = notification_service.get_notification(notification_id)
        if not notification:
            return jsonify({"error": "Notification not found"}), 404
        if notification["recipient_id"] != user_id:
            return jsonify(
                {"error": "You do not have permission to modify this notification"}
            ), 403
        notification_service.mark_as_read(notification_id, user_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error marking notification {notification_id} read: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@notifications_bp.route("/read-all", methods=["POST"])
@jwt_required()
def api_mark_all_read():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        count = get_notification_service().mark_all_as_read(user_id)
        return jsonify({"success": True, "count": count}), 200
    except Exception as e:
        logger.error(f"Error marking notifications read: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
