import logging

from flask import Blueprint, g, jsonify, request

from backend.utils.decorators import admin_required
from backend.utils.errors import _sanitize_error_message
from backend.utils.services import get_user_service
from backend.utils.validators import get_text

logger = logging.getLogger(__name__)
admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.route("/users", methods=["GET"])
@admin_required
def api_list_users():
    """List all users (admin only)."""
    try:
        return jsonify({"users": get_user_service().list_users()}), 200
    except Exception as e:
        logger.error(f"Error listing users: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@admin_bp.route("/users/<int:user_id>/role", methods=["PATCH"])
@admin_required
def api_update_user_role(user_id: int):
    try:
        data = request.get_json(silent=True) or {}
        role = get_text(data, "role").upper()
        if not get_user_service().update_user_role(user_id, role):
            return jsonify({"error": "User not found"}), 404
        logger.info(f"Admin {g.current_user['user_id']} set role of user {user_id} to {role}")
        return jsonify({"success": True, "role": role}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error updating role of user {user_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@admin_bp.route("/users/<int:user_id>/status", methods=["PATCH"])
@admin_required
def api_update_user_status(user_id: int):
    """Approve, reject or suspend an account."""
    try:
        data = request.get_json(silent=True) or {}
        status = get_text(data, "status").upper()
        if not get_user_service().update_user_status(user_id, status):
            return jsonify({"error": "User not found"}), 404
        logger.info(f"Admin {g.current_user['user_id']} set status of user {user_id} to {status}")
        return jsonify({"success": True, "status": status}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error updating status of user {user_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
