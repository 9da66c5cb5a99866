import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id
from backend.utils.errors import _sanitize_error_message
from backend.utils.services import (
    get_application_service,
    get_auth_service,
    get_skill_service,
    get_user_service,
)

logger = logging.getLogger(__name__)
account_bp = Blueprint("account", __name__, url_prefix="/api/account")


def _strip_hash(user: dict) -> dict:
    return {k: v for k, v in user.items() if k != "password_hash"}


@account_bp.route("", methods=["GET"])
@jwt_required()
def api_get_account():
    """Get user account information API endpoint."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        user_data = get_user_service().get_user_by_id(user_id)

        if not user_data:
            return jsonify({"error": "User not found"}), 404

        return jsonify({"user": _strip_hash(user_data)}), 200
    except Exception as e:
        logger.error(f"Error fetching account: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@account_bp.route("", methods=["PATCH"])
@jwt_required()
def api_update_profile():
    """Update name and bio of the caller."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        user_service = get_user_service()
        if not user_service.update_profile(user_id, name=data.get("name"), bio=data.get("bio")):
            return jsonify({"error": "User not found"}), 404
        return jsonify({"user": _strip_hash(user_service.get_user_by_id(user_id))}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error updating profile: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@account_bp.route("/change-password", methods=["POST"])
@jwt_required()
def api_change_password():
    """Change user password API endpoint."""
    try:
        if not request.is_json:
            return jsonify({"error": "Missing JSON in request"}), 400

        user_id = current_user_id()
        user_service = get_user_service()
        user_data = user_service.get_user_by_id(user_id)

        if not user_data:
            return jsonify({"error": "User not found"}), 404

        json_data = request.json
        # Passwords are compared and hashed exactly as sent
        current_password = json_data.get("current_password")
        new_password = json_data.get("new_password")
        confirm_password = json_data.get("confirm_password")

        fields = (current_password, new_password, confirm_password)
        if not all(isinstance(p, str) and p for p in fields):
            return jsonify({"error": "All password fields are required"}), 400

        if new_password != confirm_password:
            return jsonify({"error": "New password and confirm password do not match"}), 400

        auth_service = get_auth_service()
        user = auth_service.authenticate_user(
            username=user_data["username"], password=current_password
        )
        if not user:
            return jsonify({"error": "Current password is incorrect"}), 400

        user_service.update_user_password(user_id, new_password)
        logger.info(f"Password updated successfully for user {user_id}")
        return jsonify({"message": "Password updated successfully"}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error changing password: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@account_bp.route("/skills", methods=["GET"])
@jwt_required()
def api_list_my_skills():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify({"skills": get_skill_service().get_user_skills(user_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching skills: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@account_bp.route("/skills", methods=["POST"])
@jwt_required()
def api_add_my_skill():
    """Attach a skill (by name) to the caller, creating it if needed."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            return jsonify({"error": "Skill name is required"}), 400

        skill_id = get_skill_service().add_user_skill(user_id, name)
        return jsonify({"skill_id": skill_id, "name": name.strip()}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error adding skill: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@account_bp.route("/skills/<int:skill_id>", methods=["DELETE"])
@jwt_required()
def api_remove_my_skill(skill_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if not get_skill_service().remove_user_skill(user_id, skill_id):
            return jsonify({"error": "Skill not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error removing skill {skill_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@account_bp.route("/applications", methods=["GET"])
@jwt_required()
def api_my_applications():
    """Applications submitted by the caller."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        applications = get_application_service().list_for_user(user_id)
        return jsonify({"applications": applications}), 200
    except Exception as e:
        logger.error(f"Error fetching applications: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
