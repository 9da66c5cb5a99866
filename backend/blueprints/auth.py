import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import create_access_token

from backend.utils.errors import _sanitize_error_message
from backend.utils.services import get_auth_service
from backend.utils.validators import get_text
from services.auth.user_service import MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)
auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _public_user(user: dict) -> dict:
    return {
        "id": user["user_id"],
        "username": user["username"],
        "email": user["email"],
        "name": user.get("name"),
        "role": user["role"],
        "status": user["status"],
    }


@auth_bp.route("/register", methods=["POST"])
def api_register():
    """Register a new user via API."""
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"error": "No data provided"}), 400

        username = get_text(data, "username")
        email = get_text(data, "email")
        password = data.get("password") or ""
        role = (get_text(data, "role") or "STUDENT").upper()

        if not isinstance(password, str):
            return jsonify({"error": "password must be a string"}), 400
        if not all([username, email, password]):
            return jsonify({"error": "Username, email, and password are required"}), 400
        if len(password) < MIN_PASSWORD_LENGTH:
            return jsonify(
                {"error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"}
            ), 400

        auth_service = get_auth_service()
        user_id = auth_service.register_user(
            username,
            email,
            password,
            role=role,
            name=data.get("name"),
            institution=data.get("institution"),
        )

        # Create access token for immediate login
        access_token = create_access_token(identity=str(user_id))
        return (
            jsonify(
                {
                    "message": "User registered successfully",
                    "user_id": user_id,
                    "access_token": access_token,
                    "requires_approval": role in ("INSTITUTION", "ORGANIZATION"),
                }
            ),
            201,
        )

    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Registration error: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@auth_bp.route("/login", methods=["POST"])
def api_login():
    """Login a user via API."""
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"error": "No data provided"}), 400

        username_or_email = data.get("username") or data.get("email")
        password = data.get("password")

        if not all(isinstance(v, str) and v for v in (username_or_email, password)):
            return jsonify({"error": "Username/email and password are required"}), 400

        auth_service = get_auth_service()
        user = auth_service.authenticate_user(username_or_email, password)

        if not user:
            return jsonify({"error": "Invalid username or password"}), 401

        blocked = auth_service.login_block_reason(user)
        if blocked:
            return jsonify({"error": blocked}), 403

        access_token = create_access_token(identity=str(user["user_id"]))
        return (
            jsonify(
                {
                    "message": "Login successful",
                    "access_token": access_token,
                    "user": _public_user(user),
                }
            ),
            200,
        )

    except Exception as e:
        logger.error(f"Login error: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
