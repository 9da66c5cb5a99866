import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id
from backend.utils.errors import _sanitize_error_message, validation_error_response
from backend.utils.services import get_course_approval_service
from backend.utils.validators import get_cursor_arg, parse_id
from services.courses import ApprovalConflict
from services.shared.validation import ValidationError

logger = logging.getLogger(__name__)
course_approvals_bp = Blueprint(
    "course_approvals", __name__, url_prefix="/api/course-approvals"
)


@course_approvals_bp.route("", methods=["GET"])
@jwt_required()
def api_list_approvals():
    """Approvals assigned to the caller, optionally filtered by ``status``."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        status = (request.args.get("status") or "").strip().upper() or None
        page = get_course_approval_service().list_for_reviewer(
            user_id, status=status, cursor=get_cursor_arg()
        )
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching course approvals: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@course_approvals_bp.route("", methods=["POST"])
@jwt_required()
def api_submit_course():
    """Submit a course for review."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        if not data.get("courseId"):
            return jsonify({"error": "Course ID is required"}), 400
        course_id = parse_id(data["courseId"], "courseId")

        approval = get_course_approval_service().submit(course_id, user_id)
        if approval is None:
            return jsonify({"error": "Course not found"}), 404
        return jsonify(
            {"message": "Course submitted for approval successfully", "approval": approval}
        ), 201
    except ApprovalConflict as e:
        return jsonify({"error": str(e)}), 409
    except PermissionError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error submitting course for approval: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@course_approvals_bp.route("/<int:approval_id>", methods=["GET"])
@jwt_required()
def api_get_approval(approval_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        approval = get_course_approval_service().get_approval(approval_id, user_id)
        if approval is None:
            return jsonify({"error": "Course approval not found"}), 404
        return jsonify({"approval": approval}), 200
    except PermissionError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        logger.error(f"Error fetching course approval {approval_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@course_approvals_bp.route("/<int:approval_id>", methods=["PATCH"])
@jwt_required()
def api_decide_approval(approval_id: int):
    """Publish, reject or request revision of a course under review."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        approval = get_course_approval_service().decide(approval_id, user_id, data)
        if approval is None:
            return jsonify({"error": "Course approval not found"}), 404
        return jsonify(
            {
                "message": f"Course {approval['status']} processed successfully",
                "approval": approval,
            }
        ), 200
    except ValidationError as e:
        return validation_error_response(e)
    except ApprovalConflict as e:
        return jsonify({"error": str(e)}), 409
    except PermissionError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        logger.error(f"Error deciding course approval {approval_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
