import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id, current_user_role
from backend.utils.errors import _sanitize_error_message, validation_error_response
from backend.utils.services import get_application_service, get_job_service
from backend.utils.validators import get_cursor_arg, get_text
from services.jobs import parse_job_types
from services.shared.validation import ValidationError

logger = logging.getLogger(__name__)
jobs_bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")


def _can_manage_job(job_owner_id: int, user_id: int) -> bool:
    return job_owner_id == user_id or current_user_role(user_id) == "ADMIN"


@jobs_bp.route("", methods=["GET"])
@jwt_required()
def api_list_jobs():
    """Jobs list API endpoint with optional ``q`` and ``type`` filters."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        page = get_job_service().list_jobs(
            viewer_id=user_id,
            cursor=get_cursor_arg(),
            query=request.args.get("q"),
            job_types=parse_job_types(request.args.get("type")),
        )
        return jsonify(page), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching jobs: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("", methods=["POST"])
@jwt_required()
def api_create_job():
    """Create a job posting (organizations and admins)."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if current_user_role(user_id) not in current_app.config["JOB_POSTER_ROLES"]:
            return jsonify({"error": "You do not have permission to post jobs"}), 403

        data = request.get_json(silent=True) or {}
        job_service = get_job_service()
        job_id = job_service.create_job(user_id, data)
        return jsonify({"job": job_service.get_job(job_id, user_id)}), 201
    except ValidationError as e:
        return validation_error_response(e)
    except Exception as e:
        logger.error(f"Error creating job: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/saved", methods=["GET"])
@jwt_required()
def api_saved_jobs():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify(get_job_service().list_saved_jobs(user_id, get_cursor_arg())), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching saved jobs: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>", methods=["GET"])
@jwt_required()
def api_get_job(job_id: int):
    """Get job details API endpoint."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        job = get_job_service().get_job(job_id, user_id)
        if not job:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        return jsonify({"job": job}), 200
    except Exception as e:
        logger.error(f"Error fetching job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>", methods=["DELETE"])
@jwt_required()
def api_delete_job(job_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        job_service = get_job_service()
        owner_id = job_service.get_job_owner(job_id)
        if owner_id is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        if not _can_manage_job(owner_id, user_id):
            return jsonify({"error": "You do not have permission to delete this job"}), 403
        job_service.delete_job(job_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error deleting job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/likes", methods=["GET"])
@jwt_required()
def api_get_job_likes(job_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        info = get_job_service().get_like_info(job_id, user_id)
        if info is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        return jsonify(info), 200
    except Exception as e:
        logger.error(f"Error fetching likes of job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/likes", methods=["POST"])
@jwt_required()
def api_like_job(job_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if get_job_service().like_job(job_id, user_id) is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error liking job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/likes", methods=["DELETE"])
@jwt_required()
def api_unlike_job(job_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        result = get_job_service().unlike_job(job_id, user_id)
        if result is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        if result is False:
            return jsonify({"error": "Like not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error unliking job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/save", methods=["GET"])
@jwt_required()
def api_get_saved_state(job_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify({"isBookmarkedByUser": get_job_service().is_saved(job_id, user_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching saved state of job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/save", methods=["POST"])
@jwt_required()
def api_save_job(job_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if get_job_service().save_job(job_id, user_id) is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error saving job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/save", methods=["DELETE"])
@jwt_required()
def api_unsave_job(job_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        get_job_service().unsave_job(job_id, user_id)
        return jsonify({"success": True}), 200
    except Exception as e:
        logger.error(f"Error unsaving job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/apply", methods=["POST"])
@jwt_required()
def api_apply_to_job(job_id: int):
    """Apply to a job; a second application returns success: false."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        result = get_application_service().apply(job_id, user_id)
        if result is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        return jsonify(result), 201 if result["success"] else 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error applying to job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/<int:job_id>/applications", methods=["GET"])
@jwt_required()
def api_list_job_applications(job_id: int):
    """Applications for a job (poster or admin)."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        owner_id = get_job_service().get_job_owner(job_id)
        if owner_id is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        if not _can_manage_job(owner_id, user_id):
            return jsonify(
                {"error": "You do not have permission to view applications for this job"}
            ), 403
        return jsonify({"applications": get_application_service().list_for_job(job_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching applications of job {job_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@jobs_bp.route("/applications/<int:application_id>", methods=["PATCH"])
@jwt_required()
def api_update_application_status(application_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        status = get_text(data, "status").lower()

        application_service = get_application_service()
        application = application_service.get_application(application_id)
        if not application:
            return jsonify({"error": "Application not found"}), 404
        if not _can_manage_job(application["job_owner_id"], user_id):
            return jsonify(
                {"error": "You do not have permission to update this application"}
            ), 403

        application_service.update_status(application_id, status)
        return jsonify({"success": True, "status": status}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error updating application {application_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
