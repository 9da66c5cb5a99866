import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id, current_user_role
from backend.utils.errors import _sanitize_error_message
from backend.utils.services import get_job_matcher
from backend.utils.validators import parse_id

logger = logging.getLogger(__name__)
matches_bp = Blueprint("matches", __name__, url_prefix="/api/job-matches")


@matches_bp.route("", methods=["GET"])
@jwt_required()
def api_job_match():
    """Match of the calling student against one job (``?jobId=``)."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if current_user_role(user_id) != "STUDENT":
            return jsonify({"error": "Only students can have skill matches"}), 403

        raw_job_id = request.args.get("jobId")
        if not raw_job_id:
            return jsonify({"error": "Job ID is required"}), 400
        job_id = parse_id(raw_job_id, "jobId")

        match = get_job_matcher().calculate_job_match(user_id, job_id)
        if match is None:
            return jsonify({"error": f"Job {job_id} not found"}), 404
        return jsonify(match), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error calculating job match: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@matches_bp.route("/top", methods=["GET"])
@jwt_required()
def api_top_matches():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if current_user_role(user_id) != "STUDENT":
            return jsonify({"error": "Only students can have skill matches"}), 403
        limit = request.args.get("limit", default=5, type=int)
        return jsonify({"matches": get_job_matcher().get_top_matches(user_id, limit=limit)}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching top matches: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
