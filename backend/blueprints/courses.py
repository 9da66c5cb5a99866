import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id, current_user_role
from backend.utils.errors import _sanitize_error_message, validation_error_response
from backend.utils.services import get_course_service, get_enrollment_service
from backend.utils.validators import get_cursor_arg, get_text
from services.shared.validation import ValidationError

logger = logging.getLogger(__name__)
courses_bp = Blueprint("courses", __name__, url_prefix="/api/courses")


@courses_bp.route("", methods=["GET"])
@jwt_required()
def api_list_courses():
    """Published courses, newest first."""
    try:
        return jsonify(get_course_service().list_published(get_cursor_arg())), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error fetching courses: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("", methods=["POST"])
@jwt_required()
def api_create_course():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        if current_user_role(user_id) not in current_app.config["COURSE_AUTHOR_ROLES"]:
            return jsonify({"error": "You do not have permission to create courses"}), 403

        data = request.get_json(silent=True) or {}
        course_service = get_course_service()
        course_id = course_service.create_course(user_id, data)
        return jsonify({"course": course_service.get_course(course_id)}), 201
    except ValidationError as e:
        return validation_error_response(e)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error creating course: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("/mine", methods=["GET"])
@jwt_required()
def api_my_courses():
    """Taught courses for professors, enrollments for everyone else."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        role = current_user_role(user_id)
        return jsonify({"courses": get_course_service().get_my_courses(user_id, role)}), 200
    except Exception as e:
        logger.error(f"Error fetching my courses: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("/<int:course_id>", methods=["GET"])
@jwt_required()
def api_get_course(course_id: int):
    try:
        course = get_course_service().get_course(course_id)
        if not course:
            return jsonify({"error": "Course not found"}), 404
        return jsonify({"course": course}), 200
    except Exception as e:
        logger.error(f"Error fetching course {course_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("/<int:course_id>/skills", methods=["PUT"])
@jwt_required()
def api_set_course_skills(course_id: int):
    """Replace the skills of a course (instructor or admin)."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        course_service = get_course_service()
        instructor_id = course_service.get_instructor_id(course_id)
        if instructor_id is None:
            return jsonify({"error": "Course not found"}), 404
        if instructor_id != user_id and current_user_role(user_id) != "ADMIN":
            return jsonify({"error": "You do not have permission to edit this course"}), 403

        data = request.get_json(silent=True) or {}
        skill_ids = course_service.set_course_skills(course_id, data.get("skills"))
        return jsonify({"success": True, "skill_ids": skill_ids}), 200
    except ValidationError as e:
        return validation_error_response(e)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error setting skills of course {course_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("/<int:course_id>/enroll", methods=["POST"])
@jwt_required()
def api_enroll(course_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        result = get_enrollment_service().enroll(course_id, user_id)
        if result is None:
            return jsonify({"error": "Course not found"}), 404
        return jsonify(result), 201 if result["success"] else 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error enrolling in course {course_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("/<int:course_id>/enrollment", methods=["GET"])
@jwt_required()
def api_is_enrolled(course_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        return jsonify({"isEnrolled": get_enrollment_service().is_enrolled(course_id, user_id)}), 200
    except Exception as e:
        logger.error(f"Error checking enrollment in course {course_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("/<int:course_id>/enrollments", methods=["GET"])
@jwt_required()
def api_list_enrollments(course_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        instructor_id = get_course_service().get_instructor_id(course_id)
        if instructor_id is None:
            return jsonify({"error": "Course not found"}), 404
        if instructor_id != user_id and current_user_role(user_id) != "ADMIN":
            return jsonify(
                {"error": "You do not have permission to view enrollments for this course"}
            ), 403
        return jsonify({"enrollments": get_enrollment_service().list_enrollments(course_id)}), 200
    except Exception as e:
        logger.error(f"Error fetching enrollments of course {course_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@courses_bp.route("/enrollments/<int:enrollment_id>", methods=["PATCH"])
@jwt_required()
def api_update_enrollment_status(enrollment_id: int):
    """Only the professor teaching the course may change an enrollment."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        data = request.get_json(silent=True) or {}
        status = get_text(data, "status").upper()

        enrollment_service = get_enrollment_service()
        enrollment = enrollment_service.get_enrollment_by_id(enrollment_id)
        if not enrollment:
            return jsonify({"error": "Enrollment not found"}), 404
        if current_user_role(user_id) != "PROFESSOR" or enrollment["instructor_id"] != user_id:
            return jsonify(
                {"error": "You do not have permission to update this enrollment"}
            ), 403

        enrollment_service.update_status(enrollment_id, status)
        return jsonify({"success": True, "status": status}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error updating enrollment {enrollment_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
