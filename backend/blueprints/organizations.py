import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.utils.decorators import current_user_id
from backend.utils.errors import _sanitize_error_message
from backend.utils.services import get_organization_service, get_user_service

logger = logging.getLogger(__name__)
organizations_bp = Blueprint("organizations", __name__, url_prefix="/api/organizations")

OWNER_ONLY = "Only the organization owner can perform this action"


@organizations_bp.route("/mine", methods=["GET"])
@jwt_required()
def api_my_organization():
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        organization = get_organization_service().get_organization_for_user(user_id)
        if not organization:
            return jsonify({"error": "Organization not found"}), 404
        return jsonify({"organization": organization}), 200
    except Exception as e:
        logger.error(f"Error fetching organization: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@organizations_bp.route("/<int:organization_id>/members", methods=["GET"])
@jwt_required()
def api_list_members(organization_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        organization_service = get_organization_service()
        if not organization_service.is_owner(organization_id, user_id):
            return jsonify({"error": OWNER_ONLY}), 403
        return jsonify({"members": organization_service.list_members(organization_id)}), 200
    except Exception as e:
        logger.error(f"Error listing members of {organization_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@organizations_bp.route("/<int:organization_id>/members", methods=["POST"])
@jwt_required()
def api_add_member(organization_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        organization_service = get_organization_service()
        if not organization_service.is_owner(organization_id, user_id):
            return jsonify({"error": OWNER_ONLY}), 403
        data = request.get_json(silent=True) or {}
        member_user_id = data.get("user_id")
        if not isinstance(member_user_id, int) or isinstance(member_user_id, bool):
            return jsonify({"error": "user_id is required"}), 400
        if not get_user_service().get_user_by_id(member_user_id):
            return jsonify({"error": "User not found"}), 404
        member_id = organization_service.add_member(organization_id, member_user_id)
        if member_id is None:
            return jsonify({"error": "User is already a member"}), 400
        return jsonify({"member_id": member_id}), 201
    except Exception as e:
        logger.error(f"Error adding member to {organization_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@organizations_bp.route("/<int:organization_id>/members/<int:member_id>", methods=["PATCH"])
@jwt_required()
def api_assign_member_faculty(organization_id: int, member_id: int):
    """Attach a member to a faculty (``faculty_id: null`` detaches)."""
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        organization_service = get_organization_service()
        if not organization_service.is_owner(organization_id, user_id):
            return jsonify({"error": OWNER_ONLY}), 403
        data = request.get_json(silent=True) or {}
        faculty_id = data.get("faculty_id")
        if faculty_id is not None and (not isinstance(faculty_id, int) or isinstance(faculty_id, bool)):
            return jsonify({"error": "faculty_id must be an integer or null"}), 400
        if not organization_service.assign_member_to_faculty(organization_id, member_id, faculty_id):
            return jsonify({"error": "Member not found"}), 404
        return jsonify({"success": True}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error assigning member {member_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@organizations_bp.route("/<int:organization_id>/schools", methods=["GET"])
@jwt_required()
def api_list_schools(organization_id: int):
    try:
        return jsonify({"schools": get_organization_service().list_schools(organization_id)}), 200
    except Exception as e:
        logger.error(f"Error listing schools of {organization_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@organizations_bp.route("/<int:organization_id>/schools", methods=["POST"])
@jwt_required()
def api_create_school(organization_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        organization_service = get_organization_service()
        if not organization_service.is_owner(organization_id, user_id):
            return jsonify({"error": OWNER_ONLY}), 403
        data = request.get_json(silent=True) or {}
        school_id = organization_service.create_school(
            organization_id, data.get("name"), data.get("description")
        )
        return jsonify({"school_id": school_id}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error creating school in {organization_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@organizations_bp.route("/schools/<int:school_id>/faculties", methods=["GET"])
@jwt_required()
def api_list_faculties(school_id: int):
    try:
        organization_service = get_organization_service()
        if not organization_service.get_school(school_id):
            return jsonify({"error": "School not found"}), 404
        return jsonify({"faculties": organization_service.list_faculties(school_id)}), 200
    except Exception as e:
        logger.error(f"Error listing faculties of school {school_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500


@organizations_bp.route("/schools/<int:school_id>/faculties", methods=["POST"])
@jwt_required()
def api_create_faculty(school_id: int):
    try:
        user_id = current_user_id()
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        organization_service = get_organization_service()
        school = organization_service.get_school(school_id)
        if not school:
            return jsonify({"error": "School not found"}), 404
        if not organization_service.is_owner(school["organization_id"], user_id):
            return jsonify({"error": OWNER_ONLY}), 403
        data = request.get_json(silent=True) or {}
        faculty_id = organization_service.create_faculty(
            school_id, data.get("name"), data.get("description")
        )
        return jsonify({"faculty_id": faculty_id}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"Error creating faculty in school {school_id}: {e}", exc_info=True)
        return jsonify({"error": _sanitize_error_message(e)}), 500
