from flask import jsonify

from services.shared.validation import ValidationError

GENERIC_ERROR = "Internal server error"


def _sanitize_error_message(error: Exception) -> str:
    """Sanitize error messages to avoid leaking sensitive information.

    Args:
        error: Exception object

    Returns:
        Sanitized error message safe for client display
    """
    error_str = str(error).lower()

    # Hide database connection strings and driver details
    if "password" in error_str or "connection" in error_str or "database" in error_str:
        return "Database operation failed. Please try again."

    return GENERIC_ERROR


def validation_error_response(error: ValidationError):
    """400 response carrying one message per invalid field."""
    return jsonify({"error": "Validation failed", "fieldErrors": error.field_errors}), 400


def not_found(entity: str):
    return jsonify({"error": f"{entity} not found"}), 404


def forbidden(message: str = "You do not have permission to perform this action"):
    return jsonify({"error": message}), 403
