import logging
from datetime import datetime
from functools import wraps

from flask import g, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required, verify_jwt_in_request

from .services import get_user_service

logger = logging.getLogger(__name__)

# Rate limiting storage (in-memory, resets on restart)
_rate_limit_storage: dict[str, list[float]] = {}


def current_user_id() -> int | None:
    """Return the caller's user id from the JWT, or None if there is none."""
    identity = get_jwt_identity()
    if identity is None:
        return None
    return int(identity)


def optional_user_id() -> int | None:
    """User id when a valid token is sent, None for anonymous callers."""
    verify_jwt_in_request(optional=True)
    return current_user_id()


def current_user_role(user_id: int) -> str | None:
    user = get_user_service().get_user_by_id(user_id)
    return user.get("role") if user else None


def rate_limit(max_calls: int = 5, window_seconds: int = 60):
    """Simple rate limiting decorator.

    Args:
        max_calls: Maximum number of calls allowed
        window_seconds: Time window in seconds
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user_id = get_jwt_identity()
            if not user_id:
                return jsonify({"error": "Unauthorized"}), 401

            key = f"{user_id}:{f.__name__}"
            now = datetime.now().timestamp()

            # Drop calls outside the window
            _rate_limit_storage[key] = [
                timestamp
                for timestamp in _rate_limit_storage.get(key, [])
                if now - timestamp < window_seconds
            ]

            if len(_rate_limit_storage[key]) >= max_calls:
                logger.warning(f"Rate limit exceeded for user {user_id} on {f.__name__}")
                return jsonify(
                    {
                        "error": f"Rate limit exceeded. Maximum {max_calls} requests per {window_seconds} seconds."
                    }
                ), 429

            _rate_limit_storage[key].append(now)
            return f(*args, **kwargs)

        return decorated_function

    return decorator


def roles_required(*roles: str):
    """Require an authenticated caller whose role is one of ``roles``.

    The loaded user (without password hash) is stored on ``flask.g.current_user``.
    """

    def decorator(f):
        @wraps(f)
        @jwt_required()
        def decorated_function(*args, **kwargs):
            user_id = current_user_id()
            if user_id is None:
                return jsonify({"error": "Unauthorized"}), 401
            user = get_user_service().get_user_by_id(user_id)
            if not user:
                return jsonify({"error": "Unauthorized"}), 401
            if user.get("role") not in roles:
                logger.warning(f"User {user_id} ({user.get('role')}) denied access to {f.__name__}")
                return jsonify(
                    {"error": "You do not have permission to perform this action"}
                ), 403
            g.current_user = {k: v for k, v in user.items() if k != "password_hash"}
            return f(*args, **kwargs)

        return decorated_function

    return decorator


def admin_required(f):
    """Decorator to require admin role."""
    return roles_required("ADMIN")(f)
