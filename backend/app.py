import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from backend.blueprints.account import account_bp
from backend.blueprints.admin import admin_bp
from backend.blueprints.auth import auth_bp
from backend.blueprints.course_approvals import course_approvals_bp
from backend.blueprints.courses import courses_bp
from backend.blueprints.follows import follows_bp
from backend.blueprints.jobs import jobs_bp
from backend.blueprints.matches import matches_bp
from backend.blueprints.notifications import notifications_bp
from backend.blueprints.organizations import organizations_bp
from backend.blueprints.posts import posts_bp
from backend.blueprints.researches import researches_bp
from backend.blueprints.system import system_bp
from backend.blueprints.users import users_bp
from backend.config import Config

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    """Application factory function."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Initialize JWT
    jwt = JWTManager(app)

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        logger.error(f"Invalid token error: {error}")
        return jsonify({"error": f"Invalid token: {error}"}), 422

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({"error": "Missing authorization header"}), 401

    # Initialize CORS
    CORS(
        app,
        origins=app.config["CORS_ORIGINS"],
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
    )

    # Register Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(posts_bp)
    app.register_blueprint(jobs_bp)
    app.register_blueprint(matches_bp)
    app.register_blueprint(courses_bp)
    app.register_blueprint(course_approvals_bp)
    app.register_blueprint(follows_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(organizations_bp)
    app.register_blueprint(researches_bp)
    app.register_blueprint(system_bp)

    @app.errorhandler(404)
    def not_found_handler(error):
        return jsonify({"error": "Not found"}), 404

    return app


app = create_app()

if __name__ == "__main__":
    debug = os.getenv("ENVIRONMENT", "development") == "development"
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug, use_reloader=debug)
