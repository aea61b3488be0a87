import logging
import os
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify, redirect, render_template, request
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.config import config
from app.extensions import db, ma, jwt, migrate, cors, limiter
from app.filters import register_filters
from app.services.access import Redirect, decide
from app.services.errors import ServiceError
from app.services.profiles import profile_exists
from app.services.session import csrf_value, refresh_session_cookie, resolve_session
from app.utils.decorators import wants_json

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(stream)

    log_file = app.config.get("LOG_FILE")
    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        root.addHandler(file_handler)

    app.logger.setLevel(level)


def register_request_gate(app):
    @app.before_request
    def gate():
        # Static assets are never gated
        if request.endpoint == "static" or request.path.startswith(app.static_url_path + "/"):
            return None

        account_id = resolve_session()
        decision = decide(
            request.path,
            account_id is not None,
            lambda: profile_exists(account_id),
        )
        if isinstance(decision, Redirect):
            return redirect(decision.target)
        return None

    @app.after_request
    def refresh_session(response):
        return refresh_session_cookie(response)

    @app.context_processor
    def inject_csrf():
        return dict(csrf_token=csrf_value)


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(err):
        if wants_json():
            return jsonify(err.to_dict()), err.status_code
        return render_template("error.html", message=err.message, status=err.status_code), err.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(err):
        if wants_json():
            return jsonify({"msg": "Invalid input", "errors": err.messages}), 400
        return render_template("error.html", message="Invalid input", errors=err.messages, status=400), 400

    @app.errorhandler(404)
    def not_found(err):
        if wants_json():
            return jsonify({"msg": "Not found"}), 404
        return render_template("error.html", message="Page not found", status=404), 404

    @app.errorhandler(429)
    def rate_limited(err):
        return jsonify({"msg": "Too many requests, try again later"}), 429

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err):
        db.session.rollback()
        app.logger.exception("Unhandled storage error on %s %s", request.method, request.path)
        return server_error(err)

    @app.errorhandler(500)
    def server_error(err):
        if wants_json():
            return jsonify({"msg": "Server error"}), 500
        return render_template("error.html", message="Server error", status=500), 500


def create_app(config_name=None):
    app = Flask(__name__)
    config_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config[config_name])

    configure_logging(app)

    # Extensions
    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors.init_app(app, resources={r"/api/*": {
        "origins": app.config["CORS_ORIGINS"],
        "allow_headers": ["Content-Type", "X-CSRF-TOKEN"],
        "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        "supports_credentials": True,
    }})

    register_request_gate(app)
    register_error_handlers(app)
    register_filters(app)

    # Blueprints
    from app.routes.home import home_bp
    from app.routes.auth import auth_bp
    from app.routes.dashboard import dashboard_bp
    from app.routes.profile import profile_bp
    from app.routes.coach import coach_bp
    from app.routes.player import athlete_bp
    from app.routes.notifications import notifications_bp
    from app.routes.calendar import calendar_bp
    from app.routes.events import events_bp

    app.register_blueprint(home_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(coach_bp)
    app.register_blueprint(athlete_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(calendar_bp)
    app.register_blueprint(events_bp)

    app.logger.info("Application created with %s configuration", config_name)
    return app
