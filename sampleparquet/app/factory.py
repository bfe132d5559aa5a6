from __future__ import annotations

import logging
from flask import Flask, current_app, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from sampleparquet.app.config import Config
from sampleparquet.app.extensions import db, migrate, cors
from sampleparquet.app.common.errors import ApiError
from sampleparquet.app.common.request_context import current_request_id, init_request_id
from sampleparquet.app.api.register import register_api_blueprints
from sampleparquet.app.cli import cli_bp
from sampleparquet.app.ui import ui_bp
from sampleparquet.navigation.base_path import normalize_base_path, strip_base_path


def _wants_json() -> bool:
    path = strip_base_path(request.path, current_app.config["BASE_PATH"])
    return path == "/api" or path.startswith("/api/")


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)

    # Basic logging
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    prefix = normalize_base_path(app.config["BASE_PATH"])

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(app, resources={rf"{prefix}/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}})

    @app.before_request
    def _before_request():
        init_request_id()

    @app.after_request
    def _after_request(response):
        rid = current_request_id()
        if rid:
            response.headers["X-Request-ID"] = rid
        return response

    # Health endpoint
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    # API under <base>/api, pages under <base>
    register_api_blueprints(app, prefix)
    app.register_blueprint(ui_bp, url_prefix=prefix or None)

    # CLI (flask seed, flask create-admin)
    app.register_blueprint(cli_bp)

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(current_request_id())), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        if not _wants_json():
            return render_template("pages/error.html", code=err.code, message=err.description), err.code or 500

        # Normalize Werkzeug errors into our JSON shape
        payload = {
            "error": {
                "code": "http_error",
                "message": err.description,
                "details": {"name": err.name},
                "request_id": current_request_id(),
            }
        }
        return jsonify(payload), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        db.session.rollback()
        if not _wants_json():
            return render_template("pages/error.html", code=500, message="Unexpected server error"), 500

        payload = {
            "error": {
                "code": "internal_error",
                "message": "Internal server error",
                "details": {},
                "request_id": current_request_id(),
            }
        }
        return jsonify(payload), 500

    return app
