"""Flask application factory for the chaptermap JSON API."""

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from chaptermap.config import AlignmentConfig

logger = logging.getLogger(__name__)


def create_app(config: AlignmentConfig | None = None) -> Flask:
    app = Flask(__name__)
    app.config["ALIGNMENT"] = config or AlignmentConfig()
    app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024  # 16 MB of JSON

    from chaptermap.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({"success": False, "error": {"message": "Request too large"}}), 413

    @app.errorhandler(Exception)
    def unexpected_error(error):
        if isinstance(error, HTTPException):
            return jsonify({"success": False, "error": {"message": error.name}}), error.code
        logger.exception("Unhandled error in request")
        return jsonify({
            "success": False,
            "error": {"message": "Internal server error", "details": str(error)},
        }), 500

    return app
