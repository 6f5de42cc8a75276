"""
FLASK APP MAIN ENTRY POINT - TOTP API SERVER
============================================

Builds the Flask app, enables CORS and registers the TOTP routes.

MAIN FEATURES
- One blueprint (totp_backend/routes.py) serving GET/POST /totp, /api and /health
- CORS enabled on every response so browser frontends on any origin can call it
- Static page at / (static/index.html) to try the API from a browser
- JSON error bodies; unexpected errors are logged, never echoed to the client
"""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from totp_backend.config import Config
from totp_backend.routes import totp_bp

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the root logger unless one is already installed."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"error": e.name, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e):
        logger.exception("Unhandled error while processing request")
        return jsonify({
            "error": "Internal server error",
            "message": "An unexpected error occurred",
        }), 500


def create_app(config_object=None) -> Flask:
    """
    Application factory.

    Arguments:
        config_object: class or import path passed to app.config.from_object
            (default: totp_backend.config.Config)
    """
    app = Flask(__name__,
                static_folder=os.path.join(os.path.dirname(__file__), 'static'))
    app.config.from_object(config_object or Config)
    app.json.sort_keys = False

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Cross-Origin Resource Sharing: wildcard origin on every response,
    # including error responses and preflight (OPTIONS) requests
    origins = app.config.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app,
         origins=origins,
         allow_headers=app.config.get("CORS_ALLOW_HEADERS"),
         send_wildcard=origins == "*")

    app.register_blueprint(totp_bp)
    register_error_handlers(app)

    @app.route('/')
    def index():
        return app.send_static_file('index.html')

    return app


app = create_app()


def main():
    """Run the Flask development server with HOST/PORT/DEBUG from the config."""
    logger.info("TOTP API server running at http://%s:%s",
                app.config["HOST"], app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])


if __name__ == '__main__':
    main()
