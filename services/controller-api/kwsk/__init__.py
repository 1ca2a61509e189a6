"""Flask application factory for KWSK Controller API."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Optional

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from kwsk.config import Config
from kwsk.extensions import init_extensions

if TYPE_CHECKING:
    import httpx

    from kwsk.services.platform import KnativeClient

logger = logging.getLogger(__name__)


def create_app(
    config: type[Config] | None = None,
    platform: Optional[KnativeClient] = None,
    http_client: Optional[httpx.Client] = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Configuration class to use. Defaults to Config from environment.
        platform: Knative client to use instead of one built from kube config.
        http_client: HTTP client for action hosts.

    Returns:
        Configured Flask application instance.

    Raises:
        ConfigurationError: If mandatory configuration is missing.
    """
    if config is None:
        config = Config

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    # Fail at startup, not at the first invocation
    config.validate()

    app = Flask(__name__)
    app.config.from_object(config)

    # Initialize extensions
    init_extensions(app, platform=platform, http_client=http_client)

    # Enable CORS
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "expose_headers": ["Content-Type", "Authorization"],
            "max_age": 3600,
        }
    })

    # Register API blueprints
    from kwsk.api import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    # Request logging middleware
    @app.before_request
    def log_request_info() -> None:
        """Log request information before processing."""
        g.start_time = time.time()
        logger.info(
            f"Request: {request.method} {request.path} "
            f"from {request.remote_addr}"
        )

    @app.after_request
    def log_response_info(response):
        """Log response information after processing."""
        if hasattr(g, 'start_time'):
            duration = time.time() - g.start_time
            logger.info(
                f"Response: {request.method} {request.path} "
                f"[{response.status_code}] in {duration:.3f}s"
            )
        return response

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy"})

    @app.route("/", methods=["GET"])
    def root():
        """Root endpoint with API information."""
        return jsonify({
            "name": "KWSK Controller API",
            "version": "0.1.0",
            "endpoints": {
                "health": "/health",
                "api_v1": "/api/v1",
                "api_v1_health": "/api/v1/health",
            }
        })

    return app
