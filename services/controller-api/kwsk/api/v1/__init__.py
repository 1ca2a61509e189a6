"""KWSK Controller API v1 blueprint.

Registers the v1 action endpoints and renders every error as
``{"error": "<message>"}``.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, jsonify
from werkzeug.exceptions import HTTPException

from kwsk.api.v1.actions import actions_bp
from kwsk.errors import KwskError

logger = logging.getLogger(__name__)

# Create main API v1 blueprint
v1_bp = Blueprint("v1", __name__)

# Register sub-blueprints
v1_bp.register_blueprint(actions_bp)


# Error handlers
@v1_bp.errorhandler(KwskError)
def handle_kwsk_error(error: KwskError) -> tuple[Any, int]:
    """Handle NotFoundError and InternalError.

    Args:
        error: KwskError instance.

    Returns:
        JSON response with the error message and its status code.
    """
    return jsonify(error.to_dict()), error.code


@v1_bp.errorhandler(HTTPException)
def handle_http_error(error: HTTPException) -> tuple[Any, int]:
    """Handle werkzeug HTTP errors (405, 415, ...).

    Args:
        error: HTTPException instance.

    Returns:
        JSON response with the error description and its status code.
    """
    return jsonify({'error': error.description}), error.code


@v1_bp.errorhandler(Exception)
def handle_generic_error(error: Exception) -> tuple[Any, int]:
    """Handle unexpected exceptions.

    Args:
        error: Exception instance.

    Returns:
        JSON response with the error message and 500 status code.
    """
    logger.exception('Unhandled exception in API v1')
    return jsonify({'error': str(error) or 'An unexpected error occurred'}), 500


# Health check endpoint for v1
@v1_bp.route('/health', methods=['GET'])
def health() -> Any:
    """Health check endpoint for API v1.

    Returns:
        JSON response indicating API v1 health status.
    """
    return jsonify({
        'status': 'healthy',
        'version': 'v1',
    })


__all__ = ["v1_bp"]
