"""Error taxonomy for the KWSK Controller API.

Every failure reaching a caller is one of two kinds: the platform resource
is absent (NotFoundError) or anything else went wrong (InternalError). Both
render as a single human-readable message.
"""

from __future__ import annotations

from typing import Any

from werkzeug.exceptions import InternalServerError, NotFound


class KwskError(Exception):
    """Mixin for errors that carry a caller-facing message."""

    message: str = ''

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary format.

        Returns:
            Dictionary with the error message.
        """
        return {
            'error': self.message,
        }


class NotFoundError(KwskError, NotFound):
    """A platform resource backing an action does not exist."""

    def __init__(self, message: str = 'Resource not found'):
        """Initialize not-found error.

        Args:
            message: Error message.
        """
        super().__init__(message)
        self.message = message


class InternalError(KwskError, InternalServerError):
    """Platform, transport or action-host failure other than not-found."""

    def __init__(self, message: str = 'Internal server error'):
        """Initialize internal error.

        Args:
            message: Error message.
        """
        super().__init__(message)
        self.message = message


class ConfigurationError(RuntimeError):
    """Mandatory startup configuration is missing or invalid."""
