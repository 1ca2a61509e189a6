"""Services package for KWSK Controller API.

This package provides the service layer: the Knative platform client, the
action store built on it, and the invocation bridge to running actions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import current_app

if TYPE_CHECKING:
    from kwsk.services.actions import ActionStore
    from kwsk.services.invocation import InvocationService


def get_action_store() -> ActionStore:
    """Get the action store of the current application.

    Returns:
        ActionStore instance
    """
    return current_app.extensions['action_store']


def get_invocation() -> InvocationService:
    """Get the invocation service of the current application.

    Returns:
        InvocationService instance
    """
    return current_app.extensions['invocation']


__all__ = [
    'get_action_store',
    'get_invocation',
]
