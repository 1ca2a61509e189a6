"""
OpenWhisk Actions API v1 endpoint.

This module implements the OpenWhisk-compatible REST API for managing and
invoking actions. Each action is backed by a Knative Configuration + Route
pair named after the normalized action name.

API Endpoints:
    GET    /api/v1/namespaces/{namespace}/actions
    GET    /api/v1/namespaces/{namespace}/actions/{actionName}
    PUT    /api/v1/namespaces/{namespace}/actions/{actionName}
    DELETE /api/v1/namespaces/{namespace}/actions/{actionName}
    POST   /api/v1/namespaces/{namespace}/actions/{actionName}

The namespace "_" refers to the default namespace.

Action Format:
    {
        "namespace": "default",
        "name": "actionName",
        "version": "0.0.1",
        "exec": {
            "kind": "nodejs:6",
            "code": "function main(args) { return args }",
            "image": "custom/image:tag"
        }
    }

Errors are returned as {"error": "<message>"} with status 404 or 500.
Request bodies are passed through without validation; whatever the
platform rejects comes back as a 500.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from kwsk.models import ActionExec
from kwsk.services import get_action_store, get_invocation

# Create blueprint
actions_bp = Blueprint('actions', __name__)


@actions_bp.route('/namespaces/<namespace>/actions', methods=['GET'])
def list_actions(namespace: str) -> tuple[Any, int]:
    """
    List all actions in a namespace.

    Returns:
        JSON array of actions
    """
    actions = get_action_store().list(namespace)
    return jsonify([action.to_dict() for action in actions]), 200


@actions_bp.route('/namespaces/<namespace>/actions/<action_name>', methods=['GET'])
def get_action(namespace: str, action_name: str) -> tuple[Any, int]:
    """
    Get an action by name.

    Path Parameters:
        namespace: Namespace name or "_"
        action_name: Action name (matched case- and space-insensitively)

    Returns:
        JSON action
    """
    action = get_action_store().get(action_name, namespace)
    return jsonify(action.to_dict()), 200


@actions_bp.route('/namespaces/<namespace>/actions/<action_name>', methods=['PUT'])
def update_action(namespace: str, action_name: str) -> tuple[Any, int]:
    """
    Create an action.

    An action that already exists is not replaced; the platform's conflict
    is returned as a 500.

    Request Body:
        {
            "version": "0.0.1",
            "exec": {
                "kind": "nodejs:6",
                "code": "function main(args) { return args }",
                "image": "custom/image:tag"
            }
        }

    Returns:
        JSON action as stored
    """
    data = request.get_json(silent=True) or {}

    exec_data = data.get('exec')
    action = get_action_store().create_or_update(
        action_name,
        namespace,
        version=data.get('version') or '',
        exec_data=ActionExec.from_dict(exec_data) if isinstance(exec_data, dict) else None,
    )
    return jsonify(action.to_dict()), 200


@actions_bp.route('/namespaces/<namespace>/actions/<action_name>', methods=['DELETE'])
def delete_action(namespace: str, action_name: str) -> tuple[Any, int]:
    """
    Delete an action's Configuration and Route.

    Returns:
        Empty JSON object
    """
    get_action_store().delete(action_name, namespace)
    return jsonify({}), 200


@actions_bp.route('/namespaces/<namespace>/actions/<action_name>', methods=['POST'])
def invoke_action(namespace: str, action_name: str) -> tuple[Any, int]:
    """
    Invoke an action and wait for its result.

    Request Body:
        Action parameters as JSON (optional)

    Returns:
        Full activation record
    """
    params = request.get_json(silent=True)

    activation = get_invocation().invoke_action(action_name, namespace, params)
    return jsonify(activation.to_dict()), 200
