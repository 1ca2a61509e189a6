"""
Action <-> Knative resource codec.

Knative Configurations have no fields for OpenWhisk action metadata, so the
action is carried in ``metadata.annotations`` under the keys below. This
module is the only place that knows those keys and what a missing key
decodes to.

Configuration layout (serving.knative.dev/v1alpha1):

    metadata:
      name: <normalized action name>
      namespace: <resolved namespace>
      annotations:
        kwsk_action_name: <name as given by the caller>
        kwsk_action_version: <version>
        kwsk_action_kind: <exec.kind>      # only when exec is present
        kwsk_action_code: <exec.code>      # only when exec is present
    spec:
      revisionTemplate:
        spec:
          container:
            image: <exec.image or DEFAULT_ACTION_IMAGE>
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

from kwsk.models import Action, ActionExec

KNATIVE_GROUP = 'serving.knative.dev'
KNATIVE_VERSION = 'v1alpha1'
KNATIVE_API_VERSION = f'{KNATIVE_GROUP}/{KNATIVE_VERSION}'

ANNOTATION_NAME = 'kwsk_action_name'
ANNOTATION_VERSION = 'kwsk_action_version'
ANNOTATION_KIND = 'kwsk_action_kind'
ANNOTATION_CODE = 'kwsk_action_code'

# TODO: Map exec.kind to a runtime image instead of assuming nodejs 8
DEFAULT_ACTION_IMAGE = 'openwhisk/action-nodejs-v8'


def encode_configuration(
    action: Action,
    resource_name: str,
    namespace: str,
) -> dict[str, Any]:
    """
    Build the Configuration body for an action.

    Args:
        action: Action to store
        resource_name: Normalized action name
        namespace: Resolved platform namespace

    Returns:
        Configuration resource body
    """
    annotations = {
        ANNOTATION_NAME: action.name,
        ANNOTATION_VERSION: action.version,
    }

    image = ''
    if action.exec is not None:
        image = action.exec.image
        annotations[ANNOTATION_KIND] = action.exec.kind
        annotations[ANNOTATION_CODE] = action.exec.code

    if not image:
        image = DEFAULT_ACTION_IMAGE

    return {
        'apiVersion': KNATIVE_API_VERSION,
        'kind': 'Configuration',
        'metadata': {
            'name': resource_name,
            'namespace': namespace,
            'annotations': annotations,
        },
        'spec': {
            'revisionTemplate': {
                'metadata': {},
                'spec': {
                    'container': {
                        'image': image,
                    },
                },
            },
        },
    }


def encode_route(resource_name: str, namespace: str) -> dict[str, Any]:
    """
    Build the Route body sending all traffic to the action's Configuration.

    Args:
        resource_name: Normalized action name (shared with the Configuration)
        namespace: Resolved platform namespace

    Returns:
        Route resource body
    """
    return {
        'apiVersion': KNATIVE_API_VERSION,
        'kind': 'Route',
        'metadata': {
            'name': resource_name,
            'namespace': namespace,
        },
        'spec': {
            'traffic': [
                {
                    'configurationName': resource_name,
                    'percent': 100,
                },
            ],
        },
    }


def decode_configuration(config: dict[str, Any]) -> Action:
    """
    Rebuild an action from its Configuration.

    Missing annotations, image or namespace decode to empty strings.

    Args:
        config: Configuration resource body

    Returns:
        Action view of the Configuration
    """
    metadata = config.get('metadata') or {}
    annotations = metadata.get('annotations') or {}

    return Action(
        name=annotations.get(ANNOTATION_NAME, ''),
        namespace=metadata.get('namespace') or '',
        version=annotations.get(ANNOTATION_VERSION, ''),
        exec=ActionExec(
            kind=annotations.get(ANNOTATION_KIND, ''),
            code=annotations.get(ANNOTATION_CODE, ''),
            image=configuration_image(config),
        ),
    )


def configuration_image(config: dict[str, Any]) -> str:
    spec = config.get('spec') or {}
    template = spec.get('revisionTemplate') or {}
    container = (template.get('spec') or {}).get('container') or {}
    return container.get('image') or ''


def configuration_code(config: dict[str, Any]) -> str:
    """Return the action source carried by a Configuration, or ''."""
    annotations = (config.get('metadata') or {}).get('annotations') or {}
    return annotations.get(ANNOTATION_CODE, '')


def route_domain(route: dict[str, Any]) -> Optional[str]:
    """
    Return the hostname a Route resolves to.

    v1alpha1 Routes publish ``status.domain``; later releases only publish
    ``status.url``.

    Args:
        route: Route resource body

    Returns:
        Hostname, or None while the Route is not ready
    """
    status = route.get('status') or {}
    domain = status.get('domain')
    if domain:
        return domain

    url = status.get('url')
    if url:
        return urlparse(url).hostname

    return None
