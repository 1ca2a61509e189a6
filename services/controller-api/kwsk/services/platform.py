"""
Knative Serving platform client.

Wraps the Kubernetes custom objects API for the two Knative resources an
action is made of: a Configuration (the deployable revision) and a Route
(the traffic binding). Every platform failure leaves this module as either
NotFoundError (HTTP 404 from the API server) or InternalError (anything
else, including "already exists" conflicts and validation rejections).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException

from kwsk.errors import ConfigurationError, InternalError, NotFoundError
from kwsk.services.codec import KNATIVE_GROUP, KNATIVE_VERSION

logger = logging.getLogger(__name__)

CONFIGURATIONS = 'configurations'
ROUTES = 'routes'


def _error_message(error: ApiException) -> str:
    """Extract the API server's message from an ApiException."""
    if error.body:
        try:
            body = json.loads(error.body)
            if isinstance(body, dict) and body.get('message'):
                return body['message']
        except (TypeError, ValueError):
            pass
    return f"({error.status}) {error.reason}"


class KnativeClient:
    """
    Knative Serving resource client.

    Attributes:
        custom_objects: Kubernetes CustomObjectsApi instance
    """

    def __init__(self, custom_objects: Optional[client.CustomObjectsApi] = None) -> None:
        """
        Initialize the Knative client.

        Args:
            custom_objects: Preconfigured CustomObjectsApi; a default one
                backed by the loaded kube config is created when omitted
        """
        self.custom_objects = custom_objects or client.CustomObjectsApi()

    def _call(self, description: str, operation: Callable[..., Any], **kwargs: Any) -> Any:
        """
        Run a custom objects API call, translating its failures.

        Raises:
            NotFoundError: The API server answered 404
            InternalError: Any other failure
        """
        try:
            return operation(group=KNATIVE_GROUP, version=KNATIVE_VERSION, **kwargs)
        except ApiException as e:
            message = _error_message(e)
            if e.status == 404:
                logger.info(f"{description}: not found: {message}")
                raise NotFoundError(message) from e
            logger.error(f"{description} failed: {message}")
            raise InternalError(message) from e
        except Exception as e:
            logger.error(f"{description} failed: {e}")
            raise InternalError(str(e)) from e

    # Configurations

    def create_configuration(self, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        dbg = f"Creating configuration {body}"
        logger.debug(f"{dbg:.2000}")
        return self._call(
            f"Create configuration {namespace}/{body['metadata']['name']}",
            self.custom_objects.create_namespaced_custom_object,
            namespace=namespace,
            plural=CONFIGURATIONS,
            body=body,
        )

    def get_configuration(self, namespace: str, name: str) -> dict[str, Any]:
        return self._call(
            f"Get configuration {namespace}/{name}",
            self.custom_objects.get_namespaced_custom_object,
            namespace=namespace,
            plural=CONFIGURATIONS,
            name=name,
        )

    def list_configurations(self, namespace: str) -> list[dict[str, Any]]:
        result = self._call(
            f"List configurations in {namespace}",
            self.custom_objects.list_namespaced_custom_object,
            namespace=namespace,
            plural=CONFIGURATIONS,
        )
        return result.get('items') or []

    def delete_configuration(self, namespace: str, name: str) -> None:
        self._call(
            f"Delete configuration {namespace}/{name}",
            self.custom_objects.delete_namespaced_custom_object,
            namespace=namespace,
            plural=CONFIGURATIONS,
            name=name,
        )

    # Routes

    def create_route(self, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._call(
            f"Create route {namespace}/{body['metadata']['name']}",
            self.custom_objects.create_namespaced_custom_object,
            namespace=namespace,
            plural=ROUTES,
            body=body,
        )

    def get_route(self, namespace: str, name: str) -> dict[str, Any]:
        return self._call(
            f"Get route {namespace}/{name}",
            self.custom_objects.get_namespaced_custom_object,
            namespace=namespace,
            plural=ROUTES,
            name=name,
        )

    def delete_route(self, namespace: str, name: str) -> None:
        self._call(
            f"Delete route {namespace}/{name}",
            self.custom_objects.delete_namespaced_custom_object,
            namespace=namespace,
            plural=ROUTES,
            name=name,
        )


def create_knative_client(
    in_cluster: bool = False,
    config_file: Optional[str] = None,
    context: Optional[str] = None,
) -> KnativeClient:
    """
    Create a Knative client from in-cluster or kubeconfig credentials.

    Args:
        in_cluster: Use the pod's service account credentials
        config_file: Kubeconfig path (defaults to $KUBECONFIG or ~/.kube/config)
        context: Kubeconfig context name

    Returns:
        Configured KnativeClient

    Raises:
        ConfigurationError: If no usable credentials could be loaded
    """
    try:
        if in_cluster:
            config.load_incluster_config()
        else:
            config.load_kube_config(config_file=config_file, context=context)
    except ConfigException as e:
        raise ConfigurationError(f"Unable to load Kubernetes configuration: {e}") from e

    logger.info(
        f"Knative client initialized: in_cluster={in_cluster}, "
        f"config_file={config_file}, context={context}"
    )
    return KnativeClient(client.CustomObjectsApi())
