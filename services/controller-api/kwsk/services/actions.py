"""
Action Store.

Stores each OpenWhisk action as a Knative Configuration + Route pair sharing
the action's normalized name:

- Configuration: container image plus the action's metadata as annotations
  (see kwsk.services.codec)
- Route: sends 100% of traffic for the name to that Configuration

The platform has no transactions across resources. A Route create failure
is compensated by deleting the Configuration that was just created; a
Route delete failure after the Configuration is already gone cannot be
undone and leaves an orphaned Route.
"""

from __future__ import annotations

import logging
from typing import Optional

from kwsk.errors import InternalError, KwskError
from kwsk.models import Action, ActionExec
from kwsk.services.codec import decode_configuration, encode_configuration, encode_route
from kwsk.services.platform import KnativeClient
from kwsk.utils.naming import DEFAULT_NAMESPACE, normalize_action_name, resolve_namespace

logger = logging.getLogger(__name__)


class ActionStore:
    """
    CRUD for actions on top of the Knative platform API.

    Every operation normalizes the action name and resolves the namespace
    alias before touching the platform.
    """

    def __init__(
        self,
        platform: KnativeClient,
        default_namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        """
        Initialize the action store.

        Args:
            platform: Knative resource client
            default_namespace: Namespace the ``_`` alias resolves to
        """
        self.platform = platform
        self.default_namespace = default_namespace

    def _resolve(self, name: str, namespace: str) -> tuple[str, str]:
        return (
            normalize_action_name(name),
            resolve_namespace(namespace, self.default_namespace),
        )

    def create_or_update(
        self,
        name: str,
        namespace: str,
        version: str = '',
        exec_data: Optional[ActionExec] = None,
    ) -> Action:
        """
        Create an action's Configuration and Route, then read it back.

        There is no replace path: if a Configuration with the same
        normalized name exists, the platform rejects the create and the
        conflict surfaces as InternalError.

        Args:
            name: Action name as given by the caller
            namespace: Namespace from the request (``_`` allowed)
            version: Action version
            exec_data: Kind, code and image, if provided

        Returns:
            Stored action as read back from the platform

        Raises:
            InternalError: Any platform failure, including the read-back
        """
        resource_name, namespace = self._resolve(name, namespace)
        action = Action(name=name, namespace=namespace, version=version, exec=exec_data)

        logger.info(f"Creating action {namespace}/{resource_name}")
        try:
            self.platform.create_configuration(
                namespace, encode_configuration(action, resource_name, namespace)
            )
        except KwskError as e:
            logger.error(f"Error updating action {namespace}/{resource_name}: {e.message}")
            raise InternalError(e.message) from e

        try:
            self.platform.create_route(namespace, encode_route(resource_name, namespace))
        except KwskError as e:
            logger.error(
                f"Route create failed for {namespace}/{resource_name}, "
                f"removing its configuration: {e.message}"
            )
            self._discard_configuration(namespace, resource_name)
            raise InternalError(e.message) from e

        try:
            return self.get(name, namespace)
        except KwskError as e:
            logger.error(f"Error retrieving updated action {namespace}/{resource_name}: {e.message}")
            raise InternalError(e.message) from e

    def _discard_configuration(self, namespace: str, resource_name: str) -> None:
        try:
            self.platform.delete_configuration(namespace, resource_name)
        except KwskError as e:
            logger.error(
                f"Could not remove configuration {namespace}/{resource_name}; "
                f"it is left without a route: {e.message}"
            )

    def get(self, name: str, namespace: str) -> Action:
        """
        Get an action by name.

        Raises:
            NotFoundError: No Configuration with the normalized name
            InternalError: Any other platform failure
        """
        resource_name, namespace = self._resolve(name, namespace)
        config = self.platform.get_configuration(namespace, resource_name)
        return decode_configuration(config)

    def list(self, namespace: str) -> list[Action]:
        """
        List all actions in a namespace.

        Raises:
            InternalError: Any platform failure
        """
        namespace = resolve_namespace(namespace, self.default_namespace)
        try:
            configs = self.platform.list_configurations(namespace)
        except KwskError as e:
            raise InternalError(e.message) from e
        return [decode_configuration(config) for config in configs]

    def delete(self, name: str, namespace: str) -> None:
        """
        Delete an action's Configuration, then its Route.

        Raises:
            NotFoundError: Either resource was already gone
            InternalError: Any other platform failure
        """
        resource_name, namespace = self._resolve(name, namespace)

        logger.info(f"Deleting action {namespace}/{resource_name}")
        self.platform.delete_configuration(namespace, resource_name)

        try:
            self.platform.delete_route(namespace, resource_name)
        except KwskError:
            logger.warning(
                f"Configuration {namespace}/{resource_name} deleted but its "
                f"route could not be"
            )
            raise
