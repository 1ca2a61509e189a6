"""
Action Invocation Bridge.

Invokes an action synchronously against its running Knative revision using
the OpenWhisk action runtime protocol:

1. Resolve: read the action's Route (for its domain) and Configuration
   (for its code)
2. Init: POST /init with {"value": {"main": "main", "code": ...}}
3. Run: POST /run with {"value": <params>}

Both requests go to a single ingress gateway address; the action's Route
domain is sent as the Host header so the gateway can pick the right
revision. Runtimes answer 403 to a second /init, which is expected here:
the bridge initializes on every invocation and keeps no state between
calls.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Optional

import httpx

from kwsk.errors import ConfigurationError, InternalError
from kwsk.models import Activation, ActivationResponse
from kwsk.services.codec import configuration_code, route_domain
from kwsk.services.platform import KnativeClient
from kwsk.utils.naming import DEFAULT_NAMESPACE, normalize_action_name, resolve_namespace

logger = logging.getLogger(__name__)

ACTION_MAIN = 'main'


class InvocationService:
    """
    Bridge between the invoke API and running action containers.

    Attributes:
        gateway_address: host:port every action request is sent to
        platform: Knative resource client
        http: HTTP client used for /init and /run
    """

    def __init__(
        self,
        gateway_address: str,
        platform: KnativeClient,
        http_client: Optional[httpx.Client] = None,
        default_namespace: str = DEFAULT_NAMESPACE,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the invocation bridge.

        Args:
            gateway_address: Ingress gateway host:port (mandatory)
            platform: Knative resource client
            http_client: HTTP client; one is created when omitted
            default_namespace: Namespace the ``_`` alias resolves to
            timeout: Per-request timeout in seconds for a created client;
                httpx's default applies when None

        Raises:
            ConfigurationError: If the gateway address is empty
        """
        if not gateway_address:
            raise ConfigurationError(
                "Gateway address must be provided to invoke actions"
            )

        self.gateway_address = gateway_address
        self.platform = platform
        self.default_namespace = default_namespace

        if http_client is None:
            http_client = httpx.Client(timeout=timeout) if timeout else httpx.Client()
        self.http = http_client

        logger.info(f"InvocationService initialized: gateway={gateway_address}")

    def invoke_action(
        self,
        action_name: str,
        namespace: str,
        params: Optional[Any] = None,
    ) -> Activation:
        """
        Invoke an action and wait for its result.

        Args:
            action_name: Action name as given by the caller
            namespace: Namespace from the request (``_`` allowed)
            params: Action parameters; an empty mapping when None

        Returns:
            Activation with the action's parsed JSON result

        Raises:
            NotFoundError: The action's Route or Configuration is missing
            InternalError: Platform, transport or action failure
        """
        name = normalize_action_name(action_name)
        namespace = resolve_namespace(namespace, self.default_namespace)

        logger.info(f"Invoking action {namespace}/{name}")

        route = self.platform.get_route(namespace, name)
        config = self.platform.get_configuration(namespace, name)

        action_host = route_domain(route)
        if not action_host:
            raise InternalError(
                f"Route {namespace}/{name} has no domain yet; it may not be ready"
            )

        # TODO: Track initialized (host, code) pairs to skip redundant /init
        self._init_action(action_host, configuration_code(config))
        return self._run_action(action_host, name, namespace, params)

    def _init_action(self, action_host: str, code: str) -> None:
        """
        Send the action's code to its runtime.

        Raises:
            InternalError: Transport failure or a status other than 200/403
        """
        body = {
            'value': {
                'main': ACTION_MAIN,
                'code': code,
            },
        }
        status, content = self._action_request(action_host, 'init', body)

        if status == 403:
            # Runtime was initialized by an earlier invocation
            logger.debug(f"Action host {action_host} already initialized")
        elif status != 200:
            raise InternalError(
                f"Error initializing action. Status: {status}, "
                f"Message: {content.decode('utf-8', errors='replace')}"
            )

    def _run_action(
        self,
        action_host: str,
        name: str,
        namespace: str,
        params: Optional[Any],
    ) -> Activation:
        """
        Run the initialized action and build its activation.

        Raises:
            InternalError: Transport failure, non-200 status or non-JSON result
        """
        body = {
            'value': params if params is not None else {},
        }
        status, content = self._action_request(action_host, 'run', body)
        text = content.decode('utf-8', errors='replace')

        if status != 200:
            raise InternalError(
                f"Error invoking action. Status: {status}, Message: {text}"
            )

        try:
            result = json.loads(content)
        except ValueError as e:
            raise InternalError(
                f"Action invocation result was not valid JSON. Result: {text}"
            ) from e

        activation = Activation(
            activation_id=uuid.uuid4().hex,
            name=name,
            namespace=namespace,
            response=ActivationResponse(success=True, result=result),
            logs=[],
        )
        logger.info(f"Activation {activation.activation_id} for {namespace}/{name} succeeded")
        return activation

    def _action_request(
        self,
        action_host: str,
        path: str,
        body: dict[str, Any],
    ) -> tuple[int, bytes]:
        """
        POST a JSON body to the gateway on behalf of an action host.

        Args:
            action_host: Route domain, sent as the Host header
            path: Runtime endpoint (init or run)
            body: JSON request body

        Returns:
            Tuple of (status code, raw response body)

        Raises:
            InternalError: The request could not be sent or answered
        """
        url = f"http://{self.gateway_address}/{path}"
        logger.debug(f"Sending POST to url {url} with host {action_host}")

        try:
            response = self.http.post(
                url,
                content=json.dumps(body).encode('utf-8'),
                headers={
                    'Host': action_host,
                    'Content-Type': 'application/json',
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Request to {action_host}/{path} failed: {e}")
            raise InternalError(str(e) or e.__class__.__name__) from e

        logger.debug(f"Response from {action_host}/{path}: [{response.status_code}]")
        return response.status_code, response.content

    def close(self) -> None:
        """Close the HTTP client."""
        self.http.close()
