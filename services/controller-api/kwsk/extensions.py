"""Flask extension initialization for KWSK Controller API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    import httpx
    from flask import Flask

    from kwsk.services.platform import KnativeClient


def init_platform(app: Flask, platform: Optional[KnativeClient] = None) -> None:
    """Initialize the Knative platform client.

    Args:
        app: Flask application instance.
        platform: Preconfigured client; one is built from the kube config
            settings when omitted.

    Raises:
        ConfigurationError: If Kubernetes credentials cannot be loaded.
    """
    from kwsk.services.platform import create_knative_client

    if platform is None:
        platform = create_knative_client(
            in_cluster=app.config['KUBE_IN_CLUSTER'],
            config_file=app.config['KUBE_CONFIG_PATH'],
            context=app.config['KUBE_CONTEXT'],
        )
    app.extensions['knative'] = platform
    app.logger.info("Knative platform client initialized successfully")


def init_action_store(app: Flask) -> None:
    """Initialize the action store.

    Args:
        app: Flask application instance.
    """
    from kwsk.services.actions import ActionStore

    app.extensions['action_store'] = ActionStore(
        app.extensions['knative'],
        default_namespace=app.config['DEFAULT_NAMESPACE'],
    )
    app.logger.info("Action store initialized successfully")


def init_invocation(app: Flask, http_client: Optional[httpx.Client] = None) -> None:
    """Initialize the invocation service.

    Args:
        app: Flask application instance.
        http_client: HTTP client for action hosts; created when omitted.

    Raises:
        ConfigurationError: If the gateway address is not configured.
    """
    from kwsk.services.invocation import InvocationService

    app.extensions['invocation'] = InvocationService(
        app.config['GATEWAY_ADDRESS'],
        app.extensions['knative'],
        http_client=http_client,
        default_namespace=app.config['DEFAULT_NAMESPACE'],
        timeout=app.config['ACTION_HTTP_TIMEOUT'],
    )
    app.logger.info("Invocation service initialized successfully")


def init_extensions(
    app: Flask,
    platform: Optional[KnativeClient] = None,
    http_client: Optional[httpx.Client] = None,
) -> None:
    """Initialize Flask extensions.

    Unlike optional integrations, every service here is required: a failure
    propagates and aborts application startup.

    Args:
        app: Flask application instance.
        platform: Optional preconfigured Knative client.
        http_client: Optional HTTP client for action hosts.
    """
    init_platform(app, platform)
    init_action_store(app)
    init_invocation(app, http_client)
