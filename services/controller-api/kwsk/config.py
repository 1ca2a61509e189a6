"""Flask configuration management for KWSK Controller API."""

from __future__ import annotations

import os

from kwsk.errors import ConfigurationError


def _optional_float(value: str | None) -> float | None:
    if not value:
        return None
    return float(value)


class Config:
    """Base configuration class loading from environment variables."""

    # Flask settings
    DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"
    TESTING = os.getenv("FLASK_TESTING", "False").lower() == "true"
    ENV = os.getenv("FLASK_ENV", "production")
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

    # Ingress gateway (host:port) every action request is sent through.
    # KWSK_ISTIO is accepted for deployments configured for the istio ingress.
    GATEWAY_ADDRESS = os.getenv("KWSK_GATEWAY_ADDRESS") or os.getenv("KWSK_ISTIO", "")
    ACTION_HTTP_TIMEOUT = _optional_float(os.getenv("ACTION_HTTP_TIMEOUT"))

    # Kubernetes / Knative configuration
    KUBE_IN_CLUSTER = os.getenv("KUBE_IN_CLUSTER", "False").lower() == "true"
    KUBE_CONFIG_PATH = os.getenv("KUBECONFIG") or None
    KUBE_CONTEXT = os.getenv("KUBE_CONTEXT") or None
    DEFAULT_NAMESPACE = os.getenv("KWSK_DEFAULT_NAMESPACE", "default")

    # Logging configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate mandatory settings before any service is built.

        Raises:
            ConfigurationError: If a mandatory setting is missing.
        """
        if not cls.GATEWAY_ADDRESS:
            raise ConfigurationError(
                "Gateway host and port must be provided via "
                "KWSK_GATEWAY_ADDRESS to invoke actions"
            )


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False
    ENV = "development"
    LOG_LEVEL = "DEBUG"


class TestingConfig(Config):
    """Testing environment configuration."""

    DEBUG = True
    TESTING = True
    ENV = "testing"
    SECRET_KEY = "test-secret-key"
    GATEWAY_ADDRESS = "gateway.test:8080"
    DEFAULT_NAMESPACE = "default"


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False
    ENV = "production"
    KUBE_IN_CLUSTER = os.getenv("KUBE_IN_CLUSTER", "True").lower() == "true"
