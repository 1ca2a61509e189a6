"""Pytest configuration and fixtures for KWSK Controller API tests."""

from __future__ import annotations

import copy
import json
from typing import Any, Generator

import httpx
import pytest
from flask import Flask
from kubernetes.client.exceptions import ApiException

from kwsk import create_app
from kwsk.config import TestingConfig
from kwsk.services.actions import ActionStore
from kwsk.services.invocation import InvocationService
from kwsk.services.platform import KnativeClient


def api_exception(status: int, reason: str, message: str) -> ApiException:
    """Build an ApiException shaped like a Kubernetes Status response."""
    error = ApiException(status=status, reason=reason)
    error.body = json.dumps({
        'kind': 'Status',
        'status': 'Failure',
        'message': message,
        'reason': reason,
        'code': status,
    })
    return error


class FakeCustomObjectsApi:
    """In-memory stand-in for kubernetes.client.CustomObjectsApi.

    Objects are keyed by (plural, namespace, name). Routes get a resolved
    status.domain on creation. ``failures`` maps (verb, plural) to an
    ApiException raised instead of performing the call.
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.failures: dict[tuple[str, str], ApiException] = {}
        self.calls: list[tuple[str, str, str]] = []

    def _check(self, verb: str, plural: str, namespace: str) -> None:
        self.calls.append((verb, plural, namespace))
        failure = self.failures.get((verb, plural))
        if failure is not None:
            raise failure

    def create_namespaced_custom_object(self, group, version, namespace, plural, body, **kwargs):
        self._check('create', plural, namespace)
        name = body['metadata']['name']
        key = (plural, namespace, name)
        if key in self.objects:
            raise api_exception(
                409, 'AlreadyExists',
                f'{plural}.{group} "{name}" already exists',
            )
        stored = copy.deepcopy(body)
        stored['metadata']['namespace'] = namespace
        if plural == 'routes':
            stored['status'] = {'domain': f'{name}.{namespace}.example.com'}
        self.objects[key] = stored
        return copy.deepcopy(stored)

    def get_namespaced_custom_object(self, group, version, namespace, plural, name, **kwargs):
        self._check('get', plural, namespace)
        key = (plural, namespace, name)
        if key not in self.objects:
            raise api_exception(404, 'NotFound', f'{plural}.{group} "{name}" not found')
        return copy.deepcopy(self.objects[key])

    def list_namespaced_custom_object(self, group, version, namespace, plural, **kwargs):
        self._check('list', plural, namespace)
        items = [
            copy.deepcopy(obj)
            for (obj_plural, obj_namespace, _), obj in sorted(self.objects.items())
            if obj_plural == plural and obj_namespace == namespace
        ]
        return {'apiVersion': f'{group}/{version}', 'items': items}

    def delete_namespaced_custom_object(self, group, version, namespace, plural, name, **kwargs):
        self._check('delete', plural, namespace)
        key = (plural, namespace, name)
        if key not in self.objects:
            raise api_exception(404, 'NotFound', f'{plural}.{group} "{name}" not found')
        del self.objects[key]
        return {'kind': 'Status', 'status': 'Success'}


class FakeActionHost:
    """OpenWhisk action runtime reached through an httpx MockTransport.

    Records every request and answers /init and /run with the configured
    status codes and bodies.
    """

    def __init__(self) -> None:
        self.init_status = 200
        self.init_body: bytes = b'{"ok": true}'
        self.run_status = 200
        self.run_body: bytes = b'{"greeting": "hello"}'
        self.fail_with: Exception | None = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if request.url.path == '/init':
            return httpx.Response(self.init_status, content=self.init_body)
        if request.url.path == '/run':
            return httpx.Response(self.run_status, content=self.run_body)
        return httpx.Response(404, json={'error': f'Not found: {request.url.path}'})

    def bodies(self) -> list[Any]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def custom_objects() -> FakeCustomObjectsApi:
    """Provide an empty in-memory custom objects API."""
    return FakeCustomObjectsApi()


@pytest.fixture
def platform(custom_objects: FakeCustomObjectsApi) -> KnativeClient:
    """Provide a Knative client backed by the fake API."""
    return KnativeClient(custom_objects)


@pytest.fixture
def action_store(platform: KnativeClient) -> ActionStore:
    """Provide an action store on the fake platform."""
    return ActionStore(platform)


@pytest.fixture
def action_host() -> FakeActionHost:
    """Provide a fake action runtime."""
    return FakeActionHost()


@pytest.fixture
def http_client(action_host: FakeActionHost) -> Generator[httpx.Client, None, None]:
    """Provide an HTTP client routed to the fake action runtime."""
    client = httpx.Client(transport=httpx.MockTransport(action_host.handler))
    yield client
    client.close()


@pytest.fixture
def invocation(platform: KnativeClient, http_client: httpx.Client) -> InvocationService:
    """Provide an invocation service wired to the fakes."""
    return InvocationService(
        TestingConfig.GATEWAY_ADDRESS,
        platform,
        http_client=http_client,
    )


@pytest.fixture
def app(platform: KnativeClient, http_client: httpx.Client) -> Flask:
    """Create and configure a test Flask application.

    Returns:
        Flask application configured for testing.
    """
    return create_app(TestingConfig, platform=platform, http_client=http_client)


@pytest.fixture
def client(app: Flask):
    """Create a test client for the Flask application.

    Args:
        app: Flask application fixture.

    Returns:
        Flask test client.
    """
    return app.test_client()
