"""Unit tests for the action store."""

import pytest

from kwsk.errors import InternalError, NotFoundError
from kwsk.models import ActionExec
from kwsk.services.codec import DEFAULT_ACTION_IMAGE

from conftest import api_exception


@pytest.fixture
def exec_data():
    return ActionExec(
        kind='nodejs:6',
        code='function main(args) { return {payload: args.name} }',
        image='custom/image:tag',
    )


class TestCreateOrUpdate:
    """Test ActionStore.create_or_update."""

    def test_creates_configuration_and_route(self, action_store, custom_objects, exec_data):
        action = action_store.create_or_update('My Action', '_', '0.0.1', exec_data)

        assert action.name == 'My Action'
        assert action.namespace == 'default'
        assert action.version == '0.0.1'
        assert action.exec == exec_data
        assert ('configurations', 'default', 'my-action') in custom_objects.objects
        route = custom_objects.objects[('routes', 'default', 'my-action')]
        assert route['spec']['traffic'] == [
            {'configurationName': 'my-action', 'percent': 100},
        ]

    def test_reads_back_stored_view(self, action_store, custom_objects):
        action = action_store.create_or_update('bare', 'default', '1')

        assert custom_objects.calls[-1] == ('get', 'configurations', 'default')
        assert action.exec.image == DEFAULT_ACTION_IMAGE
        assert action.exec.kind == ''

    def test_second_create_fails(self, action_store, exec_data):
        action_store.create_or_update('My Action', 'default', '0.0.1', exec_data)

        with pytest.raises(InternalError, match='already exists'):
            action_store.create_or_update('my action', 'default', '0.0.2', exec_data)

        assert action_store.get('My Action', 'default').version == '0.0.1'

    def test_missing_namespace_is_internal(self, action_store, custom_objects):
        custom_objects.failures[('create', 'configurations')] = api_exception(
            404, 'NotFound', 'namespaces "nowhere" not found'
        )

        with pytest.raises(InternalError, match='nowhere'):
            action_store.create_or_update('x', 'nowhere')

    def test_route_failure_removes_configuration(self, action_store, custom_objects):
        custom_objects.failures[('create', 'routes')] = api_exception(
            422, 'Invalid', 'Route.serving.knative.dev "Bad" is invalid'
        )

        with pytest.raises(InternalError, match='is invalid'):
            action_store.create_or_update('x', 'default')

        assert custom_objects.objects == {}

    def test_route_failure_with_failed_cleanup(self, action_store, custom_objects):
        custom_objects.failures[('create', 'routes')] = api_exception(
            500, 'InternalError', 'etcd unavailable'
        )
        custom_objects.failures[('delete', 'configurations')] = api_exception(
            500, 'InternalError', 'etcd unavailable'
        )

        with pytest.raises(InternalError, match='etcd unavailable'):
            action_store.create_or_update('x', 'default')

        assert list(custom_objects.objects) == [('configurations', 'default', 'x')]


class TestGetAndList:
    """Test ActionStore.get and ActionStore.list."""

    @pytest.mark.parametrize('lookup', ['my-action', 'MY ACTION', 'My-Action', 'my action'])
    def test_get_by_any_equivalent_name(self, action_store, exec_data, lookup):
        created = action_store.create_or_update('My Action', 'default', '0.0.1', exec_data)

        assert action_store.get(lookup, '_') == created

    def test_get_missing(self, action_store):
        with pytest.raises(NotFoundError):
            action_store.get('missing', 'default')

    def test_get_other_failure(self, action_store, custom_objects):
        custom_objects.failures[('get', 'configurations')] = api_exception(
            401, 'Unauthorized', 'Unauthorized'
        )

        with pytest.raises(InternalError):
            action_store.get('x', 'default')

    def test_list(self, action_store, exec_data):
        action_store.create_or_update('alpha', 'default', '1', exec_data)
        action_store.create_or_update('Beta', 'default', '2')
        action_store.create_or_update('gamma', 'team-a', '3')

        actions = action_store.list('_')

        assert [action.name for action in actions] == ['alpha', 'Beta']
        assert [action.version for action in actions] == ['1', '2']

    def test_list_empty(self, action_store):
        assert action_store.list('default') == []

    def test_list_failure(self, action_store, custom_objects):
        custom_objects.failures[('list', 'configurations')] = api_exception(
            404, 'NotFound', 'the server could not find the requested resource'
        )

        with pytest.raises(InternalError):
            action_store.list('default')


class TestDelete:
    """Test ActionStore.delete."""

    def test_delete_then_get(self, action_store, custom_objects, exec_data):
        action_store.create_or_update('My Action', 'default', '0.0.1', exec_data)

        action_store.delete('MY ACTION', '_')

        assert custom_objects.objects == {}
        with pytest.raises(NotFoundError):
            action_store.get('My Action', 'default')

    def test_delete_missing(self, action_store):
        with pytest.raises(NotFoundError):
            action_store.delete('missing', 'default')

    def test_delete_missing_route(self, action_store, custom_objects):
        action_store.create_or_update('x', 'default')
        del custom_objects.objects[('routes', 'default', 'x')]

        with pytest.raises(NotFoundError):
            action_store.delete('x', 'default')

        assert custom_objects.objects == {}

    def test_route_delete_failure_leaves_route(self, action_store, custom_objects):
        action_store.create_or_update('x', 'default')
        custom_objects.failures[('delete', 'routes')] = api_exception(
            500, 'InternalError', 'etcd unavailable'
        )

        with pytest.raises(InternalError):
            action_store.delete('x', 'default')

        assert list(custom_objects.objects) == [('routes', 'default', 'x')]

    def test_second_delete_not_found(self, action_store):
        action_store.create_or_update('x', 'default')
        action_store.delete('x', 'default')

        with pytest.raises(NotFoundError):
            action_store.delete('x', 'default')
