import httplib2
import pytest
from unittest.mock import MagicMock
from googleapiclient.errors import HttpError
from leftovers.core.errors import NotFoundError
from leftovers.core.operation import Operation, OperationStatus
from leftovers.gcp.compute.client import GLOBAL, REGION, ZONE, ComputeClient, Endpoint, parse_operation

IMAGES = Endpoint('images', 'image', 'image', 'images')
DISKS = Endpoint('disks', 'disk', 'disk', 'disks', ZONE)
ADDRESSES = Endpoint('addresses', 'address', 'address', 'addresses', REGION)


def _http_error(status):
    return HttpError(httplib2.Response({'status': status, 'reason': 'error'}), b'{}')


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def client(service):
    return ComputeClient('my-project', service, num_retries=2)


def test_list_page_global(client, service):
    service.images.return_value.list.return_value.execute.return_value = {
        'items': [{'name': 'banana-image'}], 'nextPageToken': 'next',
    }

    items, token = client.list_page(IMAGES, '', None)

    service.images.return_value.list.assert_called_once_with(project='my-project')
    service.images.return_value.list.return_value.execute.assert_called_once_with(num_retries=2)
    assert items == [{'name': 'banana-image'}]
    assert token == 'next'


def test_list_page_zonal_with_token(client, service):
    service.disks.return_value.list.return_value.execute.return_value = {}

    items, token = client.list_page(DISKS, 'zone-1', 'abc')

    service.disks.return_value.list.assert_called_once_with(project='my-project', zone='zone-1', pageToken='abc')
    assert items == []
    assert token is None


def test_delete_returns_operation(client, service):
    service.addresses.return_value.delete.return_value.execute.return_value = {
        'name': 'op-1', 'status': 'PENDING', 'region': 'https://compute/regions/us-east1',
        'targetLink': 'https://compute/addresses/banana',
    }

    op = client.delete(ADDRESSES, 'us-east1', 'banana')

    service.addresses.return_value.delete.assert_called_once_with(
        project='my-project', region='us-east1', address='banana')
    assert op == Operation(id='op-1', status=OperationStatus.PENDING,
                           target_link='https://compute/addresses/banana', scope=REGION, location='us-east1')


def test_delete_not_found(client, service):
    service.images.return_value.delete.return_value.execute.side_effect = _http_error(404)

    with pytest.raises(NotFoundError):
        client.delete(IMAGES, '', 'banana-image')


def test_delete_other_http_error(client, service):
    service.images.return_value.delete.return_value.execute.side_effect = _http_error(403)

    with pytest.raises(HttpError):
        client.delete(IMAGES, '', 'banana-image')


@pytest.mark.parametrize('op,collection,kwargs', [
    (Operation('op-1', scope=ZONE, location='zone-1'), 'zoneOperations', {'zone': 'zone-1'}),
    (Operation('op-1', scope=REGION, location='us-east1'), 'regionOperations', {'region': 'us-east1'}),
    (Operation('op-1', scope=GLOBAL), 'globalOperations', {}),
])
def test_get_operation_uses_matching_scope(client, service, op, collection, kwargs):
    getattr(service, collection).return_value.get.return_value.execute.return_value = {
        'name': 'op-1', 'status': 'DONE',
    }

    result = client.get_operation(op)

    getattr(service, collection).return_value.get.assert_called_once_with(
        project='my-project', operation='op-1', **kwargs)
    assert result.done


def test_parse_operation_error():
    op = parse_operation({
        'name': 'op-1', 'status': 'DONE', 'zone': 'https://compute/zones/zone-1',
        'error': {'errors': [{'code': 'RESOURCE_IN_USE_BY_ANOTHER_RESOURCE', 'message': 'in use'}]},
    })

    assert op.scope == ZONE
    assert op.location == 'zone-1'
    assert op.error_detail == 'RESOURCE_IN_USE_BY_ANOTHER_RESOURCE: in use'


def test_list_zones_follows_list_next(client, service):
    first, second = MagicMock(), MagicMock()
    first.execute.return_value = {'items': [{'name': 'zone-1', 'selfLink': 'https://zone-1'}]}
    second.execute.return_value = {'items': [{'name': 'zone-2', 'selfLink': 'https://zone-2'}]}
    zones = service.zones.return_value
    zones.list.return_value = first
    zones.list_next.side_effect = [second, None]

    assert client.list_zones() == {'https://zone-1': 'zone-1', 'https://zone-2': 'zone-2'}
