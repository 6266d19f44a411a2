"""Thin wrapper around the Compute Engine v1 discovery client.

Every compute collection is listed and deleted the same way; only the
collection name, the scope (global, region or zone) and the name of the delete
parameter differ. Those are described by ``Endpoint``.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from googleapiclient.errors import HttpError

from leftovers.core.errors import NotFoundError
from leftovers.core.models import short_location
from leftovers.core.operation import Operation, OperationStatus

GLOBAL = 'global'
REGION = 'region'
ZONE = 'zone'


@dataclass(frozen=True)
class Endpoint:
    collection: str
    param: str
    type_name: str
    plural: str
    scope: str = GLOBAL
    prerequisites: Tuple[str, ...] = ()


def _operation_error(op: Dict[str, Any]) -> Optional[str]:
    errors = (op.get('error') or {}).get('errors') or []
    if not errors:
        return None
    return '; '.join(f"{e.get('code', 'UNKNOWN')}: {e.get('message', '')}".strip() for e in errors)


def parse_operation(op: Dict[str, Any]) -> Operation:
    if op.get('zone'):
        scope, location = ZONE, short_location(op['zone'], {})
    elif op.get('region'):
        scope, location = REGION, short_location(op['region'], {})
    else:
        scope, location = GLOBAL, ''

    return Operation(
        id=op['name'],
        status=OperationStatus.parse(op.get('status')),
        error_detail=_operation_error(op),
        target_link=op.get('targetLink', ''),
        scope=scope,
        location=location,
    )


class ComputeClient:
    def __init__(self, project: str, service, num_retries: int = 3):
        self.project = project
        self.service = service
        self.num_retries = num_retries

    def _scoped(self, endpoint: Endpoint, location: str) -> Dict[str, str]:
        kwargs = {'project': self.project}
        if endpoint.scope == REGION:
            kwargs['region'] = location
        elif endpoint.scope == ZONE:
            kwargs['zone'] = location
        return kwargs

    def list_page(self, endpoint: Endpoint, location: str, token: Optional[str]) -> Tuple[List[dict], Optional[str]]:
        kwargs = self._scoped(endpoint, location)
        if token:
            kwargs['pageToken'] = token
        collection = getattr(self.service, endpoint.collection)()
        resp = collection.list(**kwargs).execute(num_retries=self.num_retries)
        return resp.get('items', []), resp.get('nextPageToken')

    def delete(self, endpoint: Endpoint, location: str, name: str) -> Operation:
        kwargs = self._scoped(endpoint, location)
        kwargs[endpoint.param] = name
        collection = getattr(self.service, endpoint.collection)()
        try:
            op = collection.delete(**kwargs).execute()
        except HttpError as e:
            if e.resp.status == 404:
                raise NotFoundError(f"{endpoint.type_name} {name} not found") from e
            raise
        return parse_operation(op)

    def get_operation(self, operation: Operation) -> Operation:
        if operation.scope == ZONE:
            request = self.service.zoneOperations().get(
                project=self.project, zone=operation.location, operation=operation.id)
        elif operation.scope == REGION:
            request = self.service.regionOperations().get(
                project=self.project, region=operation.location, operation=operation.id)
        else:
            request = self.service.globalOperations().get(project=self.project, operation=operation.id)
        return parse_operation(request.execute())

    def list_regions(self) -> Dict[str, str]:
        return self._locations(self.service.regions, 'regions')

    def list_zones(self) -> Dict[str, str]:
        return self._locations(self.service.zones, 'zones')

    def _locations(self, collection, label) -> Dict[str, str]:
        found = {}
        request = collection().list(project=self.project)
        while request is not None:
            resp = request.execute(num_retries=self.num_retries)
            for item in resp.get('items', []):
                found[item['selfLink']] = item['name']
            request = collection().list_next(previous_request=request, previous_response=resp)
        logging.info(f"Found {len(found)} {label} in project {self.project}")
        return found
