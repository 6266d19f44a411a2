from typing import List

from leftovers.core.models import LocationIndex, ResourceDescriptor, short_location
from leftovers.core.operation import OperationWaiter
from leftovers.core.paginate import collect
from leftovers.gcp.compute.client import GLOBAL, REGION, ZONE, ComputeClient, Endpoint
from leftovers.resources.base import ResourceKind

# Dependents come before the things they use.
ENDPOINTS = [
    Endpoint('forwardingRules', 'forwardingRule', 'forwarding rule', 'forwarding rules', REGION),
    Endpoint('globalForwardingRules', 'forwardingRule', 'global forwarding rule', 'global forwarding rules'),
    Endpoint('targetHttpsProxies', 'targetHttpsProxy', 'target https proxy', 'target https proxies',
             prerequisites=('global forwarding rules',)),
    Endpoint('targetHttpProxies', 'targetHttpProxy', 'target http proxy', 'target http proxies',
             prerequisites=('global forwarding rules',)),
    Endpoint('sslCertificates', 'sslCertificate', 'ssl certificate', 'ssl certificates',
             prerequisites=('target https proxies',)),
    Endpoint('urlMaps', 'urlMap', 'url map', 'url maps',
             prerequisites=('target http proxies', 'target https proxies')),
    Endpoint('backendServices', 'backendService', 'backend service', 'backend services',
             prerequisites=('url maps',)),
    Endpoint('targetPools', 'targetPool', 'target pool', 'target pools', REGION,
             prerequisites=('forwarding rules',)),
    Endpoint('instanceGroupManagers', 'instanceGroupManager', 'instance group manager', 'instance group managers',
             ZONE, prerequisites=('backend services',)),
    Endpoint('instanceGroups', 'instanceGroup', 'instance group', 'instance groups', ZONE,
             prerequisites=('instance group managers', 'backend services')),
    Endpoint('instances', 'instance', 'instance', 'instances', ZONE,
             prerequisites=('instance groups', 'target pools')),
    Endpoint('instanceTemplates', 'instanceTemplate', 'instance template', 'instance templates',
             prerequisites=('instance group managers',)),
    Endpoint('disks', 'disk', 'disk', 'disks', ZONE, prerequisites=('instances',)),
    Endpoint('images', 'image', 'image', 'images'),
    Endpoint('healthChecks', 'healthCheck', 'global health check', 'global health checks',
             prerequisites=('backend services',)),
    Endpoint('httpHealthChecks', 'httpHealthCheck', 'http health check', 'http health checks',
             prerequisites=('backend services', 'target pools')),
    Endpoint('httpsHealthChecks', 'httpsHealthCheck', 'https health check', 'https health checks',
             prerequisites=('backend services', 'target pools')),
    Endpoint('firewalls', 'firewall', 'firewall', 'firewalls'),
    Endpoint('subnetworks', 'subnetwork', 'subnetwork', 'subnetworks', REGION,
             prerequisites=('instances', 'forwarding rules')),
    Endpoint('networks', 'network', 'network', 'networks', prerequisites=('subnetworks', 'firewalls')),
    Endpoint('addresses', 'address', 'address', 'addresses', REGION, prerequisites=('forwarding rules',)),
    Endpoint('globalAddresses', 'address', 'global address', 'global addresses',
             prerequisites=('global forwarding rules',)),
]


class ComputeKind(ResourceKind):
    """A Compute Engine collection. Deletes return operations that are waited on."""

    def __init__(self, client: ComputeClient, endpoint: Endpoint, logger, locations: LocationIndex = None,
                 waiter: OperationWaiter = None, dry_run: bool = False):
        super().__init__(logger, dry_run=dry_run,
                         waiter=waiter or OperationWaiter(client.get_operation))
        self.client = client
        self.endpoint = endpoint
        self.locations = locations if locations is not None else {}
        self.type_name = endpoint.type_name
        self.plural = endpoint.plural

    @property
    def prerequisites(self):
        return list(self.endpoint.prerequisites)

    def collect(self) -> List[dict]:
        if self.endpoint.scope == GLOBAL:
            return collect(lambda token: self.client.list_page(self.endpoint, '', token), self.plural)

        items = []
        for location in sorted(set(self.locations.values())):
            items.extend(collect(
                lambda token, location=location: self.client.list_page(self.endpoint, location, token),
                self.plural,
                f"{self.endpoint.scope} {location}",
            ))
        return items

    def describe(self, item):
        location = ''
        if self.endpoint.scope != GLOBAL:
            location = short_location(item.get(self.endpoint.scope, ''), self.locations)
        return ResourceDescriptor(item['name'], location, self.type_name)

    def delete_one(self, name, location):
        return self.client.delete(self.endpoint, location, name)


def build_kinds(client: ComputeClient, logger, regions: LocationIndex, zones: LocationIndex,
                waiter: OperationWaiter, dry_run: bool = False) -> List[ComputeKind]:
    kinds = []
    for endpoint in ENDPOINTS:
        locations = {REGION: regions, ZONE: zones}.get(endpoint.scope)
        kinds.append(ComputeKind(client, endpoint, logger, locations=locations, waiter=waiter, dry_run=dry_run))
    return kinds
