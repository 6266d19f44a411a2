from leftovers.core.models import ResourceDescriptor
from leftovers.resources.base import AWSResourceKind


class LoadBalancers(AWSResourceKind):
    """Classic load balancers."""

    type_name = 'load balancer'
    plural = 'load balancers'
    not_found_codes = ['LoadBalancerNotFound']

    def collect(self):
        return self._pages('describe_load_balancers', 'LoadBalancerDescriptions', 'Marker', 'NextMarker')

    def describe(self, item):
        return ResourceDescriptor(item['LoadBalancerName'], '', self.type_name)

    def delete_one(self, name, location):
        self._call(lambda: self.client.delete_load_balancer(LoadBalancerName=name))
