import logging
from typing import Dict, Tuple

from botocore.exceptions import ClientError

from leftovers.core.models import ResourceDescriptor
from leftovers.resources.base import AWSResourceKind

LIVE_INSTANCE_STATES = ['pending', 'running', 'stopping', 'stopped']


def _resource_id(name):
    # Names look like "i-0abc (Name:web)"; the id is the first word.
    return name.split(' ', 1)[0]


def _tag_suffix(tags):
    pairs = [f"{t['Key']}:{t['Value']}" for t in tags or []]
    return f" ({', '.join(pairs)})" if pairs else ''


class Volumes(AWSResourceKind):
    type_name = 'volume'
    plural = 'volumes'
    not_found_codes = ['InvalidVolume.NotFound']

    def collect(self):
        return self._pages('describe_volumes', 'Volumes', 'NextToken', 'NextToken')

    def describe(self, item):
        return ResourceDescriptor(item['VolumeId'], '', self.type_name)

    def delete_one(self, name, location):
        self._call(lambda: self.client.delete_volume(VolumeId=name))


class Tags(AWSResourceKind):
    """Tags are grouped by key and value; deleting one removes it from every resource carrying it."""

    type_name = 'tag'
    plural = 'tags'

    def __init__(self, client, logger, **kwargs):
        super().__init__(client, logger, **kwargs)
        self._resources: Dict[str, dict] = {}

    def collect(self):
        grouped: Dict[Tuple[str, str], dict] = {}
        for tag in self._pages('describe_tags', 'Tags', 'NextToken', 'NextToken'):
            key, value = tag['Key'], tag.get('Value', '')
            entry = grouped.setdefault((key, value), {'Key': key, 'Value': value, 'ResourceIds': []})
            entry['ResourceIds'].append(tag['ResourceId'])

        self._resources = {}
        for entry in grouped.values():
            self._resources.setdefault(self.describe(entry).name, entry)
        return list(grouped.values())

    def describe(self, item):
        return ResourceDescriptor(f"{item['Key']}:{item['Value']}", '', self.type_name)

    def delete_one(self, name, location):
        # Keys may contain ":"; the entry holds the real key and value.
        entry = self._resources.get(name)
        if not entry:
            return
        tag = {'Key': entry['Key'], 'Value': entry['Value']}
        self._call(lambda: self.client.delete_tags(Resources=entry['ResourceIds'], Tags=[tag]))


class KeyPairs(AWSResourceKind):
    type_name = 'key pair'
    plural = 'key pairs'
    not_found_codes = ['InvalidKeyPair.NotFound']

    def collect(self):
        # describe_key_pairs answers in a single page.
        return self._pages('describe_key_pairs', 'KeyPairs', 'NextToken', 'NextToken')

    def describe(self, item):
        return ResourceDescriptor(item['KeyName'], '', self.type_name)

    def delete_one(self, name, location):
        self._call(lambda: self.client.delete_key_pair(KeyName=name))


class Instances(AWSResourceKind):
    type_name = 'instance'
    plural = 'instances'
    not_found_codes = ['InvalidInstanceID.NotFound']

    @property
    def prerequisites(self):
        return ['load balancers']

    def collect(self):
        reservations = self._pages(
            'describe_instances', 'Reservations', 'NextToken', 'NextToken',
            Filters=[{'Name': 'instance-state-name', 'Values': LIVE_INSTANCE_STATES}],
        )
        return [i for r in reservations for i in r.get('Instances', [])]

    def describe(self, item):
        return ResourceDescriptor(f"{item['InstanceId']}{_tag_suffix(item.get('Tags'))}", '', self.type_name)

    def delete_one(self, name, location):
        instance_id = _resource_id(name)
        try:
            attr = self.client.describe_instance_attribute(InstanceId=instance_id, Attribute='disableApiTermination')
            if attr['DisableApiTermination']['Value']:
                logging.info(f"Disabling termination protection for {instance_id}")
                self.client.modify_instance_attribute(InstanceId=instance_id, DisableApiTermination={'Value': False})
        except ClientError as e:
            logging.warning(f"Failed to check/disable termination protection for {instance_id}: {e}")

        self._call(lambda: self.client.terminate_instances(InstanceIds=[instance_id]))


class SecurityGroups(AWSResourceKind):
    type_name = 'security group'
    plural = 'security groups'
    not_found_codes = ['InvalidGroup.NotFound']

    @property
    def prerequisites(self):
        return ['instances', 'load balancers']

    def collect(self):
        groups = self._pages('describe_security_groups', 'SecurityGroups', 'NextToken', 'NextToken')
        # Every VPC owns a default group that cannot be deleted.
        return [g for g in groups if g.get('GroupName') != 'default']

    def describe(self, item):
        return ResourceDescriptor(f"{item['GroupId']} ({item['GroupName']})", '', self.type_name)

    def delete_one(self, name, location):
        group_id = _resource_id(name)
        groups = self._call(lambda: self.client.describe_security_groups(GroupIds=[group_id]))['SecurityGroups']
        for group in groups:
            # Rules that reference other groups block their deletion.
            if group.get('IpPermissions'):
                self._call(lambda: self.client.revoke_security_group_ingress(
                    GroupId=group_id, IpPermissions=group['IpPermissions']))
            if group.get('IpPermissionsEgress'):
                self._call(lambda: self.client.revoke_security_group_egress(
                    GroupId=group_id, IpPermissions=group['IpPermissionsEgress']))

        self._call(lambda: self.client.delete_security_group(GroupId=group_id))
