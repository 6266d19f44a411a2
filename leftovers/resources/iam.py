import logging

from leftovers.core.models import ResourceDescriptor
from leftovers.resources.base import AWSResourceKind

SERVICE_LINKED_ROLE_PATH = '/aws-service-role/'


class RolePolicies:
    """Detaches managed policies and deletes inline policies of one role."""

    def __init__(self, client):
        self.client = client

    def delete(self, role_name):
        attached = self.client.list_attached_role_policies(RoleName=role_name).get('AttachedPolicies', [])
        for p in attached:
            p_arn = p['PolicyArn']
            logging.info(f"Detaching policy {p_arn} from role {role_name}")
            self.client.detach_role_policy(RoleName=role_name, PolicyArn=p_arn)

        inlines = self.client.list_role_policies(RoleName=role_name).get('PolicyNames', [])
        for pol in inlines:
            logging.info(f"Deleting inline policy {pol} from role {role_name}")
            self.client.delete_role_policy(RoleName=role_name, PolicyName=pol)


class UserPolicies:
    """Detaches managed policies and deletes inline policies of one user."""

    def __init__(self, client):
        self.client = client

    def delete(self, user_name):
        attached = self.client.list_attached_user_policies(UserName=user_name).get('AttachedPolicies', [])
        for p in attached:
            p_arn = p['PolicyArn']
            logging.info(f"Detaching policy {p_arn} from user {user_name}")
            self.client.detach_user_policy(UserName=user_name, PolicyArn=p_arn)

        inlines = self.client.list_user_policies(UserName=user_name).get('PolicyNames', [])
        for pol in inlines:
            logging.info(f"Deleting inline policy {pol} from user {user_name}")
            self.client.delete_user_policy(UserName=user_name, PolicyName=pol)


class InstanceProfiles(AWSResourceKind):
    type_name = 'instance profile'
    plural = 'instance profiles'
    not_found_codes = ['NoSuchEntity']

    def collect(self):
        return self._pages('list_instance_profiles', 'InstanceProfiles', 'Marker', 'Marker')

    def describe(self, item):
        return ResourceDescriptor(item['InstanceProfileName'], '', self.type_name)

    def delete_one(self, name, location):
        profile = self._call(lambda: self.client.get_instance_profile(InstanceProfileName=name))
        for role in profile['InstanceProfile'].get('Roles', []):
            role_name = role['RoleName']
            logging.info(f"Removing role {role_name} from instance profile {name}")
            self._call(lambda: self.client.remove_role_from_instance_profile(
                InstanceProfileName=name, RoleName=role_name))
        self._call(lambda: self.client.delete_instance_profile(InstanceProfileName=name))


class Roles(AWSResourceKind):
    type_name = 'role'
    plural = 'roles'
    not_found_codes = ['NoSuchEntity']

    def __init__(self, client, logger, policies: RolePolicies = None, **kwargs):
        super().__init__(client, logger, **kwargs)
        self.policies = policies or RolePolicies(client)

    @property
    def prerequisites(self):
        return ['instance profiles']

    def collect(self):
        roles = self._pages('list_roles', 'Roles', 'Marker', 'Marker')
        # Service-linked roles belong to their service and cannot be deleted directly.
        return [r for r in roles if not r.get('Path', '/').startswith(SERVICE_LINKED_ROLE_PATH)]

    def describe(self, item):
        return ResourceDescriptor(item['RoleName'], '', self.type_name)

    def delete_one(self, name, location):
        self._call(lambda: self.policies.delete(name))
        self._call(lambda: self.client.delete_role(RoleName=name))


class Users(AWSResourceKind):
    type_name = 'user'
    plural = 'users'
    not_found_codes = ['NoSuchEntity']

    def __init__(self, client, logger, policies: UserPolicies = None, **kwargs):
        super().__init__(client, logger, **kwargs)
        self.policies = policies or UserPolicies(client)

    def collect(self):
        return self._pages('list_users', 'Users', 'Marker', 'Marker')

    def describe(self, item):
        return ResourceDescriptor(item['UserName'], '', self.type_name)

    def delete_one(self, name, location):
        self._call(lambda: self.policies.delete(name))
        keys = self._call(lambda: self.client.list_access_keys(UserName=name)).get('AccessKeyMetadata', [])
        for key in keys:
            key_id = key['AccessKeyId']
            logging.info(f"Deleting access key {key_id} of user {name}")
            self._call(lambda: self.client.delete_access_key(UserName=name, AccessKeyId=key_id))
        self._call(lambda: self.client.delete_user(UserName=name))


class ServerCertificates(AWSResourceKind):
    type_name = 'server certificate'
    plural = 'server certificates'
    not_found_codes = ['NoSuchEntity']

    @property
    def prerequisites(self):
        return ['load balancers']

    def collect(self):
        return self._pages('list_server_certificates', 'ServerCertificateMetadataList', 'Marker', 'Marker')

    def describe(self, item):
        return ResourceDescriptor(item['ServerCertificateName'], '', self.type_name)

    def delete_one(self, name, location):
        self._call(lambda: self.client.delete_server_certificate(ServerCertificateName=name))
