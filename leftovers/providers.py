"""Wiring from configuration to the list of active resource kinds.

Everything a run needs is built here once and passed down explicitly.
"""
import json
import logging
from typing import List

import boto3
from botocore.exceptions import BotoCoreError
from google.oauth2 import service_account
from googleapiclient import discovery

from leftovers.core.config import Config
from leftovers.core.errors import CredentialsError, TransportError
from leftovers.core.models import build_location_index
from leftovers.core.operation import OperationWaiter
from leftovers.gcp.compute.client import ComputeClient
from leftovers.gcp.compute.kinds import build_kinds
from leftovers.resources.base import ResourceKind
from leftovers.resources.ec2 import Instances, KeyPairs, SecurityGroups, Tags, Volumes
from leftovers.resources.elb import LoadBalancers
from leftovers.resources.iam import (InstanceProfiles, RolePolicies, Roles, ServerCertificates, UserPolicies,
                                     Users)

GCP_SCOPES = ['https://www.googleapis.com/auth/compute']


def _active(config: Config, kinds: List[ResourceKind]) -> List[ResourceKind]:
    active = [k for k in kinds if config.should_include_resource(k.plural)]
    skipped = [k.plural for k in kinds if k not in active]
    if skipped:
        logging.info(f"Resource types not selected: {skipped}")
    return active


def aws_session(config: Config) -> boto3.session.Session:
    if not config.aws.region:
        raise CredentialsError("Missing AWS_REGION.")

    session = boto3.session.Session(
        aws_access_key_id=config.aws.access_key_id,
        aws_secret_access_key=config.aws.secret_access_key,
        region_name=config.aws.region,
    )
    if session.get_credentials() is None:
        raise CredentialsError("Missing AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY.")
    return session


def build_aws(config: Config, logger, session: boto3.session.Session = None) -> List[ResourceKind]:
    session = session or aws_session(config)
    try:
        iam = session.client('iam')
        ec2 = session.client('ec2')
        elb = session.client('elb')
    except BotoCoreError as e:
        raise CredentialsError(f"Creating AWS clients: {e}") from e

    opts = dict(dry_run=config.dry_run, list_max_attempts=config.list_max_attempts)
    kinds = [
        InstanceProfiles(iam, logger, **opts),
        Roles(iam, logger, RolePolicies(iam), **opts),
        Users(iam, logger, UserPolicies(iam), **opts),
        LoadBalancers(elb, logger, **opts),
        ServerCertificates(iam, logger, **opts),
        Volumes(ec2, logger, **opts),
        Tags(ec2, logger, **opts),
        KeyPairs(ec2, logger, **opts),
        Instances(ec2, logger, **opts),
        SecurityGroups(ec2, logger, **opts),
    ]
    return _active(config, kinds)


def gcp_client(config: Config) -> ComputeClient:
    key_path = config.gcp.service_account_key
    if not key_path:
        raise CredentialsError("Missing GOOGLE_APPLICATION_CREDENTIALS (service account key).")

    try:
        with open(key_path) as f:
            key = json.load(f)
        credentials = service_account.Credentials.from_service_account_info(key, scopes=GCP_SCOPES)
    except (OSError, ValueError) as e:
        raise CredentialsError(f"Reading service account key {key_path}: {e}") from e

    project = config.gcp.project_id or key.get('project_id')
    if not project:
        raise CredentialsError("Service account key has no project_id.")

    service = discovery.build('compute', 'v1', credentials=credentials, cache_discovery=False)
    return ComputeClient(project, service, num_retries=config.list_max_attempts - 1)


def build_gcp(config: Config, logger, client: ComputeClient = None) -> List[ResourceKind]:
    client = client or gcp_client(config)

    try:
        regions = build_location_index(client.list_regions())
    except Exception as e:
        raise TransportError('regions', '', e) from e
    try:
        zones = build_location_index(client.list_zones())
    except Exception as e:
        raise TransportError('zones', '', e) from e

    waiter = OperationWaiter(client.get_operation, interval=config.operation_poll_interval,
                             timeout=config.operation_timeout)
    kinds = build_kinds(client, logger, regions, zones, waiter, dry_run=config.dry_run)
    return _active(config, kinds)


def build_kinds_for(config: Config, logger) -> List[ResourceKind]:
    if config.provider == 'aws':
        return build_aws(config, logger)
    if config.provider == 'gcp':
        return build_gcp(config, logger)
    raise CredentialsError(f"Unknown provider {config.provider!r}")
