"""
boto3-backed Resource Provider.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..catalog import AwsResource, ResourceDetail, ResourceType
from ..config import ProviderSettings
from ..errors import NotFoundError, ProviderError
from ..plan import NetworkStep, PartialNetworkDetail
from . import asg, ec2, ecr, load_balancer, network, security_group
from .base import ResourceProvider

logger = logging.getLogger(__name__)


@contextmanager
def _translate(operation: str, kind: Optional[ResourceType] = None, resource_id: Optional[str] = None):
    """Turn SDK exceptions raised inside the block into ProviderError."""
    try:
        yield
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "ClientError")
        message = e.response.get("Error", {}).get("Message", str(e))
        logger.warning(f"{operation} failed: {code}: {message}")
        raise ProviderError(f"{code}: {message}", kind=kind, resource_id=resource_id) from e
    except BotoCoreError as e:
        # NoCredentialsError, EndpointConnectionError, ... all derive from BotoCoreError
        logger.warning(f"{operation} failed: {e}")
        raise ProviderError(str(e), kind=kind, resource_id=resource_id) from e
    except NotFoundError as e:
        logger.warning(f"{operation} failed: {e}")
        raise ProviderError(str(e), kind=kind, resource_id=resource_id) from e


class AwsProvider(ResourceProvider):
    """
    Resource Provider talking to AWS through boto3.

    A fresh Session is built from the settings snapshot on every call, so
    region or profile changes on the UI thread never affect a call that is
    already running.
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or boto3.session.Session

    def _client(self, service: str, settings: ProviderSettings):
        logger.debug(f"Creating {service} client (region={settings.region}, profile={settings.profile})")
        session = self._session_factory(profile_name=settings.profile, region_name=settings.region)
        return session.client(service)

    def check_login(self, settings: ProviderSettings) -> str:
        with _translate("sts:GetCallerIdentity"):
            identity = self._client("sts", settings).get_caller_identity()
        account = identity.get("Account", "")
        arn = identity.get("Arn", "")
        logger.info(f"Authenticated as {arn}")
        return f"{account} ({arn})"

    def list(self, kind: ResourceType, settings: ProviderSettings) -> List[AwsResource]:
        logger.debug(f"list {kind.value} in {settings.region}")
        with _translate(f"list {kind.value}", kind=kind):
            if kind == ResourceType.EC2:
                return ec2.list_instances(self._client("ec2", settings))
            if kind == ResourceType.NETWORK:
                return network.list_vpcs(self._client("ec2", settings))
            if kind == ResourceType.SECURITY_GROUP:
                return security_group.list_security_groups(self._client("ec2", settings))
            if kind == ResourceType.LOAD_BALANCER:
                return load_balancer.list_load_balancers(self._client("elbv2", settings))
            if kind == ResourceType.ECR:
                return ecr.list_repositories(self._client("ecr", settings))
            if kind == ResourceType.ASG:
                return asg.list_groups(self._client("autoscaling", settings))
        raise ProviderError(f"Unsupported resource kind: {kind}", kind=kind)

    def detail(self, kind: ResourceType, resource_id: str, settings: ProviderSettings) -> ResourceDetail:
        """Fetch one non-network detail; network details are fetched with detail_step."""
        logger.debug(f"detail {kind.value} {resource_id} in {settings.region}")
        if kind == ResourceType.NETWORK:
            raise ProviderError("Network details are fetched step by step", kind=kind, resource_id=resource_id)
        with _translate(f"detail {kind.value} {resource_id}", kind=kind, resource_id=resource_id):
            if kind == ResourceType.EC2:
                return ec2.get_instance_detail(
                    self._client("ec2", settings), self._client("iam", settings), resource_id
                )
            if kind == ResourceType.SECURITY_GROUP:
                return security_group.get_security_group_detail(self._client("ec2", settings), resource_id)
            if kind == ResourceType.LOAD_BALANCER:
                return load_balancer.get_load_balancer_detail(self._client("elbv2", settings), resource_id)
            if kind == ResourceType.ECR:
                return ecr.get_repository_detail(self._client("ecr", settings), resource_id)
            if kind == ResourceType.ASG:
                return asg.get_group_detail(self._client("autoscaling", settings), resource_id)
        raise ProviderError(f"Unsupported resource kind: {kind}", kind=kind, resource_id=resource_id)

    def detail_step(self, vpc_id: str, step: NetworkStep, settings: ProviderSettings) -> PartialNetworkDetail:
        with _translate(f"network {step.name} {vpc_id}", kind=ResourceType.NETWORK, resource_id=vpc_id):
            return network.fetch_step(self._client("ec2", settings), vpc_id, step)
