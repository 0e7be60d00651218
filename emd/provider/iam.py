"""
IAM role lookup for EC2 instance profiles.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from ..catalog import AttachedPolicy, IamRoleDetail, InlinePolicy

logger = logging.getLogger(__name__)


def policy_json(document: Any) -> str:
    """Pretty-print a policy document (boto3 already decodes it to a dict)."""
    if document is None:
        return ""
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError:
            return document
    return json.dumps(document, indent=2)


def instance_profile_name(profile_arn: str) -> str:
    """arn:aws:iam::123:instance-profile/path/name -> name"""
    return profile_arn.rsplit("/", 1)[-1]


def parse_attached_policies(response: Dict[str, Any]) -> List[AttachedPolicy]:
    return [
        AttachedPolicy(name=p.get("PolicyName", ""), arn=p.get("PolicyArn", ""))
        for p in response.get("AttachedPolicies", [])
    ]


def build_inline_policies(policy_names: List[str], fetch_document: Callable[[str], Optional[str]]) -> List[InlinePolicy]:
    """
    Fetch inline policy documents by name, skipping any that cannot be read.

    Args:
        policy_names: Inline policy names of the role
        fetch_document: Returns the document for a name, or None

    Returns:
        Policies whose document could be fetched, in name order
    """
    policies = []
    for name in policy_names:
        document = fetch_document(name)
        if document is not None:
            policies.append(InlinePolicy(name=name, document=document))
    return policies


def build_role_detail(response: Dict[str, Any], attached: List[AttachedPolicy],
                      inline: List[InlinePolicy]) -> Optional[IamRoleDetail]:
    role = response.get("Role", {})
    name = role.get("RoleName", "")
    arn = role.get("Arn", "")
    if not name or not arn:
        return None
    return IamRoleDetail(
        name=name,
        arn=arn,
        assume_role_policy=policy_json(role.get("AssumeRolePolicyDocument")),
        attached_policies=attached,
        inline_policies=inline,
    )


def get_role_for_instance_profile(iam, profile_arn: str) -> Optional[IamRoleDetail]:
    """
    Resolve an instance profile to its role detail.

    IAM is best effort: missing permissions produce a warning and None
    instead of failing the whole EC2 detail.
    """
    try:
        profile = iam.get_instance_profile(InstanceProfileName=instance_profile_name(profile_arn))
        roles = profile.get("InstanceProfile", {}).get("Roles", [])
        if not roles:
            return None
        role_name = roles[0]["RoleName"]
        return get_role_detail(iam, role_name)
    except ClientError as e:
        logger.warning(f"IAM lookup for {profile_arn} failed: {e}")
        return None


def get_role_detail(iam, role_name: str) -> Optional[IamRoleDetail]:
    role = iam.get_role(RoleName=role_name)

    attached = []
    paginator = iam.get_paginator("list_attached_role_policies")
    for page in paginator.paginate(RoleName=role_name):
        attached.extend(parse_attached_policies(page))

    names = []
    paginator = iam.get_paginator("list_role_policies")
    for page in paginator.paginate(RoleName=role_name):
        names.extend(page.get("PolicyNames", []))

    def fetch_document(policy_name: str) -> Optional[str]:
        try:
            response = iam.get_role_policy(RoleName=role_name, PolicyName=policy_name)
        except ClientError as e:
            logger.warning(f"Inline policy {policy_name} of {role_name} unreadable: {e}")
            return None
        return policy_json(response.get("PolicyDocument"))

    return build_role_detail(role, attached, build_inline_policies(names, fetch_document))
