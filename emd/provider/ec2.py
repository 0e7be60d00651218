"""
EC2 instance listing and detail.
"""

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from ..catalog import AwsResource, Ec2Detail, VolumeDetail
from ..errors import NotFoundError
from .common import format_datetime, name_tag, tag_list
from .iam import get_role_for_instance_profile

logger = logging.getLogger(__name__)


def parse_instance_list(reservations: List[Dict[str, Any]]) -> List[AwsResource]:
    resources = []
    for reservation in reservations:
        for instance in reservation.get("Instances", []):
            resources.append(AwsResource(
                name=name_tag(instance.get("Tags")),
                id=instance["InstanceId"],
                state=instance.get("State", {}).get("Name", ""),
                az=instance.get("Placement", {}).get("AvailabilityZone", ""),
            ))
    return resources


def list_instances(ec2) -> List[AwsResource]:
    reservations = []
    paginator = ec2.get_paginator("describe_instances")
    for page in paginator.paginate():
        reservations.extend(page.get("Reservations", []))
    return parse_instance_list(reservations)


def parse_volumes(instance: Dict[str, Any], volumes: List[Dict[str, Any]]) -> List[VolumeDetail]:
    """Join the instance's block device mappings with describe_volumes output."""
    by_id = {v.get("VolumeId"): v for v in volumes}
    result = []
    for mapping in instance.get("BlockDeviceMappings", []):
        ebs = mapping.get("Ebs")
        if not ebs:
            continue
        volume = by_id.get(ebs.get("VolumeId"), {})
        result.append(VolumeDetail(
            device_name=mapping.get("DeviceName", ""),
            volume_id=ebs.get("VolumeId", ""),
            size_gb=volume.get("Size", 0),
            volume_type=volume.get("VolumeType", ""),
            iops=volume.get("Iops"),
            encrypted=volume.get("Encrypted", False),
            delete_on_termination=ebs.get("DeleteOnTermination", False),
        ))
    return result


def decode_user_data(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return base64.b64decode(value).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        return None


def parse_instance_detail(instance: Dict[str, Any], volumes: List[Dict[str, Any]],
                          ami_name: str = "", user_data: Optional[str] = None) -> Ec2Detail:
    image_id = instance.get("ImageId", "")
    return Ec2Detail(
        name=name_tag(instance.get("Tags")),
        instance_id=instance["InstanceId"],
        instance_type=instance.get("InstanceType", ""),
        ami=f"{ami_name} ({image_id})" if ami_name else image_id,
        platform=instance.get("PlatformDetails", instance.get("Platform", "Linux/UNIX")),
        architecture=instance.get("Architecture", ""),
        key_pair=instance.get("KeyName", "-"),
        vpc=instance.get("VpcId", ""),
        subnet=instance.get("SubnetId", ""),
        az=instance.get("Placement", {}).get("AvailabilityZone", ""),
        public_ip=instance.get("PublicIpAddress", "-"),
        private_ip=instance.get("PrivateIpAddress", "-"),
        security_groups=[
            f"{sg.get('GroupName', '')} ({sg.get('GroupId', '')})"
            for sg in instance.get("SecurityGroups", [])
        ],
        state=instance.get("State", {}).get("Name", ""),
        ebs_optimized=instance.get("EbsOptimized", False),
        monitoring="Enabled" if instance.get("Monitoring", {}).get("State") == "enabled" else "Disabled",
        launch_time=format_datetime(instance.get("LaunchTime")),
        tags=tag_list(instance.get("Tags")),
        volumes=parse_volumes(instance, volumes),
        user_data=user_data,
    )


def get_instance_detail(ec2, iam, instance_id: str) -> Ec2Detail:
    response = ec2.describe_instances(InstanceIds=[instance_id])
    instances = [i for r in response.get("Reservations", []) for i in r.get("Instances", [])]
    if not instances:
        raise NotFoundError(f"Instance {instance_id} not found")
    instance = instances[0]

    volume_ids = [
        m["Ebs"]["VolumeId"] for m in instance.get("BlockDeviceMappings", [])
        if m.get("Ebs", {}).get("VolumeId")
    ]
    volumes = ec2.describe_volumes(VolumeIds=volume_ids).get("Volumes", []) if volume_ids else []

    ami_name = ""
    if instance.get("ImageId"):
        images = ec2.describe_images(ImageIds=[instance["ImageId"]]).get("Images", [])
        if images:
            ami_name = images[0].get("Name", "")

    user_data = None
    try:
        attribute = ec2.describe_instance_attribute(InstanceId=instance_id, Attribute="userData")
        user_data = decode_user_data(attribute.get("UserData", {}).get("Value"))
    except ClientError as e:
        logger.warning(f"User data for {instance_id} unavailable: {e}")

    detail = parse_instance_detail(instance, volumes, ami_name, user_data)

    profile_arn = instance.get("IamInstanceProfile", {}).get("Arn")
    if profile_arn:
        role = get_role_for_instance_profile(iam, profile_arn)
        if role is not None:
            detail.iam_role = role.name
            detail.iam_role_detail = role

    return detail
