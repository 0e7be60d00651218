"""
Auto Scaling group listing and detail.
"""

from typing import Any, Dict, List

from ..catalog import AsgDetail, AwsResource, ScalingPolicy
from ..errors import NotFoundError
from .common import format_date, tag_list


def parse_group_list(groups: List[Dict[str, Any]]) -> List[AwsResource]:
    return [
        AwsResource(
            name=g["AutoScalingGroupName"],
            id=g["AutoScalingGroupName"],
            state=f"{len(g.get('Instances', []))}/{g.get('DesiredCapacity', 0)}",
        )
        for g in groups
    ]


def list_groups(autoscaling) -> List[AwsResource]:
    groups = []
    for page in autoscaling.get_paginator("describe_auto_scaling_groups").paginate():
        groups.extend(page.get("AutoScalingGroups", []))
    return parse_group_list(groups)


def parse_policies(policies: List[Dict[str, Any]]) -> List[ScalingPolicy]:
    return [
        ScalingPolicy(
            name=p.get("PolicyName", ""),
            policy_type=p.get("PolicyType", ""),
            adjustment_type=p.get("AdjustmentType"),
            scaling_adjustment=p.get("ScalingAdjustment"),
            cooldown=p.get("Cooldown"),
        )
        for p in policies
    ]


def parse_group_detail(group: Dict[str, Any], policies: List[ScalingPolicy]) -> AsgDetail:
    template = group.get("LaunchTemplate") or {}
    if not template:
        # Mixed instances policies nest the template one level deeper
        template = (group.get("MixedInstancesPolicy", {})
                    .get("LaunchTemplate", {})
                    .get("LaunchTemplateSpecification", {}))
    return AsgDetail(
        name=group["AutoScalingGroupName"],
        arn=group.get("AutoScalingGroupARN", ""),
        launch_template_name=template.get("LaunchTemplateName"),
        launch_template_id=template.get("LaunchTemplateId"),
        launch_config_name=group.get("LaunchConfigurationName"),
        min_size=group.get("MinSize", 0),
        max_size=group.get("MaxSize", 0),
        desired_capacity=group.get("DesiredCapacity", 0),
        default_cooldown=group.get("DefaultCooldown", 0),
        availability_zones=list(group.get("AvailabilityZones", [])),
        target_group_arns=list(group.get("TargetGroupARNs", [])),
        health_check_type=group.get("HealthCheckType", ""),
        health_check_grace_period=group.get("HealthCheckGracePeriod", 0),
        instances=[i["InstanceId"] for i in group.get("Instances", []) if i.get("InstanceId")],
        created_time=format_date(group.get("CreatedTime")),
        scaling_policies=policies,
        tags=tag_list(group.get("Tags")),
    )


def get_group_detail(autoscaling, name: str) -> AsgDetail:
    groups = autoscaling.describe_auto_scaling_groups(
        AutoScalingGroupNames=[name]
    ).get("AutoScalingGroups", [])
    if not groups:
        raise NotFoundError(f"Auto Scaling group {name} not found")

    policies = []
    for page in autoscaling.get_paginator("describe_policies").paginate(AutoScalingGroupName=name):
        policies.extend(page.get("ScalingPolicies", []))

    return parse_group_detail(groups[0], parse_policies(policies))
