"""
Elastic Load Balancing v2 listing and detail.
"""

from typing import Any, Dict, List

from ..catalog import AwsResource, ListenerInfo, LoadBalancerDetail, TargetGroupInfo, TargetInfo
from ..errors import NotFoundError
from ..render import target_group_name_from_arn


def parse_load_balancer_list(lbs: List[Dict[str, Any]]) -> List[AwsResource]:
    return [
        AwsResource(
            name=lb.get("LoadBalancerName", ""),
            id=lb["LoadBalancerArn"],
            state=lb.get("State", {}).get("Code", ""),
            az=lb.get("Type", ""),
        )
        for lb in lbs
    ]


def list_load_balancers(elbv2) -> List[AwsResource]:
    lbs = []
    for page in elbv2.get_paginator("describe_load_balancers").paginate():
        lbs.extend(page.get("LoadBalancers", []))
    return parse_load_balancer_list(lbs)


def default_action(actions: List[Dict[str, Any]]) -> str:
    """Describe a listener's first default action, e.g. "forward: web-tg"."""
    if not actions:
        return "-"
    action = actions[0]
    action_type = action.get("Type", "")
    if action_type == "forward" and action.get("TargetGroupArn"):
        return f"forward: {target_group_name_from_arn(action['TargetGroupArn'])}"
    if action_type == "redirect":
        redirect = action.get("RedirectConfig", {})
        return f"redirect: {redirect.get('Protocol', '#{protocol}')}:{redirect.get('Port', '#{port}')}"
    if action_type == "fixed-response":
        return f"fixed-response: {action.get('FixedResponseConfig', {}).get('StatusCode', '')}"
    return action_type or "-"


def parse_listeners(listeners: List[Dict[str, Any]]) -> List[ListenerInfo]:
    return [
        ListenerInfo(
            protocol=listener.get("Protocol", ""),
            port=listener.get("Port", 0),
            default_action=default_action(listener.get("DefaultActions", [])),
        )
        for listener in listeners
    ]


def parse_targets(descriptions: List[Dict[str, Any]]) -> List[TargetInfo]:
    return [
        TargetInfo(
            id=d.get("Target", {}).get("Id", ""),
            port=d.get("Target", {}).get("Port"),
            health=d.get("TargetHealth", {}).get("State", ""),
        )
        for d in descriptions
    ]


def parse_target_group(tg: Dict[str, Any], targets: List[TargetInfo]) -> TargetGroupInfo:
    return TargetGroupInfo(
        name=tg.get("TargetGroupName", ""),
        arn=tg.get("TargetGroupArn", ""),
        protocol=tg.get("Protocol", ""),
        port=tg.get("Port", 0),
        target_type=tg.get("TargetType", ""),
        health_check_protocol=tg.get("HealthCheckProtocol", ""),
        health_check_path=tg.get("HealthCheckPath", ""),
        healthy_threshold=tg.get("HealthyThresholdCount", 0),
        unhealthy_threshold=tg.get("UnhealthyThresholdCount", 0),
        targets=targets,
    )


def parse_load_balancer_detail(lb: Dict[str, Any], listeners: List[ListenerInfo],
                               target_groups: List[TargetGroupInfo]) -> LoadBalancerDetail:
    return LoadBalancerDetail(
        name=lb.get("LoadBalancerName", ""),
        arn=lb["LoadBalancerArn"],
        dns_name=lb.get("DNSName", ""),
        lb_type=lb.get("Type", ""),
        scheme=lb.get("Scheme", ""),
        vpc_id=lb.get("VpcId", ""),
        ip_address_type=lb.get("IpAddressType", ""),
        state=lb.get("State", {}).get("Code", ""),
        availability_zones=[az.get("ZoneName", "") for az in lb.get("AvailabilityZones", [])],
        security_groups=list(lb.get("SecurityGroups", [])),
        listeners=listeners,
        target_groups=target_groups,
    )


def get_load_balancer_detail(elbv2, arn: str) -> LoadBalancerDetail:
    lbs = elbv2.describe_load_balancers(LoadBalancerArns=[arn]).get("LoadBalancers", [])
    if not lbs:
        raise NotFoundError(f"Load balancer {arn} not found")

    listeners = []
    for page in elbv2.get_paginator("describe_listeners").paginate(LoadBalancerArn=arn):
        listeners.extend(page.get("Listeners", []))

    target_groups = []
    for page in elbv2.get_paginator("describe_target_groups").paginate(LoadBalancerArn=arn):
        for tg in page.get("TargetGroups", []):
            health = elbv2.describe_target_health(TargetGroupArn=tg["TargetGroupArn"])
            targets = parse_targets(health.get("TargetHealthDescriptions", []))
            target_groups.append(parse_target_group(tg, targets))

    return parse_load_balancer_detail(lbs[0], parse_listeners(listeners), target_groups)
