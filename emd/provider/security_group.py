"""
Security group listing and detail.
"""

from typing import Any, Dict, List

from ..catalog import AwsResource, SecurityGroupDetail, SecurityRule
from ..errors import NotFoundError
from .common import name_tag

_PROTOCOLS = {"-1": "All", "tcp": "TCP", "udp": "UDP", "icmp": "ICMP"}


def parse_security_group_list(groups: List[Dict[str, Any]]) -> List[AwsResource]:
    resources = []
    for sg in groups:
        group_name = sg.get("GroupName", "")
        name = name_tag(sg.get("Tags"), default=group_name)
        resources.append(AwsResource(
            name=f"{name} ({group_name})",
            id=sg["GroupId"],
            state=sg.get("VpcId", ""),
        ))
    return resources


def list_security_groups(ec2) -> List[AwsResource]:
    groups = []
    for page in ec2.get_paginator("describe_security_groups").paginate():
        groups.extend(page.get("SecurityGroups", []))
    return parse_security_group_list(groups)


def protocol_label(ip_protocol: str) -> str:
    return _PROTOCOLS.get(ip_protocol, ip_protocol.upper())


def port_range(permission: Dict[str, Any]) -> str:
    if permission.get("IpProtocol") == "-1":
        return "All"
    from_port = permission.get("FromPort")
    to_port = permission.get("ToPort")
    if from_port is None or to_port is None:
        return "All"
    if from_port == to_port:
        return str(from_port)
    return f"{from_port}-{to_port}"


def parse_rules(permissions: List[Dict[str, Any]]) -> List[SecurityRule]:
    """
    Flatten IpPermissions into one rule per source.

    Each IPv4 range, IPv6 range and referenced security group of a
    permission becomes its own SecurityRule.
    """
    rules = []
    for perm in permissions:
        protocol = protocol_label(perm.get("IpProtocol", "-1"))
        ports = port_range(perm)

        sources = [(r.get("CidrIp", ""), r.get("Description")) for r in perm.get("IpRanges", [])]
        sources += [(r.get("CidrIpv6", ""), r.get("Description")) for r in perm.get("Ipv6Ranges", [])]
        sources += [
            (f"sg: {pair.get('GroupId', '')}", pair.get("Description"))
            for pair in perm.get("UserIdGroupPairs", [])
        ]

        for source, description in sources:
            rules.append(SecurityRule(
                protocol=protocol,
                port_range=ports,
                source_dest=source,
                description=description or "-",
            ))
    return rules


def parse_security_group_detail(sg: Dict[str, Any]) -> SecurityGroupDetail:
    return SecurityGroupDetail(
        name=name_tag(sg.get("Tags"), default=sg.get("GroupName", "")),
        id=sg["GroupId"],
        description=sg.get("Description", ""),
        vpc_id=sg.get("VpcId", ""),
        inbound_rules=parse_rules(sg.get("IpPermissions", [])),
        outbound_rules=parse_rules(sg.get("IpPermissionsEgress", [])),
    )


def get_security_group_detail(ec2, group_id: str) -> SecurityGroupDetail:
    groups = ec2.describe_security_groups(GroupIds=[group_id]).get("SecurityGroups", [])
    if not groups:
        raise NotFoundError(f"Security group {group_id} not found")
    return parse_security_group_detail(groups[0])
