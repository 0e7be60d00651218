"""
VPC listing and the seven network detail steps.

Each fetch_* function performs one step and returns a PartialNetworkDetail
carrying only that step's data.
"""

import logging
from typing import Any, Callable, Dict, List

from ..catalog import (
    AwsResource, DnsAttributes, EipDetail, IgwDetail, NatDetail, RouteEntry,
    RouteTableDetail, SubnetDetail, VpcInfo,
)
from ..errors import NotFoundError
from ..plan import NetworkStep, PartialNetworkDetail, partial_for_step
from .common import name_tag, tag_list

logger = logging.getLogger(__name__)

# Route target keys in the order they are checked
_ROUTE_TARGET_KEYS = (
    "GatewayId",
    "NatGatewayId",
    "TransitGatewayId",
    "VpcPeeringConnectionId",
    "NetworkInterfaceId",
    "InstanceId",
    "EgressOnlyInternetGatewayId",
    "VpcEndpointId",
    "LocalGatewayId",
    "CarrierGatewayId",
)


def parse_vpc_list(vpcs: List[Dict[str, Any]]) -> List[AwsResource]:
    return [
        AwsResource(
            name=name_tag(vpc.get("Tags")),
            id=vpc["VpcId"],
            state=vpc.get("State", ""),
            cidr=vpc.get("CidrBlock", ""),
        )
        for vpc in vpcs
    ]


def list_vpcs(ec2) -> List[AwsResource]:
    vpcs = []
    for page in ec2.get_paginator("describe_vpcs").paginate():
        vpcs.extend(page.get("Vpcs", []))
    return parse_vpc_list(vpcs)


def parse_vpc_info(vpc: Dict[str, Any]) -> VpcInfo:
    return VpcInfo(
        name=name_tag(vpc.get("Tags")),
        id=vpc["VpcId"],
        cidr=vpc.get("CidrBlock", ""),
        state=vpc.get("State", ""),
        tags=tag_list(vpc.get("Tags")),
    )


def parse_subnets(subnets: List[Dict[str, Any]]) -> List[SubnetDetail]:
    return [
        SubnetDetail(
            name=name_tag(s.get("Tags")),
            id=s["SubnetId"],
            cidr=s.get("CidrBlock", ""),
            az=s.get("AvailabilityZone", ""),
        )
        for s in subnets
    ]


def parse_internet_gateways(igws: List[Dict[str, Any]], vpc_id: str) -> List[IgwDetail]:
    return [
        IgwDetail(name=name_tag(igw.get("Tags")), id=igw["InternetGatewayId"], vpc_id=vpc_id)
        for igw in igws
    ]


def parse_nat_gateways(nats: List[Dict[str, Any]]) -> List[NatDetail]:
    result = []
    for nat in nats:
        addresses = nat.get("NatGatewayAddresses", [])
        first = addresses[0] if addresses else {}
        mode = nat.get("AvailabilityMode", "zonal")
        result.append(NatDetail(
            name=name_tag(nat.get("Tags")),
            id=nat["NatGatewayId"],
            state=nat.get("State", ""),
            connectivity_type=nat.get("ConnectivityType", "public"),
            availability_mode=mode,
            auto_scaling_ips=nat.get("AutoScalingIps", "disabled"),
            auto_provision_zones=nat.get("AutoProvisionZones", "disabled"),
            public_ip=first.get("PublicIp", ""),
            allocation_id=first.get("AllocationId", ""),
            subnet_id=nat.get("SubnetId", ""),
            tags=tag_list(nat.get("Tags")),
        ))
    return result


def route_target(route: Dict[str, Any]) -> str:
    for key in _ROUTE_TARGET_KEYS:
        if route.get(key):
            return route[key]
    return "-"


def parse_route_tables(tables: List[Dict[str, Any]]) -> List[RouteTableDetail]:
    result = []
    for table in tables:
        routes = [
            RouteEntry(
                destination=(route.get("DestinationCidrBlock")
                             or route.get("DestinationIpv6CidrBlock")
                             or route.get("DestinationPrefixListId", "-")),
                target=route_target(route),
                state=route.get("State", ""),
            )
            for route in table.get("Routes", [])
        ]
        associations = [
            assoc["SubnetId"] for assoc in table.get("Associations", []) if assoc.get("SubnetId")
        ]
        result.append(RouteTableDetail(
            name=name_tag(table.get("Tags")),
            id=table["RouteTableId"],
            routes=routes,
            associations=associations,
        ))
    return result


def parse_addresses(addresses: List[Dict[str, Any]]) -> List[EipDetail]:
    return [
        EipDetail(
            name=name_tag(a.get("Tags")),
            public_ip=a.get("PublicIp", ""),
            instance_id=a.get("InstanceId", ""),
            private_ip=a.get("PrivateIpAddress", ""),
        )
        for a in addresses
    ]


def parse_dns_attributes(support: Dict[str, Any], hostnames: Dict[str, Any]) -> DnsAttributes:
    return DnsAttributes(
        dns_support=support.get("EnableDnsSupport", {}).get("Value", False),
        dns_hostnames=hostnames.get("EnableDnsHostnames", {}).get("Value", False),
    )


def _vpc_filter(vpc_id: str, name: str = "vpc-id") -> List[Dict[str, Any]]:
    return [{"Name": name, "Values": [vpc_id]}]


def _paginate(ec2, operation: str, key: str, **kwargs) -> List[Dict[str, Any]]:
    items = []
    for page in ec2.get_paginator(operation).paginate(**kwargs):
        items.extend(page.get(key, []))
    return items


def fetch_vpc_info(ec2, vpc_id: str) -> VpcInfo:
    vpcs = ec2.describe_vpcs(VpcIds=[vpc_id]).get("Vpcs", [])
    if not vpcs:
        raise NotFoundError(f"VPC {vpc_id} not found")
    return parse_vpc_info(vpcs[0])


def fetch_subnets(ec2, vpc_id: str) -> List[SubnetDetail]:
    return parse_subnets(_paginate(ec2, "describe_subnets", "Subnets", Filters=_vpc_filter(vpc_id)))


def fetch_internet_gateways(ec2, vpc_id: str) -> List[IgwDetail]:
    igws = _paginate(ec2, "describe_internet_gateways", "InternetGateways",
                     Filters=_vpc_filter(vpc_id, "attachment.vpc-id"))
    return parse_internet_gateways(igws, vpc_id)


def fetch_nat_gateways(ec2, vpc_id: str) -> List[NatDetail]:
    nats = _paginate(ec2, "describe_nat_gateways", "NatGateways", Filter=_vpc_filter(vpc_id))
    return parse_nat_gateways(nats)


def fetch_route_tables(ec2, vpc_id: str) -> List[RouteTableDetail]:
    return parse_route_tables(
        _paginate(ec2, "describe_route_tables", "RouteTables", Filters=_vpc_filter(vpc_id))
    )


def fetch_elastic_ips(ec2, vpc_id: str) -> List[EipDetail]:
    """Elastic IPs whose network interface lives in the VPC."""
    addresses = ec2.describe_addresses(Filters=[{"Name": "domain", "Values": ["vpc"]}]).get("Addresses", [])
    eni_ids = [a["NetworkInterfaceId"] for a in addresses if a.get("NetworkInterfaceId")]
    in_vpc = set()
    if eni_ids:
        enis = _paginate(ec2, "describe_network_interfaces", "NetworkInterfaces",
                         NetworkInterfaceIds=eni_ids)
        in_vpc = {eni["NetworkInterfaceId"] for eni in enis if eni.get("VpcId") == vpc_id}
    return parse_addresses([a for a in addresses if a.get("NetworkInterfaceId") in in_vpc])


def fetch_dns_attributes(ec2, vpc_id: str) -> DnsAttributes:
    support = ec2.describe_vpc_attribute(VpcId=vpc_id, Attribute="enableDnsSupport")
    hostnames = ec2.describe_vpc_attribute(VpcId=vpc_id, Attribute="enableDnsHostnames")
    return parse_dns_attributes(support, hostnames)


STEP_FETCHERS: Dict[NetworkStep, Callable[[Any, str], Any]] = {
    NetworkStep.VPC_INFO: fetch_vpc_info,
    NetworkStep.SUBNETS: fetch_subnets,
    NetworkStep.IGWS: fetch_internet_gateways,
    NetworkStep.NATS: fetch_nat_gateways,
    NetworkStep.ROUTE_TABLES: fetch_route_tables,
    NetworkStep.EIPS: fetch_elastic_ips,
    NetworkStep.DNS_ATTRS: fetch_dns_attributes,
}


def fetch_step(ec2, vpc_id: str, step: NetworkStep) -> PartialNetworkDetail:
    """Run one network step and wrap its payload."""
    logger.debug(f"Network step {step.name} for {vpc_id}")
    return partial_for_step(step, STEP_FETCHERS[step](ec2, vpc_id))
