"""
Resource catalog: resource kinds, summary rows and per-kind detail shapes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union


class ResourceType(Enum):
    """The six supported resource kinds, in priority order."""
    EC2 = "ec2"
    NETWORK = "network"
    SECURITY_GROUP = "security_group"
    LOAD_BALANCER = "load_balancer"
    ECR = "ecr"
    ASG = "asg"

    @property
    def label_key(self) -> str:
        return self.value


# Order shown on the service selection screen
SERVICE_KINDS: List[ResourceType] = [
    ResourceType.EC2,
    ResourceType.NETWORK,
    ResourceType.SECURITY_GROUP,
    ResourceType.LOAD_BALANCER,
    ResourceType.ECR,
    ResourceType.ASG,
]


@dataclass
class AwsResource:
    """Summary row shown in a resource selection list."""
    name: str
    id: str
    state: str = ""
    az: str = ""
    cidr: str = ""

    def display(self) -> str:
        if self.name:
            return f"{self.name} ({self.id})"
        return self.id


Tags = List[Tuple[str, str]]


# EC2

@dataclass
class AttachedPolicy:
    name: str
    arn: str


@dataclass
class InlinePolicy:
    name: str
    document: str


@dataclass
class IamRoleDetail:
    """IAM role attached to an instance profile."""
    name: str
    arn: str
    assume_role_policy: str = ""
    attached_policies: List[AttachedPolicy] = field(default_factory=list)
    inline_policies: List[InlinePolicy] = field(default_factory=list)


@dataclass
class VolumeDetail:
    device_name: str
    volume_id: str
    size_gb: int = 0
    volume_type: str = ""
    iops: Optional[int] = None
    encrypted: bool = False
    delete_on_termination: bool = False


@dataclass
class Ec2Detail:
    kind = ResourceType.EC2

    name: str
    instance_id: str
    instance_type: str = ""
    ami: str = ""
    platform: str = ""
    architecture: str = ""
    key_pair: str = ""
    vpc: str = ""
    subnet: str = ""
    az: str = ""
    public_ip: str = ""
    private_ip: str = ""
    security_groups: List[str] = field(default_factory=list)
    state: str = ""
    ebs_optimized: bool = False
    monitoring: str = ""
    iam_role: Optional[str] = None
    iam_role_detail: Optional[IamRoleDetail] = None
    launch_time: str = ""
    tags: Tags = field(default_factory=list)
    volumes: List[VolumeDetail] = field(default_factory=list)
    user_data: Optional[str] = None

    def identity(self) -> Tuple[str, str]:
        return self.instance_id, self.name


# Network

@dataclass
class SubnetDetail:
    name: str
    id: str
    cidr: str = ""
    az: str = ""


@dataclass
class IgwDetail:
    name: str
    id: str
    vpc_id: str = ""


@dataclass
class NatDetail:
    name: str
    id: str
    state: str = ""
    connectivity_type: str = ""
    availability_mode: str = ""
    auto_scaling_ips: str = ""
    auto_provision_zones: str = ""
    public_ip: str = ""
    allocation_id: str = ""
    subnet_id: str = ""
    tags: Tags = field(default_factory=list)


@dataclass
class RouteEntry:
    destination: str
    target: str
    state: str = ""


@dataclass
class RouteTableDetail:
    name: str
    id: str
    routes: List[RouteEntry] = field(default_factory=list)
    associations: List[str] = field(default_factory=list)


@dataclass
class EipDetail:
    name: str
    public_ip: str
    instance_id: str = ""
    private_ip: str = ""


@dataclass
class VpcInfo:
    """Basic VPC attributes, the first step of a network detail fetch."""
    name: str
    id: str
    cidr: str = ""
    state: str = ""
    tags: Tags = field(default_factory=list)


@dataclass
class DnsAttributes:
    dns_support: bool = False
    dns_hostnames: bool = False


@dataclass
class NetworkDetail:
    kind = ResourceType.NETWORK

    name: str
    id: str
    cidr: str = ""
    state: str = ""
    subnets: List[SubnetDetail] = field(default_factory=list)
    igws: List[IgwDetail] = field(default_factory=list)
    nats: List[NatDetail] = field(default_factory=list)
    route_tables: List[RouteTableDetail] = field(default_factory=list)
    eips: List[EipDetail] = field(default_factory=list)
    dns_support: bool = False
    dns_hostnames: bool = False
    tags: Tags = field(default_factory=list)

    def identity(self) -> Tuple[str, str]:
        return self.id, self.name


# Security group

@dataclass
class SecurityRule:
    protocol: str
    port_range: str
    source_dest: str
    description: str = "-"


@dataclass
class SecurityGroupDetail:
    kind = ResourceType.SECURITY_GROUP

    name: str
    id: str
    description: str = ""
    vpc_id: str = ""
    inbound_rules: List[SecurityRule] = field(default_factory=list)
    outbound_rules: List[SecurityRule] = field(default_factory=list)

    def identity(self) -> Tuple[str, str]:
        return self.id, self.name


# Load balancer

@dataclass
class ListenerInfo:
    protocol: str
    port: int
    default_action: str = ""


@dataclass
class TargetInfo:
    id: str
    port: Optional[int] = None
    health: str = ""


@dataclass
class TargetGroupInfo:
    name: str
    arn: str
    protocol: str = ""
    port: int = 0
    target_type: str = ""
    health_check_protocol: str = ""
    health_check_path: str = ""
    healthy_threshold: int = 0
    unhealthy_threshold: int = 0
    targets: List[TargetInfo] = field(default_factory=list)


@dataclass
class LoadBalancerDetail:
    kind = ResourceType.LOAD_BALANCER

    name: str
    arn: str
    dns_name: str = ""
    lb_type: str = ""
    scheme: str = ""
    vpc_id: str = ""
    ip_address_type: str = ""
    state: str = ""
    availability_zones: List[str] = field(default_factory=list)
    security_groups: List[str] = field(default_factory=list)
    listeners: List[ListenerInfo] = field(default_factory=list)
    target_groups: List[TargetGroupInfo] = field(default_factory=list)

    def identity(self) -> Tuple[str, str]:
        return self.arn, self.name


# ECR

@dataclass
class EcrDetail:
    kind = ResourceType.ECR

    name: str
    uri: str = ""
    tag_mutability: str = ""
    encryption_type: str = ""
    kms_key: Optional[str] = None
    created_at: str = "-"
    image_count: int = 0

    def identity(self) -> Tuple[str, str]:
        return self.name, self.name


# Auto Scaling

@dataclass
class ScalingPolicy:
    name: str
    policy_type: str
    adjustment_type: Optional[str] = None
    scaling_adjustment: Optional[int] = None
    cooldown: Optional[int] = None


@dataclass
class AsgDetail:
    kind = ResourceType.ASG

    name: str
    arn: str = ""
    launch_template_name: Optional[str] = None
    launch_template_id: Optional[str] = None
    launch_config_name: Optional[str] = None
    min_size: int = 0
    max_size: int = 0
    desired_capacity: int = 0
    default_cooldown: int = 0
    availability_zones: List[str] = field(default_factory=list)
    target_group_arns: List[str] = field(default_factory=list)
    health_check_type: str = ""
    health_check_grace_period: int = 0
    instances: List[str] = field(default_factory=list)
    created_time: str = ""
    scaling_policies: List[ScalingPolicy] = field(default_factory=list)
    tags: Tags = field(default_factory=list)

    def identity(self) -> Tuple[str, str]:
        return self.name, self.name


ResourceDetail = Union[
    Ec2Detail,
    NetworkDetail,
    SecurityGroupDetail,
    LoadBalancerDetail,
    EcrDetail,
    AsgDetail,
]

# Fixed priority used whenever several details compete for "current"
DETAIL_PRIORITY = (
    (Ec2Detail, ResourceType.EC2),
    (NetworkDetail, ResourceType.NETWORK),
    (SecurityGroupDetail, ResourceType.SECURITY_GROUP),
    (LoadBalancerDetail, ResourceType.LOAD_BALANCER),
    (EcrDetail, ResourceType.ECR),
    (AsgDetail, ResourceType.ASG),
)


def highest_priority_detail(details: Iterable[Optional[ResourceDetail]]) -> Optional[ResourceDetail]:
    """
    Pick the detail of the highest-priority kind among the given ones.

    Checks kinds in the order EC2 > Network > Security Group > Load
    Balancer > ECR > ASG and returns the first match.

    Args:
        details: Populated (or None) detail values

    Returns:
        The winning detail, or None when nothing is populated
    """
    present = [d for d in details if d is not None]
    for detail_cls, _ in DETAIL_PRIORITY:
        for detail in present:
            if isinstance(detail, detail_cls):
                return detail
    return None


def detail_kind(detail: Optional[ResourceDetail]) -> Optional[ResourceType]:
    """Return the resource kind of a detail value."""
    if detail is None:
        return None
    for detail_cls, kind in DETAIL_PRIORITY:
        if isinstance(detail, detail_cls):
            return kind
    return None
