"""
Load plan: the loading tasks the navigation state machine can issue, the
progress checklist for network detail fetches and the typed accumulator
that merges the network sub-fetches into one NetworkDetail.
"""

from dataclasses import dataclass, fields
from enum import IntEnum
from typing import List, Optional, Union

from .catalog import (
    DnsAttributes, EipDetail, IgwDetail, NatDetail, NetworkDetail,
    ResourceType, RouteTableDetail, SubnetDetail, VpcInfo,
)


class NetworkStep(IntEnum):
    """Ordered, non-skippable sub-fetches of a network (VPC) detail."""
    VPC_INFO = 0
    SUBNETS = 1
    IGWS = 2
    NATS = 3
    ROUTE_TABLES = 4
    EIPS = 5
    DNS_ATTRS = 6

    @property
    def is_last(self) -> bool:
        return self == NetworkStep.DNS_ATTRS

    def next(self) -> "NetworkStep":
        if self.is_last:
            raise ValueError("DNS_ATTRS is the terminal network step")
        return NetworkStep(self + 1)

    @property
    def label_key(self) -> str:
        return _STEP_LABELS[self]


_STEP_LABELS = {
    NetworkStep.VPC_INFO: "vpc_basic_info",
    NetworkStep.SUBNETS: "subnets",
    NetworkStep.IGWS: "internet_gateway",
    NetworkStep.NATS: "nat_gateway",
    NetworkStep.ROUTE_TABLES: "route_tables",
    NetworkStep.EIPS: "elastic_ip",
    NetworkStep.DNS_ATTRS: "dns_settings",
}


# Tasks

@dataclass(frozen=True)
class NoTask:
    pass


@dataclass(frozen=True)
class RefreshList:
    kind: ResourceType


@dataclass(frozen=True)
class LoadList:
    kind: ResourceType


@dataclass(frozen=True)
class LoadDetail:
    kind: ResourceType
    resource_id: str


@dataclass(frozen=True)
class LoadMultiStepDetail:
    vpc_id: str
    step: NetworkStep = NetworkStep.VPC_INFO

    def advanced(self) -> "LoadMultiStepDetail":
        return LoadMultiStepDetail(self.vpc_id, self.step.next())


@dataclass(frozen=True)
class LoadBlueprintResources:
    index: int = 0


LoadPlan = Union[NoTask, RefreshList, LoadList, LoadDetail, LoadMultiStepDetail, LoadBlueprintResources]

NO_TASK = NoTask()


def is_list_task(task: LoadPlan) -> bool:
    return isinstance(task, (RefreshList, LoadList))


# Progress

@dataclass
class LoadingProgress:
    """One flag per network sub-fetch; all False at rest."""
    vpc_info: bool = False
    subnets: bool = False
    igws: bool = False
    nats: bool = False
    route_tables: bool = False
    eips: bool = False
    dns_attrs: bool = False

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, False)

    def mark(self, step: NetworkStep) -> None:
        setattr(self, fields(self)[step].name, True)

    def is_done(self, step: NetworkStep) -> bool:
        return getattr(self, fields(self)[step].name)

    def flags(self) -> List[bool]:
        return [getattr(self, f.name) for f in fields(self)]

    def completed(self) -> int:
        return sum(self.flags())


# Network accumulator

@dataclass
class PartialNetworkDetail:
    """
    Result of one or more network sub-fetches.

    A provider answers each step with a PartialNetworkDetail that has only
    that step's field set; the orchestrator merges them with update() and
    publishes the final value with build() once every step is present.
    """
    vpc: Optional[VpcInfo] = None
    subnets: Optional[List[SubnetDetail]] = None
    igws: Optional[List[IgwDetail]] = None
    nats: Optional[List[NatDetail]] = None
    route_tables: Optional[List[RouteTableDetail]] = None
    eips: Optional[List[EipDetail]] = None
    dns: Optional[DnsAttributes] = None

    def update(self, other: "PartialNetworkDetail") -> None:
        for f in fields(self):
            value = getattr(other, f.name)
            if value is not None:
                setattr(self, f.name, value)

    def missing_steps(self) -> List[NetworkStep]:
        return [NetworkStep(i) for i, f in enumerate(fields(self)) if getattr(self, f.name) is None]

    def is_complete(self) -> bool:
        return not self.missing_steps()

    def build(self) -> NetworkDetail:
        """
        Merge all steps into a NetworkDetail.

        Raises:
            ValueError: If any step has not been fetched yet
        """
        missing = self.missing_steps()
        if missing:
            raise ValueError(f"Network detail incomplete, missing steps: {[s.name for s in missing]}")

        return NetworkDetail(
            name=self.vpc.name,
            id=self.vpc.id,
            cidr=self.vpc.cidr,
            state=self.vpc.state,
            subnets=list(self.subnets),
            igws=list(self.igws),
            nats=list(self.nats),
            route_tables=list(self.route_tables),
            eips=list(self.eips),
            dns_support=self.dns.dns_support,
            dns_hostnames=self.dns.dns_hostnames,
            tags=list(self.vpc.tags),
        )


def partial_for_step(step: NetworkStep, payload) -> PartialNetworkDetail:
    """Wrap a single step payload into a PartialNetworkDetail."""
    name = fields(PartialNetworkDetail)[step].name
    return PartialNetworkDetail(**{name: payload})
