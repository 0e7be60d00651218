"""
Tests for resource kinds, summary rows and detail priority.
"""

import itertools

from emd.catalog import (
    AsgDetail, AwsResource, EcrDetail, LoadBalancerDetail, ResourceType,
    SecurityGroupDetail, SERVICE_KINDS, detail_kind, highest_priority_detail,
)

from fakes import ec2_detail, network_detail


def _all_details():
    return [
        ec2_detail(),
        network_detail(),
        SecurityGroupDetail(name="web", id="sg-1"),
        LoadBalancerDetail(name="alb", arn="arn:aws:elasticloadbalancing:lb/app/alb/1"),
        EcrDetail(name="repo"),
        AsgDetail(name="asg"),
    ]


class TestPriority:
    """Tests for the fixed detail priority."""

    def test_every_subset_picks_highest_kind(self):
        """Any subset of populated details resolves to the first kind in priority order."""
        details = _all_details()
        order = [ResourceType.EC2, ResourceType.NETWORK, ResourceType.SECURITY_GROUP,
                 ResourceType.LOAD_BALANCER, ResourceType.ECR, ResourceType.ASG]

        for size in range(1, len(details) + 1):
            for subset in itertools.combinations(details, size):
                # Reversed input order must not matter
                winner = highest_priority_detail(reversed(subset))
                expected = min((detail_kind(d) for d in subset), key=order.index)
                assert detail_kind(winner) == expected

    def test_empty_and_none(self):
        """Nothing populated gives None."""
        assert highest_priority_detail([]) is None
        assert highest_priority_detail([None, None]) is None
        assert detail_kind(None) is None

    def test_identity_per_kind(self):
        """identity() returns (id, name) for each kind."""
        assert ec2_detail("i-9", "api").identity() == ("i-9", "api")
        assert network_detail("vpc-9").identity() == ("vpc-9", "main")
        assert EcrDetail(name="repo").identity() == ("repo", "repo")
        lb = LoadBalancerDetail(name="alb", arn="arn:lb")
        assert lb.identity() == ("arn:lb", "alb")


class TestResources:
    """Tests for summary rows and the service list."""

    def test_display_with_and_without_name(self):
        """Rows show "name (id)" or just the id."""
        assert AwsResource(name="web", id="i-1").display() == "web (i-1)"
        assert AwsResource(name="", id="i-1").display() == "i-1"

    def test_service_order(self):
        """Services are listed in the fixed order."""
        assert [k.value for k in SERVICE_KINDS] == [
            "ec2", "network", "security_group", "load_balancer", "ecr", "asg",
        ]
