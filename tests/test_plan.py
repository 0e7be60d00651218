"""
Tests for load plan tasks, progress flags and the network accumulator.
"""

import pytest

from emd.catalog import DnsAttributes, ResourceType, VpcInfo
from emd.plan import (
    LoadList, LoadMultiStepDetail, LoadingProgress, NetworkStep,
    PartialNetworkDetail, RefreshList, is_list_task, partial_for_step,
)

from fakes import network_payloads


class TestNetworkStep:
    """Tests for the ordered network steps."""

    def test_order_and_terminal_step(self):
        """Steps advance one at a time and DNS_ATTRS is last."""
        step = NetworkStep.VPC_INFO
        seen = [step]
        while not step.is_last:
            step = step.next()
            seen.append(step)
        assert seen == list(NetworkStep)
        assert len(seen) == 7
        with pytest.raises(ValueError):
            NetworkStep.DNS_ATTRS.next()

    def test_task_advanced_keeps_vpc(self):
        """advanced() moves to the next step for the same VPC."""
        task = LoadMultiStepDetail("vpc-1")
        assert task.step == NetworkStep.VPC_INFO
        assert task.advanced() == LoadMultiStepDetail("vpc-1", NetworkStep.SUBNETS)

    def test_list_tasks(self):
        """Only list and refresh tasks are list tasks."""
        assert is_list_task(LoadList(ResourceType.EC2))
        assert is_list_task(RefreshList(ResourceType.EC2))
        assert not is_list_task(LoadMultiStepDetail("vpc-1"))


class TestLoadingProgress:
    """Tests for the progress checklist."""

    def test_mark_flips_exactly_one_flag(self):
        """Marking step k sets flag k and nothing else."""
        for step in NetworkStep:
            progress = LoadingProgress()
            progress.mark(step)
            flags = progress.flags()
            assert flags[step] is True
            assert sum(flags) == 1

    def test_reset(self):
        """reset() clears every flag."""
        progress = LoadingProgress()
        for step in NetworkStep:
            progress.mark(step)
        assert progress.completed() == 7
        progress.reset()
        assert progress.flags() == [False] * 7


class TestPartialNetworkDetail:
    """Tests for merging network sub-fetches."""

    def test_build_requires_every_step(self):
        """build() refuses to publish a partial detail."""
        partial = PartialNetworkDetail()
        partial.update(partial_for_step(NetworkStep.VPC_INFO, VpcInfo(name="main", id="vpc-1")))
        assert partial.missing_steps()[0] == NetworkStep.SUBNETS
        with pytest.raises(ValueError):
            partial.build()

    def test_merge_and_build(self):
        """All seven payloads merge into one NetworkDetail."""
        partial = PartialNetworkDetail()
        for step, payload in network_payloads("vpc-1").items():
            partial.update(partial_for_step(step, payload))

        assert partial.is_complete()
        detail = partial.build()
        assert detail.id == "vpc-1"
        assert detail.cidr == "10.0.0.0/16"
        assert [s.id for s in detail.subnets] == ["subnet-1"]
        assert detail.dns_support is True
        assert detail.dns_hostnames is False

    def test_empty_lists_count_as_fetched(self):
        """An empty subnet list is a result, not a missing step."""
        partial = partial_for_step(NetworkStep.SUBNETS, [])
        assert NetworkStep.SUBNETS not in partial.missing_steps()
        partial.update(partial_for_step(NetworkStep.DNS_ATTRS, DnsAttributes()))
        assert NetworkStep.DNS_ATTRS not in partial.missing_steps()
