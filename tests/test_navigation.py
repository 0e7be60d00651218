"""
Tests for the navigation state machine.
"""

from emd.blueprint import BlueprintResource, ResolvedResource
from emd.catalog import AwsResource, EcrDetail, ResourceType
from emd.errors import ProviderError
from emd.i18n import Labeler, Language
from emd.navigation import NavigationStateMachine, Screen, kind_for_screen
from emd.plan import (
    NO_TASK, LoadBlueprintResources, LoadDetail, LoadList, LoadMultiStepDetail,
    NetworkStep, RefreshList, partial_for_step,
)

from fakes import ec2_detail, network_payloads


def _run_steps(machine, vpc_id, until=None):
    """Feed network payloads through advance_multistep, stopping before `until`."""
    payloads = network_payloads(vpc_id)
    for step in NetworkStep:
        if step == until:
            return
        machine.advance_multistep(step, partial_for_step(step, payloads[step]))


class TestTransitions:
    """Tests for enter() and begin_task()."""

    def test_enter_twice_leaves_nothing_in_flight(self):
        """enter(A) then enter(B) leaves no task and a reset progress for every pair of screens."""
        for a in Screen:
            for b in Screen:
                machine = NavigationStateMachine()
                machine.begin_task(LoadMultiStepDetail("vpc-1"))
                machine.progress.mark(NetworkStep.VPC_INFO)
                machine.enter(a)
                machine.enter(b)
                assert machine.screen == b
                assert machine.loading is False
                assert machine.task == NO_TASK
                assert machine.progress.completed() == 0

    def test_begin_task_rejects_second_task(self):
        """A second task while loading is rejected and the recorded task is unchanged."""
        machine = NavigationStateMachine()
        first = LoadList(ResourceType.EC2)
        assert machine.begin_task(first) is True
        generation = machine.generation

        assert machine.begin_task(LoadList(ResourceType.ECR)) is False
        assert machine.begin_task(first) is False
        assert machine.task == first
        assert machine.generation == generation

    def test_no_task_is_not_a_task(self):
        """Beginning NoTask does nothing."""
        machine = NavigationStateMachine()
        assert machine.begin_task(NO_TASK) is False
        assert machine.loading is False

    def test_generation_changes_on_enter_and_begin(self):
        """Every transition produces a new generation."""
        machine = NavigationStateMachine()
        g0 = machine.generation
        machine.enter(Screen.SERVICE_SELECT)
        g1 = machine.generation
        machine.begin_task(LoadList(ResourceType.EC2))
        g2 = machine.generation
        assert len({g0, g1, g2}) == 3
        assert machine.is_current(g2)
        assert not machine.is_current(g1)

    def test_kind_for_screen(self):
        """Select screens map back to their kind."""
        assert kind_for_screen(Screen.VPC_SELECT) == ResourceType.NETWORK
        assert kind_for_screen(Screen.PREVIEW) is None


class TestCompleteTask:
    """Tests for single-step completion."""

    def test_list_result_replaces_list(self):
        """A list result lands in the list for its kind."""
        machine = NavigationStateMachine()
        machine.begin_task(LoadList(ResourceType.EC2))
        rows = [AwsResource(name="web", id="i-1")]
        assert machine.complete_task(rows) is True
        assert machine.items(ResourceType.EC2) == rows
        assert machine.loading is False

    def test_refresh_sets_status(self):
        """Refreshing reports completion."""
        machine = NavigationStateMachine()
        machine.begin_task(RefreshList(ResourceType.ECR))
        machine.complete_task([])
        assert machine.status_message == "Refresh complete"

    def test_failure_keeps_previous_data(self):
        """A failed fetch leaves the shown list alone and sets a message."""
        machine = NavigationStateMachine()
        rows = [AwsResource(name="web", id="i-1")]
        machine.begin_task(LoadList(ResourceType.EC2))
        machine.complete_task(rows)

        machine.begin_task(RefreshList(ResourceType.EC2))
        assert machine.complete_task(error=ProviderError("AccessDenied")) is False
        assert machine.items(ResourceType.EC2) == rows
        assert "AccessDenied" in machine.status_message
        assert machine.loading is False

    def test_detail_replaces_previous_detail(self):
        """Only one detail is current at a time."""
        machine = NavigationStateMachine()
        machine.begin_task(LoadDetail(ResourceType.EC2, "i-1"))
        machine.complete_task(ec2_detail())
        assert machine.current_resource_type() == ResourceType.EC2

        machine.begin_task(LoadDetail(ResourceType.ECR, "repo"))
        machine.complete_task(EcrDetail(name="repo"))
        assert machine.current_resource_type() == ResourceType.ECR
        assert machine.current_resource_info() == ("repo", "repo")

    def test_complete_without_task_is_ignored(self):
        """Completing when nothing is in flight changes nothing."""
        machine = NavigationStateMachine()
        assert machine.complete_task([AwsResource(name="x", id="y")]) is False
        assert machine.items(ResourceType.EC2) == []


class TestMultiStep:
    """Tests for the network detail protocol."""

    def test_each_step_flips_its_flag_only(self):
        """Step k sets flag k; only the last step clears loading and publishes."""
        machine = NavigationStateMachine()
        machine.begin_task(LoadMultiStepDetail("vpc-1"))
        payloads = network_payloads("vpc-1")

        for step in NetworkStep:
            before = machine.progress.flags()
            next_task = machine.advance_multistep(step, partial_for_step(step, payloads[step]))
            after = machine.progress.flags()
            changed = [i for i in range(7) if before[i] != after[i]]
            assert changed == [int(step)]

            if step.is_last:
                assert next_task is None
                assert machine.loading is False
            else:
                assert machine.loading is True
                assert next_task == LoadMultiStepDetail("vpc-1", step.next())
                assert machine.detail is None

        assert machine.current_resource_type() == ResourceType.NETWORK
        assert machine.current_resource_info() == ("vpc-1", "main")

    def test_out_of_order_step_is_ignored(self):
        """A result for a different step does not advance."""
        machine = NavigationStateMachine()
        machine.begin_task(LoadMultiStepDetail("vpc-1"))
        payload = network_payloads("vpc-1")[NetworkStep.SUBNETS]
        assert machine.advance_multistep(NetworkStep.SUBNETS, partial_for_step(NetworkStep.SUBNETS, payload)) is None
        assert machine.progress.completed() == 0
        assert machine.task == LoadMultiStepDetail("vpc-1")

    def test_failure_at_step_three(self):
        """vpc-1 failing at step 3 publishes nothing, keeps flags 0-2 and names the VPC."""
        machine = NavigationStateMachine()
        machine.begin_task(LoadMultiStepDetail("vpc-1"))
        _run_steps(machine, "vpc-1", until=NetworkStep.NATS)

        machine.fail_multistep(ProviderError("throttled"))

        assert machine.detail is None
        assert machine.progress.flags() == [True, True, True, False, False, False, False]
        assert "vpc-1" in machine.status_message
        assert machine.loading is False

    def test_loading_label_names_current_step(self):
        """The busy label follows the in-flight step, localized."""
        machine = NavigationStateMachine(Labeler(Language.KOREAN))
        machine.begin_task(LoadMultiStepDetail("vpc-1"))
        _run_steps(machine, "vpc-1", until=NetworkStep.IGWS)
        assert machine.loading_label() == "현재: 인터넷 게이트웨이 로딩 중..."
        assert machine.network_vpc_id == "vpc-1"


class TestBlueprintLoad:
    """Tests for the blueprint resource cursor."""

    def test_cursor_collects_results(self):
        """Each resolved entry is appended and the index moves on."""
        machine = NavigationStateMachine()
        machine.begin_task(LoadBlueprintResources())
        resource = BlueprintResource(resource_type=ResourceType.EC2, region="ap-northeast-2", resource_id="i-1")

        task = machine.advance_blueprint_cursor(ResolvedResource(resource, detail=ec2_detail()))
        assert task == LoadBlueprintResources(1)
        task = machine.advance_blueprint_cursor(ResolvedResource(resource, error="gone"))
        assert task == LoadBlueprintResources(2)
        assert [r.ok for r in machine.resolved] == [True, False]
        assert machine.loading is True
