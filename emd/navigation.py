"""
Navigation state machine: the active screen, the single in-flight loading
task, fetched lists and the current resource detail.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .blueprint import ResolvedResource
from .catalog import (
    AwsResource, ResourceDetail, ResourceType, detail_kind, highest_priority_detail,
)
from .i18n import Labeler
from .plan import (
    NO_TASK, LoadBlueprintResources, LoadDetail, LoadList, LoadMultiStepDetail,
    LoadPlan, LoadingProgress, NetworkStep, NoTask, PartialNetworkDetail, RefreshList,
    is_list_task,
)

logger = logging.getLogger(__name__)


class Screen(Enum):
    """UI views; exactly one is active at a time."""
    LOGIN = "login"
    BLUEPRINT_SELECT = "blueprint_select"
    BLUEPRINT_DETAIL = "blueprint_detail"
    BLUEPRINT_NAME_INPUT = "blueprint_name_input"
    BLUEPRINT_PREVIEW = "blueprint_preview"
    REGION_SELECT = "region_select"
    SERVICE_SELECT = "service_select"
    EC2_SELECT = "ec2_select"
    VPC_SELECT = "vpc_select"
    SECURITY_GROUP_SELECT = "security_group_select"
    LOAD_BALANCER_SELECT = "load_balancer_select"
    ECR_SELECT = "ecr_select"
    ASG_SELECT = "asg_select"
    PREVIEW = "preview"
    SETTINGS = "settings"


SELECT_SCREENS: Dict[ResourceType, Screen] = {
    ResourceType.EC2: Screen.EC2_SELECT,
    ResourceType.NETWORK: Screen.VPC_SELECT,
    ResourceType.SECURITY_GROUP: Screen.SECURITY_GROUP_SELECT,
    ResourceType.LOAD_BALANCER: Screen.LOAD_BALANCER_SELECT,
    ResourceType.ECR: Screen.ECR_SELECT,
    ResourceType.ASG: Screen.ASG_SELECT,
}


def kind_for_screen(screen: Screen) -> Optional[ResourceType]:
    for kind, select_screen in SELECT_SCREENS.items():
        if select_screen == screen:
            return kind
    return None


class NavigationStateMachine:
    """
    Owns the current Screen and the current LoadPlan task.

    Only one task may be in flight. ``generation`` increases whenever a
    task begins or the screen changes; a completion carrying an older
    generation is stale and must be ignored by the caller.
    """

    def __init__(self, labeler: Optional[Labeler] = None, screen: Screen = Screen.LOGIN):
        self.labeler = labeler or Labeler()
        self.screen = screen
        self.loading = False
        self.task: LoadPlan = NO_TASK
        self.progress = LoadingProgress()
        self.generation = 0
        self.status_message = ""

        self.lists: Dict[ResourceType, List[AwsResource]] = {kind: [] for kind in ResourceType}
        self.detail: Optional[ResourceDetail] = None
        self.resolved: List[ResolvedResource] = []
        self._network: Optional[PartialNetworkDetail] = None

    # Transitions

    def enter(self, screen: Screen) -> None:
        """Switch to screen, dropping any in-flight task and its progress."""
        if self.loading:
            logger.debug(f"Leaving {self.screen.value} with {self.task} in flight; result will be ignored")
        self.screen = screen
        self.generation += 1
        self._clear_task()
        self.progress.reset()

    def begin_task(self, task: LoadPlan) -> bool:
        """
        Record task as the in-flight task.

        Returns:
            False (and changes nothing) if a task is already in flight
        """
        if self.loading:
            logger.debug(f"Rejected {task}: {self.task} still in flight")
            return False
        if isinstance(task, NoTask):
            return False

        self.generation += 1
        self.loading = True
        self.task = task
        if isinstance(task, LoadMultiStepDetail):
            self.progress.reset()
            self._network = PartialNetworkDetail()
        if isinstance(task, LoadBlueprintResources) and task.index == 0:
            self.resolved = []
        logger.info(f"Task started: {task}")
        return True

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def advance_multistep(self, step: NetworkStep, partial: PartialNetworkDetail) -> Optional[LoadMultiStepDetail]:
        """
        Record the result of one network sub-fetch.

        Args:
            step: The step that finished; must be the in-flight step
            partial: That step's data

        Returns:
            The task for the next sub-fetch, or None when step was the
            last one (the merged NetworkDetail is then published) or the
            call did not match the in-flight task
        """
        task = self.task
        if not isinstance(task, LoadMultiStepDetail) or not self.loading:
            logger.warning(f"advance_multistep({step}) without a network task in flight")
            return None
        if task.step != step:
            logger.warning(f"advance_multistep({step}) out of order, expected {task.step}")
            return None

        self.progress.mark(step)
        self._network.update(partial)

        if step.is_last:
            self.set_detail(self._network.build())
            logger.info(f"Network detail for {task.vpc_id} complete")
            self._clear_task()
            return None

        self.task = task.advanced()
        return self.task

    def fail_multistep(self, error: Exception) -> None:
        """Abort the network task; nothing partial is published and progress flags stay as they were."""
        task = self.task
        if not isinstance(task, LoadMultiStepDetail):
            return
        logger.warning(f"Network detail for {task.vpc_id} failed at step {task.step.name}: {error}")
        self.status_message = self.labeler.text("network_detail_unavailable", vpc_id=task.vpc_id)
        self._clear_task()

    def complete_task(self, result=None, error: Optional[Exception] = None) -> bool:
        """
        Finish a single-step task.

        On success the matching list or detail is replaced; on failure the
        previously shown data stays untouched and a status message is set.

        Returns:
            True if the result was applied
        """
        task = self.task
        if not self.loading:
            logger.debug("complete_task with nothing in flight, ignoring")
            return False

        if error is not None:
            kind = getattr(task, "kind", None)
            kind_label = self.labeler.text(kind.label_key) if kind else self.labeler.text("resources")
            self.status_message = self.labeler.text("fetch_failed", kind=kind_label, error=error)
            logger.warning(f"Task failed: {task}: {error}")
            self._clear_task()
            return False

        if is_list_task(task):
            self.lists[task.kind] = list(result or [])
            if isinstance(task, RefreshList):
                self.status_message = self.labeler.text("refresh_complete")
        elif isinstance(task, LoadDetail):
            self.set_detail(result)
        elif isinstance(task, LoadBlueprintResources):
            if result is not None:
                self.resolved = list(result)
        logger.info(f"Task completed: {task}")
        self._clear_task()
        return True

    def advance_blueprint_cursor(self, resolved: ResolvedResource) -> LoadBlueprintResources:
        """Append one resolved blueprint entry and move the cursor forward."""
        task = self.task
        if not isinstance(task, LoadBlueprintResources):
            raise RuntimeError("No blueprint load in flight")
        self.resolved.append(resolved)
        self.task = LoadBlueprintResources(task.index + 1)
        return self.task

    def _clear_task(self) -> None:
        self.task = NO_TASK
        self.loading = False
        self._network = None

    # Data

    def items(self, kind: ResourceType) -> List[AwsResource]:
        return self.lists[kind]

    def set_detail(self, detail: Optional[ResourceDetail]) -> None:
        """Populate the current detail; any previous detail of any kind is dropped."""
        self.detail = detail

    def clear_detail(self) -> None:
        self.detail = None

    def current_resource_type(self) -> Optional[ResourceType]:
        return detail_kind(highest_priority_detail([self.detail]))

    def current_resource_info(self) -> Optional[Tuple[str, str]]:
        """Return (resource_id, name) of the current detail, if any."""
        detail = highest_priority_detail([self.detail])
        if detail is None:
            return None
        return detail.identity()

    @property
    def network_vpc_id(self) -> Optional[str]:
        if isinstance(self.task, LoadMultiStepDetail):
            return self.task.vpc_id
        return None

    def loading_label(self) -> str:
        """Localized description of the in-flight task for the busy indicator."""
        task = self.task
        text = self.labeler.text
        if isinstance(task, RefreshList):
            return text("refreshing_list", kind=text(task.kind.label_key))
        if isinstance(task, LoadList):
            return text("loading_list", kind=text(task.kind.label_key))
        if isinstance(task, LoadDetail):
            return text("loading_detail", kind=text(task.kind.label_key))
        if isinstance(task, LoadMultiStepDetail):
            return self.labeler.current_loading(text(task.step.label_key))
        if isinstance(task, LoadBlueprintResources):
            return text("loading_blueprint_resources")
        return ""
