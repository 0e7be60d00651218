"""
Orchestrator: runs provider calls for the in-flight LoadPlan task on a
worker thread and applies their results on the UI thread.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional

from .assembler import Document, DocumentAssembler
from .blueprint import BlueprintEngine, BlueprintResource, ResolvedResource
from .catalog import ResourceType
from .config import ProviderConfig, ProviderSettings
from .errors import EmdError, ProviderError
from .navigation import NavigationStateMachine, Screen
from .plan import (
    LoadBlueprintResources, LoadDetail, LoadMultiStepDetail, LoadPlan,
    NetworkStep, PartialNetworkDetail, is_list_task,
)
from .provider.base import ResourceProvider

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    """Outcome of one worker job, tagged with the generation it was issued under."""
    generation: int
    task: LoadPlan
    result: Any = None
    error: Optional[Exception] = None


class Orchestrator:
    """
    Dispatches LoadPlan tasks to the Resource Provider.

    Jobs run on daemon threads and post a Completion to ``completions``.
    The UI thread calls poll() to apply them; a completion whose generation
    no longer matches the state machine is dropped.
    """

    def __init__(self, machine: NavigationStateMachine, provider: ResourceProvider,
                 config: ProviderConfig, blueprints: BlueprintEngine):
        self.machine = machine
        self.provider = provider
        self.config = config
        self.blueprints = blueprints
        self.completions: "queue.Queue[Completion]" = queue.Queue()
        self.document: Optional[Document] = None
        self._blueprint_resources: List[BlueprintResource] = []

    # Requests (UI thread)

    def request(self, task: LoadPlan) -> bool:
        """
        Begin task and dispatch its first provider call.

        Returns:
            False if another task is still in flight
        """
        blueprint_load = isinstance(task, LoadBlueprintResources)
        if blueprint_load and self.blueprints.current is None:
            self.machine.status_message = self.machine.labeler.text("blueprint_not_open")
            return False

        if not self.machine.begin_task(task):
            return False
        if blueprint_load:
            self._blueprint_resources = list(self.blueprints.current.resources)
        self._dispatch(task)
        return True

    def _dispatch(self, task: LoadPlan) -> None:
        generation = self.machine.generation
        settings = self.config.snapshot()

        if is_list_task(task):
            self._start(generation, task, lambda: self.provider.list(task.kind, settings))
        elif isinstance(task, LoadDetail):
            self._start(generation, task, lambda: self.provider.detail(task.kind, task.resource_id, settings))
        elif isinstance(task, LoadMultiStepDetail):
            self._start(generation, task, lambda: self.provider.detail_step(task.vpc_id, task.step, settings))
        elif isinstance(task, LoadBlueprintResources):
            if task.index >= len(self._blueprint_resources):
                self._finish_blueprint()
                return
            resource = self._blueprint_resources[task.index]
            resource_settings = replace(settings, region=resource.region)
            self._start(generation, task, lambda: self._resolve(resource, resource_settings))
        else:
            logger.warning(f"Nothing to dispatch for {task}")

    def _start(self, generation: int, task: LoadPlan, job: Callable[[], Any]) -> None:
        def worker():
            try:
                result = job()
            except EmdError as e:
                self.completions.put(Completion(generation, task, error=e))
                return
            except Exception as e:
                logger.exception(f"Unexpected failure running {task}")
                self.completions.put(Completion(generation, task, error=ProviderError(str(e))))
                return
            self.completions.put(Completion(generation, task, result=result))

        thread = threading.Thread(target=worker, name=f"emd-{type(task).__name__}", daemon=True)
        thread.start()

    def _resolve(self, resource: BlueprintResource, settings: ProviderSettings) -> ResolvedResource:
        """Fetch one blueprint entry; failures are recorded, not raised."""
        try:
            if resource.resource_type == ResourceType.NETWORK:
                partial = PartialNetworkDetail()
                for step in NetworkStep:
                    partial.update(self.provider.detail_step(resource.resource_id, step, settings))
                detail = partial.build()
            else:
                detail = self.provider.detail(resource.resource_type, resource.resource_id, settings)
        except EmdError as e:
            logger.warning(f"Blueprint resource {resource.resource_id} failed: {e}")
            return ResolvedResource(resource=resource, error=str(e))
        return ResolvedResource(resource=resource, detail=detail)

    # Completions (UI thread)

    def poll(self, block: bool = False, timeout: Optional[float] = None) -> int:
        """
        Apply pending completions.

        Args:
            block: Wait for the first completion
            timeout: Maximum wait in seconds when blocking

        Returns:
            Number of completions applied (stale ones are not counted)
        """
        applied = 0
        try:
            completion = self.completions.get(block=block, timeout=timeout)
        except queue.Empty:
            return 0

        while True:
            if self._apply(completion):
                applied += 1
            try:
                completion = self.completions.get_nowait()
            except queue.Empty:
                return applied

    def _apply(self, completion: Completion) -> bool:
        machine = self.machine
        if not machine.is_current(completion.generation):
            logger.debug(f"Dropping stale result for {completion.task} "
                         f"(generation {completion.generation}, now {machine.generation})")
            return False

        task = completion.task
        if isinstance(task, LoadMultiStepDetail):
            if completion.error is not None:
                machine.fail_multistep(completion.error)
                return True
            next_task = machine.advance_multistep(task.step, completion.result)
            if next_task is not None:
                self._dispatch(next_task)
            return True

        if isinstance(task, LoadBlueprintResources):
            resolved = completion.result
            if completion.error is not None:
                resolved = ResolvedResource(resource=self._blueprint_resources[task.index],
                                            error=str(completion.error))
            next_task = machine.advance_blueprint_cursor(resolved)
            self._dispatch(next_task)
            return True

        machine.complete_task(completion.result, completion.error)
        return True

    def _finish_blueprint(self) -> None:
        machine = self.machine
        resolved = list(machine.resolved)
        machine.complete_task(resolved)

        assembler = DocumentAssembler(machine.labeler.language)
        self.document = assembler.render_blueprint(self.blueprints.current, resolved)
        machine.enter(Screen.BLUEPRINT_PREVIEW)
        machine.status_message = (assembler.skipped_message(self.document)
                                  or machine.labeler.text("document_generated"))

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no task is in flight.

        Returns:
            True if idle, False if timeout expired first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self.machine.loading:
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return False
            self.poll(block=True, timeout=remaining)
        return True
