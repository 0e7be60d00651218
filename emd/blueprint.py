"""
Blueprints: named, ordered lists of resource references, and the engine
that edits them and keeps the persisted store in step.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .catalog import ResourceDetail, ResourceType
from .errors import NotFoundError, PersistenceError, ValidationError
from .i18n import Labeler

logger = logging.getLogger(__name__)


class BlueprintResource(BaseModel):
    """Reference to one cloud resource inside a blueprint."""
    model_config = ConfigDict(extra="ignore")

    resource_type: ResourceType
    region: str
    resource_id: str
    resource_name: str = ""

    def display(self) -> str:
        if self.resource_name and self.resource_name != self.resource_id:
            return f"{self.resource_name} ({self.resource_id})"
        return self.resource_id


class Blueprint(BaseModel):
    """A named, ordered collection of resource references. Duplicates allowed."""
    model_config = ConfigDict(extra="ignore")

    name: str
    resources: List[BlueprintResource] = Field(default_factory=list)

    def add_resource(self, resource: BlueprintResource) -> None:
        self.resources.append(resource)

    def remove_resource(self, index: int) -> bool:
        if 0 <= index < len(self.resources):
            del self.resources[index]
            return True
        return False

    def swap(self, a: int, b: int) -> None:
        self.resources[a], self.resources[b] = self.resources[b], self.resources[a]


class BlueprintStore(BaseModel):
    """All blueprints in creation order."""
    model_config = ConfigDict(extra="ignore")

    blueprints: List[Blueprint] = Field(default_factory=list)

    def add_blueprint(self, blueprint: Blueprint) -> None:
        self.blueprints.append(blueprint)

    def remove_blueprint(self, index: int) -> bool:
        if 0 <= index < len(self.blueprints):
            del self.blueprints[index]
            return True
        return False

    def get(self, index: int) -> Optional[Blueprint]:
        if 0 <= index < len(self.blueprints):
            return self.blueprints[index]
        return None

    def find(self, name: str) -> Optional[int]:
        for index, blueprint in enumerate(self.blueprints):
            if blueprint.name == name:
                return index
        return None


@dataclass
class ResolvedResource:
    """A blueprint entry paired with its fetched detail, or the reason it failed."""
    resource: BlueprintResource
    detail: Optional[ResourceDetail] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.detail is not None


class BlueprintEngine:
    """
    Edits blueprints and persists every change.

    The open blueprint (``current``) and its entry in ``store`` are separate
    values; every successful mutation of ``current`` is copied back into the
    store at ``selected_index`` before saving. A failed save keeps the
    in-memory change and reports it through ``message``.
    """

    def __init__(self, store: BlueprintStore, saver: Callable[[BlueprintStore], None],
                 labeler: Optional[Labeler] = None):
        self.store = store
        self.saver = saver
        self.labeler = labeler or Labeler()
        self.selected_index = 0
        self.current: Optional[Blueprint] = None
        self.message = ""

    @property
    def blueprints(self) -> List[Blueprint]:
        return self.store.blueprints

    @property
    def is_open(self) -> bool:
        return self.current is not None

    def save(self) -> bool:
        try:
            self.saver(self.store)
        except PersistenceError as e:
            logger.error(f"Blueprint save failed: {e}")
            self.message = self.labeler.text("blueprint_save_failed")
            return False
        self.message = self.labeler.text("blueprint_saved")
        return True

    def create(self, name: str) -> Blueprint:
        """
        Append a new, empty blueprint and select it.

        Raises:
            ValidationError: If the name is empty after trimming
        """
        name = name.strip()
        if not name:
            raise ValidationError(self.labeler.text("blueprint_name_empty"))

        blueprint = Blueprint(name=name)
        self.store.add_blueprint(blueprint)
        self.selected_index = len(self.store.blueprints) - 1
        logger.info(f"Created blueprint '{name}' at index {self.selected_index}")
        self.save()
        return blueprint

    def delete(self, index: int) -> bool:
        if not self.store.remove_blueprint(index):
            return False

        if self.selected_index >= len(self.store.blueprints) and self.selected_index > 0:
            self.selected_index -= 1
        logger.info(f"Deleted blueprint at index {index}")
        if self.save():
            self.message = self.labeler.text("blueprint_deleted")
        return True

    def open(self, index: int) -> Blueprint:
        """
        Open the blueprint at index for editing.

        Raises:
            NotFoundError: If index no longer refers to a blueprint
        """
        stored = self.store.get(index)
        if stored is None:
            raise NotFoundError(f"Blueprint index {index} out of range")
        self.selected_index = index
        self.current = stored.model_copy(deep=True)
        return self.current

    def close(self) -> None:
        self.current = None

    def add_resource(self, resource: BlueprintResource) -> bool:
        if self.current is None:
            self.message = self.labeler.text("blueprint_not_open")
            return False
        self.current.add_resource(resource)
        if self._sync():
            self.message = self.labeler.text("resource_added")
        return True

    def remove_resource(self, index: int) -> bool:
        if self.current is None:
            self.message = self.labeler.text("blueprint_not_open")
            return False
        if not self.current.remove_resource(index):
            return False
        if self._sync():
            self.message = self.labeler.text("resource_deleted")
        return True

    def move_up(self, index: int) -> bool:
        if index <= 0 or self.current is None:
            return False
        if index >= len(self.current.resources):
            return False
        self.current.swap(index, index - 1)
        self._sync()
        return True

    def move_down(self, index: int) -> bool:
        if self.current is None or index < 0:
            return False
        if index + 1 >= len(self.current.resources):
            return False
        self.current.swap(index, index + 1)
        self._sync()
        return True

    def _sync(self) -> bool:
        if self.store.get(self.selected_index) is None:
            # Blueprint was deleted underneath the open copy
            logger.warning(f"Open blueprint has no store entry at index {self.selected_index}")
            self.message = self.labeler.text("resource_not_found")
            return False
        self.store.blueprints[self.selected_index] = self.current.model_copy(deep=True)
        return self.save()
