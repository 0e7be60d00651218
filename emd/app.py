"""
Application controller: turns presenter intents into state machine,
orchestrator and blueprint engine operations.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .assembler import Document, DocumentAssembler
from .blueprint import BlueprintEngine, BlueprintResource, BlueprintStore
from .catalog import SERVICE_KINDS, ResourceType
from .config import REGIONS, ProviderConfig, Settings, region_index
from .errors import EmdError, PersistenceError, ProviderError, ValidationError
from .i18n import Labeler
from .navigation import SELECT_SCREENS, NavigationStateMachine, Screen, kind_for_screen
from .orchestrator import Orchestrator
from .plan import LoadBlueprintResources, LoadDetail, LoadList, LoadMultiStepDetail, RefreshList
from .provider.base import ResourceProvider
from . import store

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


class Intent(Enum):
    """Presenter-independent user commands."""
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    SELECT = "select"
    BACK = "back"
    REFRESH = "refresh"
    ADD = "add"
    DELETE = "delete"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    GENERATE = "generate"
    SAVE = "save"
    TAB = "tab"
    TEXT = "text"
    BACKSPACE = "backspace"
    QUIT = "quit"


# Accepted while a task is in flight
_BUSY_INTENTS = {Intent.BACK, Intent.QUIT}


class App:
    """
    Holds everything the presenter draws and reacts to its intents.

    All methods run on the UI thread; tick() must be called regularly so
    worker completions get applied.
    """

    def __init__(self, provider: ResourceProvider, settings: Optional[Settings] = None,
                 blueprints: Optional[BlueprintStore] = None, config: Optional[ProviderConfig] = None,
                 save_blueprints: Callable[[BlueprintStore], None] = store.save_blueprints,
                 save_settings: Callable[[Settings], None] = store.save_settings,
                 save_document: Callable[[str, str], Path] = store.save_document):
        self.provider = provider
        self.settings = settings or Settings()
        self.labeler = Labeler(self.settings.language)
        self.config = config or ProviderConfig(region=self.settings.default_region().code)
        self.machine = NavigationStateMachine(self.labeler)
        self.engine = BlueprintEngine(blueprints or BlueprintStore(), save_blueprints, self.labeler)
        self.orchestrator = Orchestrator(self.machine, provider, self.config, self.engine)
        self._save_settings = save_settings
        self._save_document = save_document

        self.cursor = 0
        self.scroll = 0
        self.input_buffer = ""
        self.blueprint_mode = False
        self.identity = ""
        self.document: Optional[Document] = None
        self.running = True
        self._awaiting_detail = False

        self._handlers: Dict[Screen, Callable[[Intent, str], None]] = {
            Screen.LOGIN: self._on_login,
            Screen.BLUEPRINT_SELECT: self._on_blueprint_select,
            Screen.BLUEPRINT_NAME_INPUT: self._on_name_input,
            Screen.BLUEPRINT_DETAIL: self._on_blueprint_detail,
            Screen.BLUEPRINT_PREVIEW: self._on_preview,
            Screen.REGION_SELECT: self._on_region_select,
            Screen.SERVICE_SELECT: self._on_service_select,
            Screen.PREVIEW: self._on_preview,
            Screen.SETTINGS: self._on_settings,
        }
        for select_screen in SELECT_SCREENS.values():
            self._handlers[select_screen] = self._on_resource_select

    # State the presenter reads

    @property
    def screen(self) -> Screen:
        return self.machine.screen

    @property
    def status(self) -> str:
        return self.machine.status_message

    def _notify(self, message: str) -> None:
        if message:
            self.machine.status_message = message

    def rows(self) -> List[str]:
        """Selectable rows of the current screen."""
        t = self.labeler.text
        screen = self.screen
        if screen == Screen.BLUEPRINT_SELECT:
            names = [f"{bp.name} ({len(bp.resources)})" for bp in self.engine.blueprints]
            return names + [t("new_blueprint"), t("single_mode")]
        if screen == Screen.BLUEPRINT_DETAIL:
            if self.engine.current is None:
                return []
            return [
                f"[{t(r.resource_type.label_key)}] {r.display()} - {r.region}"
                for r in self.engine.current.resources
            ]
        if screen == Screen.REGION_SELECT:
            return [f"{r.name(self.labeler.language)} ({r.code})" for r in REGIONS]
        if screen == Screen.SERVICE_SELECT:
            return [t(kind.label_key) for kind in SERVICE_KINDS]
        if screen == Screen.SETTINGS:
            return [f"{t('language')}: {self.labeler.language.display()}"]
        kind = kind_for_screen(screen)
        if kind is not None:
            return [self._resource_row(r) for r in self.machine.items(kind)]
        return []

    @staticmethod
    def _resource_row(resource) -> str:
        extras = [value for value in (resource.state, resource.az, resource.cidr) if value]
        if extras:
            return f"{resource.display()} [{', '.join(extras)}]"
        return resource.display()

    def preview_lines(self) -> List[str]:
        if self.document is None:
            return []
        return self.document.text.splitlines()

    # Event loop hooks

    def tick(self) -> None:
        """Apply finished worker results and follow the screen changes they imply."""
        self.orchestrator.poll()

        if self._awaiting_detail and not self.machine.loading:
            self._awaiting_detail = False
            detail = self.machine.detail
            if detail is not None:
                self.document = DocumentAssembler(self.labeler.language).render_single(detail)
                self._go(Screen.PREVIEW)

        if (self.screen == Screen.BLUEPRINT_PREVIEW and self.orchestrator.document is not None
                and self.document is not self.orchestrator.document):
            self.document = self.orchestrator.document
            self.cursor = self.scroll = 0

    def handle(self, intent: Intent, text: str = "") -> None:
        if intent == Intent.QUIT:
            self.running = False
            return
        if self.machine.loading and intent not in _BUSY_INTENTS:
            logger.debug(f"Ignoring {intent.value} while loading")
            return
        try:
            self._handlers[self.screen](intent, text)
        except EmdError as e:
            logger.warning(f"{intent.value} on {self.screen.value} failed: {e}")
            self._notify(str(e))

    def login(self) -> bool:
        """Check credentials; on success move on to blueprint selection."""
        self._notify(self.labeler.text("aws_login_checking"))
        try:
            self.identity = self.provider.check_login(self.config.snapshot())
        except ProviderError as e:
            self._notify(f"{self.labeler.text('aws_login_required')}: {e}")
            return False
        self._go(Screen.BLUEPRINT_SELECT)
        self._notify(self.labeler.text("aws_login_verified"))
        return True

    # Navigation helpers

    def _go(self, screen: Screen) -> None:
        self._awaiting_detail = False
        self.machine.enter(screen)
        self.cursor = 0
        self.scroll = 0
        if screen == Screen.REGION_SELECT:
            self.cursor = region_index(self.config.region) or 0

    def _move(self, intent: Intent, count: int) -> None:
        step = {Intent.UP: -1, Intent.DOWN: 1, Intent.PAGE_UP: -PAGE_SIZE, Intent.PAGE_DOWN: PAGE_SIZE}
        if intent not in step or count == 0:
            return
        self.cursor = max(0, min(count - 1, self.cursor + step[intent]))

    def _clamp_cursor(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.rows()) - 1))

    # Screens

    def _on_login(self, intent: Intent, text: str) -> None:
        if intent in (Intent.SELECT, Intent.REFRESH):
            self.login()

    def _on_blueprint_select(self, intent: Intent, text: str) -> None:
        count = len(self.engine.blueprints)
        if intent == Intent.SELECT:
            if self.cursor < count:
                self.engine.open(self.cursor)
                self.blueprint_mode = True
                self._go(Screen.BLUEPRINT_DETAIL)
            elif self.cursor == count:
                self.input_buffer = ""
                self._go(Screen.BLUEPRINT_NAME_INPUT)
            else:
                self.engine.close()
                self.blueprint_mode = False
                self._go(Screen.REGION_SELECT)
        elif intent == Intent.DELETE:
            if self.cursor < count and self.engine.delete(self.cursor):
                self._notify(self.engine.message)
                self._clamp_cursor()
        elif intent == Intent.TAB:
            self._go(Screen.SETTINGS)
        else:
            self._move(intent, len(self.rows()))

    def _on_name_input(self, intent: Intent, text: str) -> None:
        if intent == Intent.TEXT:
            self.input_buffer += text
        elif intent == Intent.BACKSPACE:
            self.input_buffer = self.input_buffer[:-1]
        elif intent == Intent.SELECT:
            try:
                self.engine.create(self.input_buffer)
            except ValidationError as e:
                self._notify(str(e))
                return
            message = self.engine.message
            self.engine.open(self.engine.selected_index)
            self.blueprint_mode = True
            self.input_buffer = ""
            self._go(Screen.BLUEPRINT_DETAIL)
            self._notify(message)
        elif intent == Intent.BACK:
            self.input_buffer = ""
            self._go(Screen.BLUEPRINT_SELECT)

    def _on_blueprint_detail(self, intent: Intent, text: str) -> None:
        engine = self.engine
        if intent == Intent.BACK:
            index = engine.selected_index
            engine.close()
            self.blueprint_mode = False
            self._go(Screen.BLUEPRINT_SELECT)
            self.cursor = index
        elif intent == Intent.MOVE_UP:
            if engine.move_up(self.cursor):
                self.cursor -= 1
                self._notify(engine.message)
        elif intent == Intent.MOVE_DOWN:
            if engine.move_down(self.cursor):
                self.cursor += 1
                self._notify(engine.message)
        elif intent == Intent.DELETE:
            if engine.remove_resource(self.cursor):
                self._notify(engine.message)
                self._clamp_cursor()
        elif intent == Intent.ADD:
            self._go(Screen.REGION_SELECT)
        elif intent == Intent.GENERATE:
            self.orchestrator.request(LoadBlueprintResources())
        else:
            self._move(intent, len(self.rows()))

    def _on_region_select(self, intent: Intent, text: str) -> None:
        if intent == Intent.SELECT:
            region = REGIONS[self.cursor]
            self.config.set_region(region.code)
            logger.info(f"Region set to {region.code}")
            self._go(Screen.SERVICE_SELECT)
        elif intent == Intent.BACK:
            self._go(Screen.BLUEPRINT_DETAIL if self.blueprint_mode else Screen.BLUEPRINT_SELECT)
        else:
            self._move(intent, len(REGIONS))

    def _on_service_select(self, intent: Intent, text: str) -> None:
        if intent == Intent.SELECT:
            kind = SERVICE_KINDS[self.cursor]
            self._go(SELECT_SCREENS[kind])
            self.orchestrator.request(LoadList(kind))
        elif intent == Intent.BACK:
            self._go(Screen.REGION_SELECT)
        else:
            self._move(intent, len(SERVICE_KINDS))

    def _on_resource_select(self, intent: Intent, text: str) -> None:
        kind = kind_for_screen(self.screen)
        items = self.machine.items(kind)
        if intent == Intent.SELECT:
            if not items:
                return
            resource = items[min(self.cursor, len(items) - 1)]
            self.machine.clear_detail()
            if kind == ResourceType.NETWORK:
                task = LoadMultiStepDetail(resource.id)
            else:
                task = LoadDetail(kind, resource.id)
            self._awaiting_detail = self.orchestrator.request(task)
        elif intent == Intent.REFRESH:
            self.orchestrator.request(RefreshList(kind))
        elif intent == Intent.BACK:
            self._go(Screen.SERVICE_SELECT)
            self.cursor = SERVICE_KINDS.index(kind)
        else:
            self._move(intent, len(items))

    def _on_preview(self, intent: Intent, text: str) -> None:
        if intent == Intent.SAVE:
            self.save_document()
        elif intent == Intent.ADD and self.screen == Screen.PREVIEW and self.blueprint_mode:
            self._add_current_resource()
        elif intent == Intent.BACK:
            if self.screen == Screen.BLUEPRINT_PREVIEW:
                self._go(Screen.BLUEPRINT_DETAIL)
            else:
                kind = self.machine.current_resource_type()
                self.machine.clear_detail()
                self._go(SELECT_SCREENS.get(kind, Screen.SERVICE_SELECT))
        else:
            self._move(intent, len(self.preview_lines()))
            self.scroll = self.cursor

    def _add_current_resource(self) -> None:
        info = self.machine.current_resource_info()
        kind = self.machine.current_resource_type()
        if info is None or kind is None:
            return
        resource_id, name = info
        resource = BlueprintResource(
            resource_type=kind, region=self.config.region, resource_id=resource_id, resource_name=name,
        )
        added = self.engine.add_resource(resource)
        message = self.engine.message
        if added:
            self._go(Screen.BLUEPRINT_DETAIL)
            self.cursor = len(self.engine.current.resources) - 1
        self._notify(message)

    def _on_settings(self, intent: Intent, text: str) -> None:
        if intent == Intent.SELECT:
            self.labeler.language = self.labeler.language.toggle()
            self.settings.language = self.labeler.language
            try:
                self._save_settings(self.settings)
            except PersistenceError as e:
                logger.error(f"Saving settings failed: {e}")
                self._notify(self.labeler.text("save_failed"))
                return
            self._notify(self.labeler.text("settings_saved"))
        elif intent in (Intent.TAB, Intent.BACK):
            self._go(Screen.BLUEPRINT_SELECT)

    # Export

    def document_path(self) -> Path:
        name = store.default_document_name(self.document.title) if self.document else "document.md"
        return Path(self.settings.export_dir).expanduser() / name

    def save_document(self) -> Optional[Path]:
        if self.document is None:
            return None
        try:
            path = self._save_document(str(self.document_path()), self.document.text)
        except PersistenceError as e:
            logger.error(f"Export failed: {e}")
            self._notify(self.labeler.text("save_failed"))
            return None
        self._notify(f"{self.labeler.text('save_complete')}: {path}")
        return path
