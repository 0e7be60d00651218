"""
Curses presenter: decodes keys into intents and draws the App state.
"""

import curses
import logging
from typing import List, Optional, Tuple, Union

from .app import App, Intent
from .navigation import SELECT_SCREENS, Screen, kind_for_screen
from .plan import LoadMultiStepDetail, NetworkStep

logger = logging.getLogger(__name__)

ESCAPE = 27
TAB = 9
ENTER_KEYS = (curses.KEY_ENTER, 10, 13)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)

_KEYS = {
    curses.KEY_UP: Intent.UP,
    ord("k"): Intent.UP,
    curses.KEY_DOWN: Intent.DOWN,
    ord("j"): Intent.DOWN,
    curses.KEY_PPAGE: Intent.PAGE_UP,
    curses.KEY_NPAGE: Intent.PAGE_DOWN,
    ESCAPE: Intent.BACK,
    ord("b"): Intent.BACK,
    ord("r"): Intent.REFRESH,
    ord("a"): Intent.ADD,
    ord("d"): Intent.DELETE,
    ord("K"): Intent.MOVE_UP,
    ord("J"): Intent.MOVE_DOWN,
    ord("g"): Intent.GENERATE,
    ord("s"): Intent.SAVE,
    TAB: Intent.TAB,
    ord("q"): Intent.QUIT,
}

_TITLE_KEYS = {
    Screen.LOGIN: "login",
    Screen.BLUEPRINT_SELECT: "blueprint",
    Screen.BLUEPRINT_DETAIL: "blueprint",
    Screen.BLUEPRINT_NAME_INPUT: "new_blueprint",
    Screen.BLUEPRINT_PREVIEW: "preview",
    Screen.REGION_SELECT: "region",
    Screen.SERVICE_SELECT: "service",
    Screen.PREVIEW: "preview",
    Screen.SETTINGS: "settings",
}
for _kind, _screen in SELECT_SCREENS.items():
    _TITLE_KEYS[_screen] = _kind.label_key

_HELP = {
    Screen.LOGIN: "Enter: login  q: quit",
    Screen.BLUEPRINT_SELECT: "Enter: open  d: delete  Tab: settings  q: quit",
    Screen.BLUEPRINT_NAME_INPUT: "Enter: create  Esc: cancel",
    Screen.BLUEPRINT_DETAIL: "a: add  d: delete  K/J: reorder  g: generate  Esc: back",
    Screen.BLUEPRINT_PREVIEW: "Up/Down/PgUp/PgDn: scroll  s: save  Esc: back",
    Screen.REGION_SELECT: "Enter: select  Esc: back",
    Screen.SERVICE_SELECT: "Enter: select  Esc: back",
    Screen.PREVIEW: "Up/Down/PgUp/PgDn: scroll  s: save  a: add to blueprint  Esc: back",
    Screen.SETTINGS: "Enter: change language  Tab: back",
}


def read_key(stdscr) -> Optional[Union[int, str]]:
    """Read one key with get_wch; None when the timeout passes without input."""
    try:
        return stdscr.get_wch()
    except curses.error:
        return None


def decode_key(key: Optional[Union[int, str]], screen: Screen) -> Optional[Tuple[Intent, str]]:
    """
    Map a key from get_wch to an intent.

    Characters arrive as str and function keys as int. The name input
    screen takes printable characters as text instead of commands.

    Returns:
        (intent, text) or None for keys with no meaning
    """
    if key is None or key == -1:
        return None
    if isinstance(key, str):
        if screen == Screen.BLUEPRINT_NAME_INPUT and key.isprintable():
            return Intent.TEXT, key
        if len(key) != 1:
            return None
        key = ord(key)
    if key in ENTER_KEYS:
        return Intent.SELECT, ""
    if screen == Screen.BLUEPRINT_NAME_INPUT:
        if key == ESCAPE:
            return Intent.BACK, ""
        if key in BACKSPACE_KEYS:
            return Intent.BACKSPACE, ""
        # Bare ints above ASCII are single bytes of a multi-byte character
        if 32 <= key < 127:
            return Intent.TEXT, chr(key)
        return None
    if key in BACKSPACE_KEYS:
        return Intent.BACK, ""
    intent = _KEYS.get(key)
    if intent is None:
        return None
    return intent, ""


def progress_lines(app: App) -> List[str]:
    """Checklist of network steps shown while a VPC detail loads."""
    task = app.machine.task
    if not isinstance(task, LoadMultiStepDetail):
        return []
    lines = []
    for step in NetworkStep:
        if app.machine.progress.is_done(step):
            mark = "[x]"
        elif step == task.step:
            mark = "[>]"
        else:
            mark = "[ ]"
        lines.append(f"{mark} {app.labeler.text(step.label_key)}")
    return lines


class Presenter:
    """Draws one frame per loop iteration and feeds keys to the App."""

    def __init__(self, app: App):
        self.app = app

    def _put(self, stdscr, y: int, x: int, text: str, attr: int = 0) -> None:
        height, width = stdscr.getmaxyx()
        if y < 0 or y >= height or x >= width:
            return
        try:
            stdscr.addstr(y, x, text[:max(0, width - x - 1)], attr)
        except curses.error:
            # Writing the bottom-right cell raises; nothing to do
            pass

    def draw(self, stdscr) -> None:
        app = self.app
        t = app.labeler.text
        height, width = stdscr.getmaxyx()
        stdscr.erase()

        title = f" emd - {t(_TITLE_KEYS.get(app.screen, 'service'))} "
        if app.screen == Screen.BLUEPRINT_DETAIL and app.engine.current is not None:
            title += f"- {app.engine.current.name} "
        self._put(stdscr, 0, 0, title, curses.A_BOLD | curses.color_pair(4))
        info = f"{t('region')}: {app.config.region}"
        if app.identity:
            info += f"  |  {app.identity}"
        self._put(stdscr, 1, 2, info)
        self._put(stdscr, 2, 0, "=" * (width - 1))

        body_top = 3
        body_height = max(1, height - body_top - 3)

        if app.screen in (Screen.PREVIEW, Screen.BLUEPRINT_PREVIEW):
            lines = app.preview_lines()
            for offset, line in enumerate(lines[app.scroll:app.scroll + body_height]):
                self._put(stdscr, body_top + offset, 2, line)
        elif app.screen == Screen.BLUEPRINT_NAME_INPUT:
            self._put(stdscr, body_top + 1, 2, t("enter_blueprint_name"), curses.A_BOLD)
            self._put(stdscr, body_top + 2, 4, app.input_buffer + "_")
        elif app.screen == Screen.LOGIN:
            self._put(stdscr, body_top + 1, 2, t("aws_login_checking") if not app.status else app.status)
            self._put(stdscr, body_top + 2, 2, t("aws_configure_hint"))
        else:
            self._draw_rows(stdscr, body_top, body_height)

        if app.machine.loading:
            self._draw_busy(stdscr, body_top, width)

        self._put(stdscr, height - 2, 2, app.status, curses.color_pair(3))
        self._put(stdscr, height - 1, 2, _HELP.get(app.screen, "Enter: select  r: refresh  Esc: back"))
        stdscr.refresh()

    def _draw_rows(self, stdscr, top: int, height: int) -> None:
        app = self.app
        rows = app.rows()
        if not rows:
            kind = kind_for_screen(app.screen)
            if app.screen == Screen.BLUEPRINT_DETAIL:
                self._put(stdscr, top + 1, 2, app.labeler.text("press_a_to_add"))
            elif kind is not None and not app.machine.loading:
                self._put(stdscr, top + 1, 2, app.labeler.text("no_items", kind=app.labeler.text(kind.label_key)))
            return

        first = max(0, app.cursor - height + 1)
        for offset, row in enumerate(rows[first:first + height]):
            index = first + offset
            attr = curses.A_REVERSE if index == app.cursor else 0
            self._put(stdscr, top + offset, 2, f" {row} ", attr)

    def _draw_busy(self, stdscr, top: int, width: int) -> None:
        app = self.app
        lines = [app.machine.loading_label() or app.labeler.text("loading_msg"), app.labeler.text("aws_waiting")]
        lines += progress_lines(app)
        box_width = min(width - 4, max(len(line) for line in lines) + 4)
        x = max(2, (width - box_width) // 2)
        for offset, line in enumerate(lines):
            self._put(stdscr, top + 2 + offset, x, f"  {line}".ljust(box_width), curses.A_REVERSE)

    def run(self, stdscr) -> None:
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(1, curses.COLOR_RED, -1)
        curses.init_pair(2, curses.COLOR_GREEN, -1)
        curses.init_pair(3, curses.COLOR_YELLOW, -1)
        curses.init_pair(4, curses.COLOR_CYAN, -1)
        curses.curs_set(0)
        stdscr.timeout(100)

        self.draw(stdscr)
        self.app.login()

        while self.app.running:
            self.app.tick()
            self.draw(stdscr)
            decoded = decode_key(read_key(stdscr), self.app.screen)
            if decoded is not None:
                intent, text = decoded
                self.app.handle(intent, text)


def run_tui(app: App) -> None:
    """Run the presenter until the user quits."""
    try:
        curses.wrapper(Presenter(app).run)
    except KeyboardInterrupt:
        logger.info("Interrupted")
