from __future__ import annotations

import logging
import sys
from typing import Any, List, Optional, Sequence, Tuple

from textual.app import App
from textual.screen import ModalScreen
from textual.widgets import Footer, Header

from .errors import PrerequisiteMissing
from .modals import ChecklistModal, ConfirmModal, MenuModal, OutputModal

logger = logging.getLogger(__name__)

APP_NAME = "pkgdialog"

class DialogApp(App[Any]):
    """Hosts exactly one modal screen and exits with its result."""

    CSS = """
    Screen { background: $background; align: center middle; }
    Header { background: $panel; }
    Footer { background: $panel; }

    .toolbar { height: auto; padding: 0 1; margin: 1 0 0 0; }
    .toolbar Button { margin: 0 1 0 0; }

    SelectionList { height: auto; max-height: 24; border: round $surface; background: $panel; margin: 1 0 0 0; }
    OptionList { height: auto; max-height: 24; border: round $surface; background: $panel; margin: 1 0 0 0; }

    #modal { width: 92%; max-width: 120; height: auto; padding: 1 2; border: round $primary; background: $panel; }
    """

    def __init__(self, screen: ModalScreen, title: str = APP_NAME, subtitle: str = ""):
        super().__init__()
        self._modal = screen
        self.title = title
        self.sub_title = subtitle

    def compose(self):
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        self.push_screen(self._modal, callback=self.exit)

class DialogUI:
    """
    Blocking dialog calls for the session controller.

    Every call runs its own short textual app, so the terminal is released
    between dialogs and installer commands can prompt normally.
    """

    def __init__(self, title: str = APP_NAME, backtitle: str = ""):
        self.title = title
        self.backtitle = backtitle

    def _run(self, screen: ModalScreen) -> Any:
        return DialogApp(screen, title=self.title, subtitle=self.backtitle).run()

    def render_checklist(self, title: str, text: str, items: Sequence[Tuple[str, str, bool]]) -> Tuple[bool, List[str]]:
        result = self._run(ChecklistModal(title, text, items))
        if result is None:
            return False, []
        return True, list(result)

    def render_menu(self, title: str, text: str, items: Sequence[Tuple[str, str]]) -> Tuple[bool, str]:
        result: Optional[str] = self._run(MenuModal(title, text, items))
        if not result:
            return False, ""
        return True, result

    def render_yesno(self, title: str, text: str, yes_label: str = "Yes", no_label: str = "No") -> bool:
        return bool(self._run(ConfirmModal(title, text, yes_label, no_label)))

    def render_message(self, title: str, text: str) -> None:
        self._run(OutputModal(title, text))

def check_terminal() -> None:
    if not sys.stdout.isatty() or not sys.stdin.isatty():
        raise PrerequisiteMissing("This program must be run in a terminal (TTY).")
