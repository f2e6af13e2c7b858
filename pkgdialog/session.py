from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .backends import Installer
from .models import Category, InstallPlan, InstallResult
from .planner import plan
from .presenter import CategoryPresenter
from .selection import SelectionStore

logger = logging.getLogger(__name__)

INSTALL = "INSTALL"
CLEAR = "CLEAR"
QUIT = "QUIT"

class State(str, Enum):
    BROWSING = "browsing"
    CATEGORY_OPEN = "category_open"
    REVIEWING = "reviewing"
    INSTALLING = "installing"
    POST_INSTALL_PROMPT = "post_install_prompt"
    DONE = "done"

class Session:
    """
    Top-level menu loop.

    Browsing -> CategoryOpen -> Browsing, Browsing -> Reviewing -> Installing
    -> PostInstallPrompt, and QUIT or a cancelled main menu ends it.
    """

    def __init__(
        self,
        categories: Sequence[Category],
        ui,
        installer: Installer,
        *,
        preselect: bool = True,
        title: str = "Arch Installer (pacman + AUR + Flatpak)",
    ):
        self.categories = list(categories)
        self.by_name: Dict[str, Category] = {c.name: c for c in self.categories}
        self.ui = ui
        self.installer = installer
        self.title = title
        self.store = SelectionStore()
        self.presenter = CategoryPresenter(self.store, ui, preselect=preselect, title=title)

        self.state = State.BROWSING
        self.open_category: Optional[Category] = None
        self.current_plan: Optional[InstallPlan] = None
        self.last_results: List[InstallResult] = []

    # ---------- main loop ----------
    def run(self) -> None:
        while self.state is not State.DONE:
            self.step()

    def step(self) -> State:
        handler = {
            State.BROWSING: self._browse,
            State.CATEGORY_OPEN: self._category,
            State.REVIEWING: self._review,
            State.INSTALLING: self._install,
            State.POST_INSTALL_PROMPT: self._post_install,
        }[self.state]
        nxt = handler()
        if nxt is not self.state:
            logger.debug("State %s -> %s", self.state.value, nxt.value)
        self.state = nxt
        return nxt

    # ---------- states ----------
    def menu_items(self) -> List[tuple]:
        items = [
            (c.name, f"{c.desc} — selected: {self.store.selected_count(c)}")
            for c in self.categories
        ]
        items += [
            (INSTALL, "Review & install selections"),
            (CLEAR, "Clear all selections"),
            (QUIT, "Exit without installing"),
        ]
        return items

    def _browse(self) -> State:
        ok, choice = self.ui.render_menu(self.title, "Choose a category, or INSTALL when ready:", self.menu_items())
        if not ok or choice == QUIT:
            return State.DONE
        if choice == CLEAR:
            self.store.clear_all()
            logger.info("All selections cleared")
            return State.BROWSING
        if choice == INSTALL:
            self.current_plan = plan(self.categories, self.store)
            if self.current_plan.total == 0:
                self.ui.render_message(self.title, "No items selected.")
                return State.BROWSING
            return State.REVIEWING
        cat = self.by_name.get(choice)
        if cat is None:
            logger.warning("Unknown menu choice %r", choice)
            return State.BROWSING
        self.open_category = cat
        return State.CATEGORY_OPEN

    def _category(self) -> State:
        if self.open_category is not None:
            self.presenter.present(self.open_category)
        self.open_category = None
        return State.BROWSING

    def review_text(self, p: InstallPlan) -> str:
        return (
            "Selections:\n"
            f"  • pacman:  {len(p.repo)}\n"
            f"  • AUR:     {len(p.aur)}\n"
            f"  • Flatpak: {len(p.flatpak)}\n\n"
            "Proceed with installation?"
        )

    def _review(self) -> State:
        p = self.current_plan
        if p is None or p.total == 0:
            return State.BROWSING
        if not self.ui.render_yesno(self.title, self.review_text(p)):
            return State.BROWSING
        return State.INSTALLING

    def _install(self) -> State:
        p = self.current_plan
        if p is None:
            return State.BROWSING
        logger.info("Installing: repo=%s aur=%s flatpak=%s", list(p.repo), list(p.aur), list(p.flatpak))
        self.last_results = self.installer.run(p)
        failures = [r for r in self.last_results if not r.ok]
        if failures:
            lines = ["Some installations failed:", ""]
            lines += [f"  • {r.backend.value}: {r.message}" for r in failures]
            lines += ["", "Your selections are kept; choose INSTALL to retry."]
            self.ui.render_message(self.title, "\n".join(lines))
            return State.BROWSING
        return State.POST_INSTALL_PROMPT

    def _post_install(self) -> State:
        p = self.current_plan or InstallPlan()
        if self.installer.handle.flatpak_installed:
            reboot = self.ui.render_yesno(
                self.title,
                "Flatpak was just installed. A reboot is recommended to ensure session integration. Reboot now?",
                yes_label="Reboot now",
                no_label="Back to menu",
            )
            if reboot:
                rc = self.installer.reboot()
                if rc != 0:
                    self.ui.render_message(self.title, f"Reboot failed (exit code {rc}). Please reboot manually.")
                    return State.BROWSING
                return State.DONE
            return State.BROWSING
        status = f"Finished. pacman={len(p.repo)}, AUR={len(p.aur)}, Flatpak={len(p.flatpak)}."
        if self.ui.render_yesno(self.title, f"{status}\n\nExit now?", yes_label="Exit", no_label="Back to menu"):
            return State.DONE
        return State.BROWSING
