from __future__ import annotations
import logging
from enum import Enum
from typing import List, Tuple

from .models import Category
from .selection import SelectionStore

logger = logging.getLogger(__name__)

class UserAction(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

class CategoryPresenter:
    """Bridges catalog categories and the checklist dialog."""

    def __init__(self, store: SelectionStore, ui, *, preselect: bool = True, title: str = ""):
        self.store = store
        self.ui = ui
        self.preselect = preselect
        self.title = title

    def checklist_items(self, category: Category) -> List[Tuple[str, str, bool]]:
        return [
            (it.name, it.desc, self.store.initial_state(category, it.name, self.preselect))
            for it in category.entries()
        ]

    def present(self, category: Category) -> UserAction:
        items = self.checklist_items(category)
        title = f"{self.title} — {category.name}" if self.title else category.name
        try:
            confirmed, chosen = self.ui.render_checklist(
                title, f"Select packages in {category.name}: {category.desc}", items
            )
        finally:
            self.store.mark_visited(category.name)

        if not confirmed:
            logger.debug("Checklist %s cancelled", category.name)
            return UserAction.CANCELLED

        names = [it.name for it in category.entries()]
        self.store.set_many(names, False)
        known = set(names)
        for pkg in chosen:
            if pkg in known:
                self.store.set_selected(pkg, True)
            else:
                logger.warning("Ignoring unknown selection %r from %s", pkg, category.name)
        logger.info("Category %s: %d/%d selected", category.name, self.store.selected_count(category), len(names))
        return UserAction.CONFIRMED
