from __future__ import annotations
from typing import Dict, Iterable, Set

from .models import Category

class SelectionStore:
    """
    Selection state for one interactive session.

    Selections are keyed by package identifier, not by category, so an identifier
    listed in two categories shares a single flag. A missing key means the user
    has not decided yet; that only matters for preselection.
    """

    def __init__(self) -> None:
        self._selected: Dict[str, bool] = {}
        self._visited: Set[str] = set()

    # ---------- selection ----------
    def is_selected(self, pkg: str) -> bool:
        return self._selected.get(pkg, False)

    def has_decision(self, pkg: str) -> bool:
        return pkg in self._selected

    def set_selected(self, pkg: str, value: bool) -> None:
        self._selected[pkg] = bool(value)

    def set_many(self, pkgs: Iterable[str], value: bool) -> None:
        for p in pkgs:
            self.set_selected(p, value)

    def clear_all(self) -> None:
        # keeps keys and visited flags so preselection does not come back
        for k in self._selected:
            self._selected[k] = False

    def selected_count(self, category: Category) -> int:
        return sum(1 for it in category.entries() if self.is_selected(it.name))

    def snapshot(self) -> Dict[str, bool]:
        """Copy of every decision made so far, for inspection and tests."""
        return dict(self._selected)

    # ---------- visited ----------
    def is_visited(self, category: str) -> bool:
        return category in self._visited

    def mark_visited(self, category: str) -> None:
        self._visited.add(category)

    @property
    def visited(self) -> frozenset:
        return frozenset(self._visited)

    # ---------- preselection ----------
    def initial_state(self, category: Category, pkg: str, preselect: bool) -> bool:
        if pkg in self._selected:
            return self._selected[pkg]
        return preselect and not self.is_visited(category.name)
