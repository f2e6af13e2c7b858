from __future__ import annotations
from typing import Dict, List, Sequence

from .models import Backend, Category, InstallPlan
from .selection import SelectionStore

def plan(categories: Sequence[Category], store: SelectionStore) -> InstallPlan:
    """Split the current selection into per-backend lists, in catalog order."""
    lists: Dict[Backend, List[str]] = {b: [] for b in Backend}
    for cat in categories:
        bucket = lists[cat.backend]
        for it in cat.entries():
            if store.is_selected(it.name) and it.name not in bucket:
                bucket.append(it.name)
    return InstallPlan(
        repo=tuple(lists[Backend.REPO]),
        aur=tuple(lists[Backend.AUR]),
        flatpak=tuple(lists[Backend.FLATPAK]),
    )
