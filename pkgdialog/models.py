from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .errors import InstallFailure

class Backend(str, Enum):
    REPO = "repo"
    AUR = "aur"
    FLATPAK = "flatpak"

# category names that imply a backend when no explicit "backend" key is given
BACKEND_BY_CATEGORY_NAME = {
    "AUR": Backend.AUR,
    "FLATPAK": Backend.FLATPAK,
}

@dataclass(frozen=True)
class PackageEntry:
    name: str
    desc: str = ""

    @property
    def is_placeholder(self) -> bool:
        return not self.name.strip() or self.name.lstrip().startswith("#")

@dataclass(frozen=True)
class Category:
    name: str
    items: List[PackageEntry]
    desc: str = ""
    backend: Backend = Backend.REPO

    def entries(self) -> List[PackageEntry]:
        """Items that can be shown and installed (placeholders skipped)."""
        return [it for it in self.items if not it.is_placeholder]

@dataclass(frozen=True)
class InstallPlan:
    repo: Tuple[str, ...] = ()
    aur: Tuple[str, ...] = ()
    flatpak: Tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return len(self.repo) + len(self.aur) + len(self.flatpak)

    def for_backend(self, backend: Backend) -> Tuple[str, ...]:
        return {Backend.REPO: self.repo, Backend.AUR: self.aur, Backend.FLATPAK: self.flatpak}[backend]

@dataclass
class BackendHandle:
    aur_helper: Optional[str] = None  # paru|yay
    flatpak_installed: bool = False

@dataclass
class InstallResult:
    backend: Backend
    requested: List[str]
    failed: List[str] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_status(self) -> None:
        if not self.ok:
            raise InstallFailure(self.backend.value, list(self.failed), self.message)
