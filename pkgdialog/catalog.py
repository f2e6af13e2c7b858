from __future__ import annotations
import json
import os
from typing import Any, Dict, List, Optional, Sequence

from .errors import ConfigMissing, InvalidCatalog
from .models import BACKEND_BY_CATEGORY_NAME, Backend, Category, PackageEntry

CONFIG_NAME = "packages.json"
CONFIG_ENV = "PKGDIALOG_CONFIG"
RESERVED_NAMES = ("INSTALL", "CLEAR", "QUIT")

DEFAULT_FLATHUB_URL = "https://flathub.org/repo/flathub.flatpakrepo"

def default_config() -> Dict[str, Any]:
    return {
        "ui": {
            "title": "Arch Installer (pacman + AUR + Flatpak)",
            "backtitle": "Space=toggle, Enter=confirm, Tab=move. Esc/Cancel to go back.",
        },
        "preselect_first_visit": True,
        "pacman": {"noconfirm": False, "sync_before_install": True},
        "flatpak": {"remote": "flathub", "remote_url": DEFAULT_FLATHUB_URL},
        "categories": [],
    }

def config_candidates(script_dir: Optional[str] = None) -> List[str]:
    out = [os.path.join(os.getcwd(), CONFIG_NAME)]
    if script_dir:
        out.append(os.path.join(script_dir, CONFIG_NAME))
    out.append(os.path.expanduser(os.path.join("~/.config/pkgdialog", CONFIG_NAME)))
    return out

def find_config(explicit: Optional[str] = None, script_dir: Optional[str] = None) -> str:
    """
    Resolve the catalog path: explicit flag, then $PKGDIALOG_CONFIG, then the usual spots.
    """
    if explicit:
        if not os.path.isfile(explicit):
            raise ConfigMissing(f"Configuration file not found: {explicit}")
        return explicit
    env_path = os.environ.get(CONFIG_ENV, "").strip()
    if env_path:
        if not os.path.isfile(env_path):
            raise ConfigMissing(f"Configuration file not found: {env_path} (from ${CONFIG_ENV})")
        return env_path
    tried = config_candidates(script_dir)
    for cand in tried:
        if os.path.isfile(cand):
            return cand
    raise ConfigMissing(
        "Configuration file not found. Pass it with -c /path/to/packages.json. Tried: " + ", ".join(tried)
    )

def load_config(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigMissing(f"Cannot read {path}: {e}") from e
    if not raw.strip():
        raise InvalidCatalog(f"{path} is empty")
    try:
        cfg = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidCatalog(f"{path}: {e}") from e
    if not isinstance(cfg, dict):
        raise InvalidCatalog(f"{path}: top-level value must be an object")

    defaults = default_config()
    for k, v in defaults.items():
        cfg.setdefault(k, v)
    for section in ("ui", "pacman", "flatpak"):
        if not isinstance(cfg[section], dict):
            raise InvalidCatalog(f"{path}: '{section}' must be an object")
        for k, v in defaults[section].items():
            cfg[section].setdefault(k, v)
    return cfg

def parse_entry(it: Any) -> Optional[PackageEntry]:
    # "name|description" or {"name": ..., "desc": ...}
    if isinstance(it, str):
        name, _, desc = it.partition("|")
        return PackageEntry(name=name.strip(), desc=desc.strip())
    if isinstance(it, dict):
        return PackageEntry(
            name=str(it.get("name", "")).strip(),
            desc=str(it.get("desc", "")).strip(),
        )
    return None

def resolve_backend(name: str, explicit: Any = None) -> Backend:
    if explicit:
        try:
            return Backend(str(explicit).strip().lower())
        except ValueError:
            raise InvalidCatalog(f"Category {name}: unknown backend {explicit!r}") from None
    return BACKEND_BY_CATEGORY_NAME.get(name, Backend.REPO)

def parse_categories(cfg: Dict[str, Any]) -> List[Category]:
    out: List[Category] = []
    seen = set()
    for c in cfg.get("categories", []) or []:
        if not isinstance(c, dict):
            raise InvalidCatalog(f"Category must be an object, got {c!r}")
        name = str(c.get("name", "")).strip()
        if not name:
            raise InvalidCatalog("Category without a name")
        if name in RESERVED_NAMES:
            raise InvalidCatalog(f"Category name {name} is reserved for the main menu")
        if name in seen:
            raise InvalidCatalog(f"Duplicate category {name}")
        seen.add(name)

        items: List[PackageEntry] = []
        for it in c.get("items", []) or []:
            entry = parse_entry(it)
            if entry is not None:
                items.append(entry)
        out.append(
            Category(
                name=name,
                items=items,
                desc=str(c.get("desc", "")).strip() or name,
                backend=resolve_backend(name, c.get("backend")),
            )
        )
    return out

def load_catalog(path: str) -> tuple[Dict[str, Any], List[Category]]:
    cfg = load_config(path)
    categories = parse_categories(cfg)
    if not categories:
        raise InvalidCatalog(f"{path}: no categories defined")
    return cfg, categories

def shared_identifiers(categories: Sequence[Category]) -> Dict[str, List[str]]:
    """Identifiers that appear in more than one category (they share one selection flag)."""
    where: Dict[str, List[str]] = {}
    for c in categories:
        for it in c.entries():
            where.setdefault(it.name, [])
            if c.name not in where[it.name]:
                where[it.name].append(c.name)
    return {k: v for k, v in where.items() if len(v) > 1}
