#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from pkgdialog.arch import CommandRunner, is_arch, which
from pkgdialog.backends import Installer
from pkgdialog.catalog import find_config, load_catalog, shared_identifiers
from pkgdialog.errors import PkgDialogError, PrerequisiteMissing
from pkgdialog.logging_utils import configure_logging
from pkgdialog.session import Session
from pkgdialog.ui_app import DialogUI, check_terminal

CACHE_DIR = os.path.expanduser("~/.cache/pkgdialog")
HISTORY_LOG = os.path.join(CACHE_DIR, "history.log")
APP_LOG = os.path.join(CACHE_DIR, "pkgdialog.log")

logger = logging.getLogger("pkgdialog")

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="pkgdialog", description="Install Arch packages from a categorized catalog.")
    ap.add_argument("-c", "--config", default=None, help="Path to packages.json")
    ap.add_argument("--dry-run", action="store_true", help="Print installer commands instead of running them")
    ap.add_argument("--no-preselect", action="store_true", help="Do not preselect items on a category's first visit")
    ap.add_argument("--debug", action="store_true", default=os.environ.get("DEBUG") == "1", help="Verbose log file")
    return ap

def check_prerequisites(dry_run: bool) -> None:
    check_terminal()
    if not dry_run and not which("pacman"):
        raise PrerequisiteMissing("pacman not found; this installer targets Arch Linux.")
    if not is_arch():
        logger.warning("Designed for Arch Linux (ID=arch).")

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(APP_LOG, debug=args.debug)

    try:
        cfg_path = find_config(args.config, script_dir=os.path.dirname(os.path.abspath(__file__)))
        cfg, categories = load_catalog(cfg_path)
        check_prerequisites(args.dry_run)
    except PkgDialogError as e:
        logger.error("%s", e)
        print(e, file=sys.stderr)
        return 1

    logger.info("Using config: %s (%d categories)", cfg_path, len(categories))
    for pkg, cats in shared_identifiers(categories).items():
        logger.info("%s is listed in %s and shares one selection", pkg, ", ".join(cats))

    ui_cfg = cfg["ui"]
    installer = Installer(
        CommandRunner(history_path=HISTORY_LOG, dry_run=args.dry_run),
        noconfirm=bool(cfg["pacman"]["noconfirm"]),
        sync_before_install=bool(cfg["pacman"]["sync_before_install"]),
        flatpak_remote=str(cfg["flatpak"]["remote"]),
        flatpak_remote_url=str(cfg["flatpak"]["remote_url"]),
    )
    session = Session(
        categories,
        DialogUI(title=str(ui_cfg["title"]), backtitle=str(ui_cfg["backtitle"])),
        installer,
        preselect=bool(cfg["preselect_first_visit"]) and not args.no_preselect,
        title=str(ui_cfg["title"]),
    )
    session.run()
    return 0

if __name__ == "__main__":
    sys.exit(main())
