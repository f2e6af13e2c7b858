from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

def configure_logging(log_path: str, debug: bool = False) -> Optional[str]:
    """Send log records to a file; the terminal belongs to the dialogs and installers.

    Returns the path in use, or None when the file cannot be opened.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    if getattr(root, "_pkgdialog_configured", False):
        return getattr(root, "_pkgdialog_log_path", None)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    chosen: Optional[str] = log_path
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
        chosen = None
    handler.setFormatter(fmt)
    root.addHandler(handler)

    setattr(root, "_pkgdialog_configured", True)
    setattr(root, "_pkgdialog_log_path", chosen)

    logging.getLogger(__name__).info("Logging initialized (path=%s, debug=%s)", chosen, debug)
    return chosen
