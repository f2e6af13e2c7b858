from __future__ import annotations
import logging
import os
import shlex
import shutil
import subprocess
from typing import List, Optional, Sequence, Tuple

from .history import log_history

logger = logging.getLogger(__name__)

def which(cmd: str) -> bool:
    return shutil.which(cmd) is not None

def fmt_cmd(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in cmd)

def is_arch() -> bool:
    try:
        with open("/etc/os-release", "r", encoding="utf-8") as f:
            return any(ln.strip() == "ID=arch" for ln in f)
    except OSError:
        return False

class CommandRunner:
    """
    Runs installer commands.

    call() inherits the terminal so pacman/sudo can prompt; capture() collects
    output for parsing. Every executed command is logged and appended to the
    history file. With dry_run nothing is executed and every call succeeds.
    """

    def __init__(self, history_path: Optional[str] = None, dry_run: bool = False):
        self.history_path = history_path
        self.dry_run = dry_run

    def which(self, cmd: str) -> bool:
        return which(cmd)

    def _record(self, action: str, cmd: Sequence[str], rc: int) -> None:
        if self.history_path:
            try:
                log_history(self.history_path, action, [fmt_cmd(cmd)], rc)
            except OSError as e:
                logger.warning("Cannot write history %s: %s", self.history_path, e)

    def call(self, cmd: List[str], *, action: str = "run", cwd: Optional[str] = None) -> int:
        logger.info("CMD %s%s", fmt_cmd(cmd), " (dry-run)" if self.dry_run else "")
        if self.dry_run:
            print(f"[dry-run] {fmt_cmd(cmd)}")
            return 0
        try:
            rc = subprocess.call(cmd, cwd=cwd)
        except FileNotFoundError:
            logger.error("Command not found: %s", cmd[0])
            rc = 127
        except OSError as e:
            logger.error("Cannot run %s: %s", cmd[0], e)
            rc = 126
        if rc != 0:
            logger.warning("Command exited with %d: %s", rc, fmt_cmd(cmd))
        self._record(action, cmd, rc)
        return rc

    def capture(self, cmd: List[str]) -> Tuple[int, str]:
        logger.debug("CAPTURE %s", fmt_cmd(cmd))
        if self.dry_run:
            return 0, ""
        try:
            p = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
            return p.returncode, p.stdout
        except FileNotFoundError:
            return 127, f"Command not found: {cmd[0]}"
