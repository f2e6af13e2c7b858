from __future__ import annotations
import os, time
from typing import List

def log_history(path: str, action: str, lines: List[str], rc: int) -> None:
    """Append one block per executed action: a header line, then the commands."""
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"[{ts}] {action} rc={rc}\n")
        for l in lines:
            f.write("  " + l + "\n")
        f.write("\n")
