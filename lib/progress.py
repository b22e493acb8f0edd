"""Progress display for hardening steps."""

from __future__ import annotations
import sys


def progress_bar(current: int, total: int, width: int = 20) -> str:
    filled = int(width * current / total) if total > 0 else 0
    bar = "█" * filled + "░" * (width - filled)
    percent = int(100 * current / total) if total > 0 else 0
    return f"[{bar}] {percent}%"


def print_step_header(step_num: int, total: int, name: str) -> None:
    bar = progress_bar(step_num, total)
    print(f"\n{bar} [{step_num}/{total}] {name}")
    sys.stdout.flush()
