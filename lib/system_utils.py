"""Command execution and host inspection helpers."""

from __future__ import annotations

import grp
import os
import shlex
import subprocess
import sys
import time
from typing import Optional

from lib.errors import CommandError, StepError


_dry_run = False


def set_dry_run(enabled: bool) -> None:
    """Set dry-run mode globally."""
    global _dry_run
    _dry_run = enabled


def is_dry_run() -> bool:
    """Check if dry-run mode is enabled."""
    return _dry_run


def run(cmd: str, check: bool = True, cwd: Optional[str] = None, capture_output: bool = False,
        text: bool = True, timeout: Optional[float] = None) -> subprocess.CompletedProcess[str]:
    print(f"  Running: {cmd[:80]}..." if len(cmd) > 80 else f"  Running: {cmd}")
    sys.stdout.flush()

    if is_dry_run():
        print("  [DRY-RUN] Command not executed")
        # CompletedProcess.args expects a sequence; provide a one-element list for consistency
        return subprocess.CompletedProcess(args=[cmd], returncode=0, stdout="", stderr="")

    try:
        result = subprocess.run(cmd, shell=True, capture_output=capture_output, text=text,
                                cwd=cwd, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise StepError(f"Command timed out after {timeout}s: {cmd}") from e

    if check and result.returncode != 0:
        stderr = getattr(result, 'stderr', None)
        if stderr:
            print(f"    Error: {stderr[:200]}")
            sys.stdout.flush()
        raise CommandError(cmd, result.returncode, stderr)
    return result


def detect_os(os_release: str = "/etc/os-release") -> str:
    """Return the distro id, raising StepError on non Debian-family hosts."""
    try:
        with open(os_release) as f:
            content = f.read().lower()
    except FileNotFoundError as e:
        raise StepError(f"Cannot detect OS - {os_release} not found") from e

    if "ubuntu" in content:
        return "ubuntu"
    if "debian" in content:
        return "debian"
    raise StepError("Unsupported OS (only Debian and Ubuntu are supported)")


def require_root() -> None:
    if os.geteuid() != 0:
        raise StepError("harden_host must be run as root")


def is_package_installed(package: str) -> bool:
    result = subprocess.run(
        f"dpkg -l {shlex.quote(package)} 2>/dev/null | grep -q ^ii",
        shell=True, capture_output=True
    )
    return result.returncode == 0


def is_service_active(service: str) -> bool:
    result = subprocess.run(
        f"systemctl is-active {shlex.quote(service)} >/dev/null 2>&1",
        shell=True, capture_output=True
    )
    return result.returncode == 0


def service_started_at(service: str) -> Optional[float]:
    """Return the epoch time the running service was last (re)started, or None."""
    if not is_service_active(service):
        return None
    result = subprocess.run(
        f"systemctl show {shlex.quote(service)} --property=ActiveEnterTimestampMonotonic --value",
        shell=True, capture_output=True, text=True
    )
    try:
        started_us = int(result.stdout.strip())
    except ValueError:
        return None
    if result.returncode != 0 or started_us == 0:
        return None
    # systemd reports CLOCK_MONOTONIC; shift it onto the wall clock used for mtimes
    return time.time() - time.monotonic() + started_us / 1_000_000


def service_needs_restart(service: str, config_path: str) -> bool:
    """True if the service is down or was started before config_path last changed."""
    started = service_started_at(service)
    if started is None:
        return True
    try:
        return os.path.getmtime(config_path) > started
    except FileNotFoundError:
        return False


def get_group_id(group: str) -> Optional[int]:
    """Return the gid for a group name, or None if the group does not exist."""
    try:
        return grp.getgrnam(group).gr_gid
    except KeyError:
        return None


def read_file(filepath: str) -> Optional[str]:
    """Return file content, or None if the file does not exist.

    Bytes that are not valid UTF-8 are kept as surrogates so a rewrite
    through write_file_atomic reproduces them unchanged.
    """
    try:
        with open(filepath, 'r', encoding='utf-8', errors='surrogateescape') as f:
            return f.read()
    except FileNotFoundError:
        return None
