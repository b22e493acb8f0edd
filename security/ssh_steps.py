"""SSH daemon hardening."""

from __future__ import annotations

import glob
import os
import re
import shlex
import shutil
from logging import getLogger

from lib.config import HardeningConfig
from lib.desired_state import ensure_file, printable, write_file_atomic
from lib.errors import StepError
from lib.system_utils import is_dry_run, is_service_active, read_file, run, service_needs_restart

SSHD_CONFIG = "/etc/ssh/sshd_config"
SSHD_CONFIG_DIR = "/etc/ssh/sshd_config.d"
AUTHORIZED_KEYS_GLOBS = ["/root/.ssh/authorized_keys", "/home/*/.ssh/authorized_keys"]
SSH_SERVICES = ["ssh", "sshd"]
SSH_RESTART = "systemctl restart ssh || systemctl restart sshd"

logger = getLogger("harden_host.ssh")


def get_ssh_settings(config: HardeningConfig) -> list[tuple[str, str]]:
    return [
        ("PasswordAuthentication", "no"),
        ("PermitRootLogin", "no"),
        ("Port", str(config.ssh_port)),
    ]


def _directive_pattern(key: str) -> re.Pattern[str]:
    """Match an active `Key ...` line or a commented-out `#Key value` default.

    A commented line only counts when it holds the key and at most one value,
    so prose comments that merely start with the key are left alone.
    """
    key = re.escape(key)
    return re.compile(
        rf"^\s*(?:(?P<comment>#\s*){key}(?:(?:\s+|\s*=\s*)\S+)?\s*$|{key}(?:\s|=|$))",
        re.IGNORECASE,
    )


def _is_match_block(line: str) -> bool:
    return bool(re.match(r"^\s*Match\s", line, re.IGNORECASE))


def apply_sshd_settings(text: str, settings: list[tuple[str, str]]) -> str:
    """Return text with each (key, value) set exactly once in the global section.

    The first active line or commented default for a key is rewritten; later
    active lines for the same key are commented out and missing keys are
    added before the first Match block. Match blocks are never edited.
    """
    lines = text.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"

    global_end = next((i for i, line in enumerate(lines) if _is_match_block(line)), len(lines))

    missing: list[str] = []
    for key, value in settings:
        pattern = _directive_pattern(key)
        directive = f"{key} {value}\n"
        seen = False
        for i in range(global_end):
            match = pattern.match(lines[i])
            if not match:
                continue
            if not seen:
                lines[i] = directive
                seen = True
            elif match.group("comment") is None:
                lines[i] = f"# {lines[i].lstrip()}"
        if not seen:
            missing.append(directive)

    return "".join(lines[:global_end] + missing + lines[global_end:])


def find_conflicting_drop_ins(settings: list[tuple[str, str]]) -> list[str]:
    """List drop-in lines that set a hardened key to a different value.

    sshd keeps the first value it reads, and the stock config includes
    sshd_config.d/*.conf before its own directives.
    """
    conflicts = []
    for path in sorted(glob.glob(os.path.join(SSHD_CONFIG_DIR, "*.conf"))):
        content = read_file(path) or ""
        for line in content.splitlines():
            parts = line.strip().replace("=", " ", 1).split()
            if len(parts) < 2 or parts[0].startswith("#"):
                continue
            for key, value in settings:
                if parts[0].lower() == key.lower() and parts[1] != value:
                    conflicts.append(f"{path}: {line.strip()}")
    return conflicts


def has_authorized_keys() -> bool:
    for pattern in AUTHORIZED_KEYS_GLOBS:
        for path in glob.glob(pattern):
            if os.path.isfile(path) and os.path.getsize(path) > 0:
                return True
    return False


def validate_sshd_config(content: str) -> None:
    """Run sshd -t against a candidate config next to the live one."""
    candidate = f"{SSHD_CONFIG}.harden_host.tmp"
    write_file_atomic(candidate, content, 0o600)
    try:
        run(f"sshd -t -f {shlex.quote(candidate)}")
    finally:
        os.unlink(candidate)


def sshd_restart_pending() -> bool:
    """True if the running sshd predates the current sshd_config.

    Debian names the unit ssh and Red Hat style hosts sshd; whichever is
    active decides.
    """
    for service in SSH_SERVICES:
        if is_service_active(service):
            return service_needs_restart(service, SSHD_CONFIG)
    return True


def harden_ssh(config: HardeningConfig) -> None:
    settings = get_ssh_settings(config)

    current = read_file(SSHD_CONFIG)
    if current is None:
        raise StepError(f"{SSHD_CONFIG} not found (is openssh-server installed?)")

    for conflict in find_conflicting_drop_ins(settings):
        print(f"  ⚠ Drop-in overrides hardened setting: {printable(conflict)}")
        logger.warning(f"sshd drop-in conflict: {printable(conflict)}")

    desired = apply_sshd_settings(current, settings)
    if desired == current:
        if not sshd_restart_pending():
            print("  ✓ SSH already hardened")
            return
        print(f"  sshd is not running the current {SSHD_CONFIG}; restarting")
        run(SSH_RESTART)
        print(f"  ✓ SSH hardened (restarted with port {config.ssh_port})")
        return

    if not has_authorized_keys():
        print("  ⚠ No authorized_keys found for root or /home users; make sure key-based login works")

    if not is_dry_run():
        backup = f"{SSHD_CONFIG}.bak"
        if not os.path.exists(backup):
            shutil.copy2(SSHD_CONFIG, backup)
            print(f"  Backed up {SSHD_CONFIG} to {backup}")
        validate_sshd_config(desired)

    ensure_file(SSHD_CONFIG, desired)
    logger.info(f"sshd_config updated: {', '.join(f'{k} {v}' for k, v in settings)}")

    run(SSH_RESTART)

    print(f"  ✓ SSH hardened (key-only auth, root login disabled, port {config.ssh_port})")
