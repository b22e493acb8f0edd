"""Kernel hardening through a sysctl drop-in."""

from __future__ import annotations

from logging import getLogger

from lib.config import HardeningConfig
from lib.desired_state import ensure_file
from lib.errors import CommandError
from lib.logging_utils import log_subprocess_result
from lib.machine_state import can_modify_kernel
from lib.system_utils import run

SYSCTL_SETTINGS = [
    ("kernel.kptr_restrict", "2"),
    ("kernel.dmesg_restrict", "1"),
    ("kernel.unprivileged_bpf_disabled", "1"),
    ("fs.protected_symlinks", "1"),
    ("fs.protected_hardlinks", "1"),
    ("net.ipv4.conf.all.rp_filter", "1"),
    ("net.ipv4.tcp_syncookies", "1"),
]

logger = getLogger("harden_host.kernel")


def generate_sysctl_conf() -> str:
    return "".join(f"{key}={value}\n" for key, value in SYSCTL_SETTINGS)


def harden_kernel(config: HardeningConfig) -> None:
    if not can_modify_kernel(config.machine_type):
        print("  ✓ Skipping kernel hardening (host kernel manages these settings)")
        return

    change = ensure_file(config.sysctl_conf_path, generate_sysctl_conf(), mode=0o644)
    if not change.changed:
        print(f"  ✓ {config.sysctl_conf_path} already up to date")

    # Reload unconditionally: the live values may still predate the drop-in
    cmd = "sysctl --system"
    result = run(cmd, check=False, capture_output=True)
    if not log_subprocess_result(logger, "Reloaded sysctl settings", result):
        print(result.stderr or "", end="")
        raise CommandError(cmd, result.returncode, result.stderr)

    print(f"  ✓ Kernel hardened ({len(SYSCTL_SETTINGS)} settings in {config.sysctl_conf_path})")
