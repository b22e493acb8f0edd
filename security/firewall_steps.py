"""Host firewall configuration with ufw."""

from __future__ import annotations

from lib.config import HardeningConfig
from lib.machine_state import can_manage_firewall
from lib.system_utils import run


def configure_firewall(config: HardeningConfig) -> None:
    if not can_manage_firewall(config.machine_type):
        print(f"  ✓ Skipping firewall ({config.machine_type} machines cannot manage netfilter)")
        return

    run("apt-get install -y -qq ufw")
    run("ufw default deny incoming")
    run("ufw default allow outgoing")
    run(f"ufw allow {config.ssh_port}/tcp")
    run("ufw --force enable")

    print(f"  ✓ Firewall configured (deny incoming, SSH on {config.ssh_port}/tcp allowed)")
