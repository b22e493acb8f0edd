"""Package maintenance steps."""

from __future__ import annotations

import os

from lib.config import HardeningConfig
from lib.system_utils import run


def update_and_upgrade_packages(config: HardeningConfig) -> None:
    print("  Updating package lists...")
    os.environ["DEBIAN_FRONTEND"] = "noninteractive"
    run("apt-get update -qq")
    print("  Upgrading packages...")
    run("apt-get upgrade -y -qq")

    print("  ✓ System packages updated and upgraded")
