"""Docker engine installation and daemon hardening."""

from __future__ import annotations

import json
import os

from lib.config import HardeningConfig
from lib.desired_state import ensure_directory, ensure_file
from lib.system_utils import is_package_installed, run, service_needs_restart

DOCKER_PACKAGE = "docker.io"
DOCKER_PACKAGES = ["ca-certificates", "curl", "gnupg", DOCKER_PACKAGE]
DOCKER_SERVICE = "docker"
DOCKER_CONFIG_DIR = "/etc/docker"
DAEMON_JSON = os.path.join(DOCKER_CONFIG_DIR, "daemon.json")

DAEMON_SETTINGS = {
    "icc": False,
    "userns-remap": "default",
    "no-new-privileges": True,
    "live-restore": True,
}


def generate_daemon_json() -> str:
    return json.dumps(DAEMON_SETTINGS, indent=2) + "\n"


def install_docker(config: HardeningConfig) -> None:
    if is_package_installed(DOCKER_PACKAGE):
        print("  ✓ Docker already installed")
    else:
        os.environ["DEBIAN_FRONTEND"] = "noninteractive"
        run(f"apt-get install -y -qq {' '.join(DOCKER_PACKAGES)}")

    run(f"systemctl enable {DOCKER_SERVICE}")
    run(f"systemctl start {DOCKER_SERVICE}")

    print("  ✓ Docker installed and running")


def harden_docker_daemon(config: HardeningConfig) -> None:
    ensure_directory(DOCKER_CONFIG_DIR, 0o755)

    change = ensure_file(DAEMON_JSON, generate_daemon_json(), mode=0o644)
    if not change.changed and not service_needs_restart(DOCKER_SERVICE, DAEMON_JSON):
        print("  ✓ Docker daemon already hardened")
        return

    if not change.changed:
        print(f"  dockerd is not running the current {DAEMON_JSON}; restarting")
    run(f"systemctl restart {DOCKER_SERVICE}")

    print("  ✓ Docker daemon hardened (icc off, userns-remap, no-new-privileges, live-restore)")
