"""Service directory and docker-compose manifest for the hardened container."""

from __future__ import annotations

import os
from logging import getLogger

from lib.config import HardeningConfig
from lib.desired_state import ensure_directory, ensure_file
from lib.errors import StepError
from lib.system_utils import get_group_id, is_dry_run

SERVICE_DIR_MODE = 0o750
MANIFEST_MODE = 0o644
SERVICE_SUBDIRS = ["data", "logs"]

logger = getLogger("harden_host.service")


def generate_compose_manifest(config: HardeningConfig) -> str:
    """Render docker-compose.yml for one locked-down container."""
    name = config.service_name
    return f"""version: "3.9"

services:
  {name}:
    image: {config.image_ref}
    container_name: {name}
    user: "{config.container_user}"
    read_only: true
    restart: unless-stopped

    cap_drop:
      - ALL

    security_opt:
      - no-new-privileges:true

    pids_limit: 100
    mem_limit: 512m
    cpus: "1.0"

    volumes:
      - ./data:/app/data:rw
      - ./logs:/app/logs:rw

    logging:
      driver: "json-file"
      options:
        max-size: "10m"
        max-file: "3"
"""


def provision_service_directory(config: HardeningConfig) -> None:
    gid = get_group_id(config.runtime_group)
    if gid is None:
        if is_dry_run():
            print(f"  ⚠ Group '{config.runtime_group}' does not exist yet (created by the Docker install)")
            return
        raise StepError(
            f"Group '{config.runtime_group}' does not exist; cannot set ownership of {config.service_dir}"
        )

    paths = [config.service_dir] + [os.path.join(config.service_dir, sub) for sub in SERVICE_SUBDIRS]
    changed = False
    for path in paths:
        if ensure_directory(path, SERVICE_DIR_MODE, uid=0, gid=gid):
            changed = True
            logger.info(f"Converged {path} to root:{config.runtime_group} {SERVICE_DIR_MODE:o}")

    if not changed:
        print(f"  ✓ {config.service_dir} already provisioned")
        return

    print(f"  ✓ {config.service_dir} ready (data, logs; root:{config.runtime_group}, mode 750)")


def write_compose_manifest(config: HardeningConfig) -> None:
    if not is_dry_run() and not os.path.isdir(config.service_dir):
        raise StepError(f"{config.service_dir} does not exist; run the service directory step first")

    change = ensure_file(config.compose_path, generate_compose_manifest(config), mode=MANIFEST_MODE, backup=True)
    if not change.changed:
        print(f"  ✓ {config.compose_path} already up to date")
        return

    if change.backup_path:
        logger.warning(f"Replaced modified {config.compose_path}; previous version at {change.backup_path}")
    print(f"  ✓ Wrote {config.compose_path}")
