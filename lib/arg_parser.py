#!/usr/bin/env python3

from __future__ import annotations

import argparse

import argcomplete

from lib.config import (
    DEFAULT_CONTAINER_USER,
    DEFAULT_MACHINE_TYPE,
    DEFAULT_SERVICE_NAME,
    DEFAULT_SSH_PORT,
    LOG_LEVELS,
    MACHINE_TYPES,
)
from lib.step_plan import STEP_NAMES


def create_argument_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)

    parser.add_argument("--service-name", dest="service_name", default=None,
                        help=f"Service name used for /opt/<name>, the sysctl drop-in and the container (default: {DEFAULT_SERVICE_NAME})")
    parser.add_argument("--ssh-port", dest="ssh_port", type=int, default=None,
                        help=f"SSH port to configure and allow through the firewall (default: {DEFAULT_SSH_PORT})")
    parser.add_argument("--image", dest="image", default=None,
                        help="Container image reference (default: <service-name>:latest)")
    parser.add_argument("--container-user", dest="container_user", default=None,
                        help=f"Non-root uid:gid the container runs as (default: {DEFAULT_CONTAINER_USER})")
    parser.add_argument("--machine", dest="machine_type",
                        choices=MACHINE_TYPES,
                        default=DEFAULT_MACHINE_TYPE,
                        help="Machine type: vm (default), hardware, privileged, unprivileged (LXC), oci (Docker/Podman)")

    steps = parser.add_mutually_exclusive_group()
    steps.add_argument("--steps", dest="custom_steps", nargs="+", choices=STEP_NAMES,
                       metavar="STEP",
                       help="Only run these steps, in canonical order (see --list-steps)")
    steps.add_argument("--from-step", dest="from_step", choices=STEP_NAMES,
                       metavar="STEP",
                       help="Resume from this step, e.g. after fixing a failure")
    parser.add_argument("--list-steps", action="store_true",
                        help="List step names and exit")

    parser.add_argument("--dry-run", action="store_true",
                        help="Show commands and file diffs without applying them")
    parser.add_argument("--verify", action="store_true",
                        help="Audit the written artifacts instead of applying changes")
    parser.add_argument("--log-level", dest="log_level", choices=LOG_LEVELS, default="INFO",
                        help="Log file level (default: INFO)")

    argcomplete.autocomplete(parser)
    return parser
