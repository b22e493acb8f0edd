"""Ordered step list of a hardening run."""

from __future__ import annotations

from typing import Optional

from lib.config import HardeningConfig
from lib.display import print_final_notes
from lib.errors import ConfigurationError
from lib.runner import PlannedStep
from lib.types import StepFunc

from common.steps import update_and_upgrade_packages
from security.steps import harden_ssh, configure_firewall, harden_kernel
from container.steps import (
    install_docker,
    harden_docker_daemon,
    provision_service_directory,
    write_compose_manifest,
)


# Order is load-bearing: the docker group used for ownership only exists
# after install_docker, and daemon.json is written before the restart.
HARDENING_STEPS: list[tuple[str, str, StepFunc]] = [
    ("update_packages", "Updating system packages", update_and_upgrade_packages),
    ("harden_ssh", "Hardening SSH", harden_ssh),
    ("configure_firewall", "Configuring firewall", configure_firewall),
    ("harden_kernel", "Applying kernel hardening", harden_kernel),
    ("install_docker", "Installing Docker", install_docker),
    ("harden_docker", "Hardening Docker daemon", harden_docker_daemon),
    ("create_service_dir", "Creating service directory", provision_service_directory),
    ("write_compose", "Creating docker-compose.yml", write_compose_manifest),
    ("final_notes", "Done", print_final_notes),
]

STEP_NAMES = [name for name, _, _ in HARDENING_STEPS]


def select_steps(custom_steps: Optional[list[str]] = None, from_step: Optional[str] = None) -> list[tuple[str, str, StepFunc]]:
    """Return the steps to run, always in canonical order."""
    for name in (custom_steps or []) + ([from_step] if from_step else []):
        if name not in STEP_NAMES:
            raise ConfigurationError(f"Unknown step: {name} (valid: {', '.join(STEP_NAMES)})")

    if custom_steps:
        wanted = set(custom_steps)
        return [step for step in HARDENING_STEPS if step[0] in wanted]
    if from_step:
        return HARDENING_STEPS[STEP_NAMES.index(from_step):]
    return list(HARDENING_STEPS)


def get_steps_for_config(config: HardeningConfig) -> list[PlannedStep]:
    return [
        PlannedStep(name=name, title=title, func=func)
        for name, title, func in select_steps(config.custom_steps, config.from_step)
    ]
