#!/usr/bin/env python3

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, asdict
from typing import Optional

from lib.errors import ConfigurationError
from lib.types import JSONDict, MachineType
from lib.validators import (
    validate_image_ref,
    validate_port,
    validate_service_name,
    validate_user_spec,
)


MACHINE_TYPES = ["vm", "hardware", "privileged", "unprivileged", "oci"]
DEFAULT_MACHINE_TYPE = "vm"

DEFAULT_SERVICE_NAME = "clawdbot"
DEFAULT_SSH_PORT = 22
DEFAULT_CONTAINER_USER = "1000:1000"
DEFAULT_RUNTIME_GROUP = "docker"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

SERVICE_ROOT = "/opt"
SYSCTL_DIR = "/etc/sysctl.d"


@dataclass
class HardeningConfig:
    service_name: str = DEFAULT_SERVICE_NAME
    ssh_port: int = DEFAULT_SSH_PORT
    image: Optional[str] = None
    container_user: str = DEFAULT_CONTAINER_USER
    machine_type: MachineType = DEFAULT_MACHINE_TYPE
    runtime_group: str = DEFAULT_RUNTIME_GROUP
    dry_run: bool = False
    custom_steps: Optional[list[str]] = None
    from_step: Optional[str] = None
    log_level: str = "INFO"

    @property
    def image_ref(self) -> str:
        return self.image or f"{self.service_name}:latest"

    @property
    def service_dir(self) -> str:
        return os.path.join(SERVICE_ROOT, self.service_name)

    @property
    def compose_path(self) -> str:
        return os.path.join(self.service_dir, "docker-compose.yml")

    @property
    def sysctl_conf_path(self) -> str:
        return os.path.join(SYSCTL_DIR, f"99-{self.service_name}.conf")

    def validate(self) -> None:
        """Raise ConfigurationError for the first invalid value."""
        if not validate_service_name(self.service_name):
            raise ConfigurationError(f"Invalid service name: {self.service_name}")
        if not validate_port(self.ssh_port):
            raise ConfigurationError(f"Invalid SSH port: {self.ssh_port}")
        if not validate_image_ref(self.image_ref):
            raise ConfigurationError(f"Invalid image reference: {self.image_ref}")
        if not validate_user_spec(self.container_user):
            raise ConfigurationError(
                f"Invalid container user: {self.container_user} (expected non-root uid:gid)"
            )
        if self.machine_type not in MACHINE_TYPES:
            raise ConfigurationError(f"Unknown machine type: {self.machine_type}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level}")
        if self.custom_steps and self.from_step:
            raise ConfigurationError("--steps and --from-step cannot be combined")

    def to_dict(self) -> JSONDict:
        data = asdict(self)
        data['image'] = self.image_ref
        if self.custom_steps:
            data['custom_steps'] = ' '.join(self.custom_steps)
        return data

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'HardeningConfig':
        custom_steps = getattr(args, 'custom_steps', None)
        if custom_steps:
            custom_steps = [step.strip() for step in custom_steps if step.strip()]

        config = cls(
            service_name=args.service_name or DEFAULT_SERVICE_NAME,
            ssh_port=args.ssh_port if args.ssh_port is not None else DEFAULT_SSH_PORT,
            image=getattr(args, 'image', None),
            container_user=getattr(args, 'container_user', None) or DEFAULT_CONTAINER_USER,
            machine_type=getattr(args, 'machine_type', None) or DEFAULT_MACHINE_TYPE,
            dry_run=getattr(args, 'dry_run', False),
            custom_steps=custom_steps or None,
            from_step=getattr(args, 'from_step', None),
            log_level=getattr(args, 'log_level', None) or "INFO",
        )
        config.validate()
        return config
