"""Container runtime and service steps."""

from __future__ import annotations

from .docker_steps import install_docker, harden_docker_daemon
from .service_steps import provision_service_directory, write_compose_manifest

__all__ = [
    'install_docker',
    'harden_docker_daemon',
    'provision_service_directory',
    'write_compose_manifest',
]
