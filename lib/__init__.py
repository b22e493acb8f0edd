"""harden_host - Harden a Debian/Ubuntu host for one locked-down Docker service."""

from __future__ import annotations

from .config import HardeningConfig
from .errors import HardeningError, ConfigurationError, StepError, CommandError
from .system_utils import run, set_dry_run, is_dry_run

__all__ = [
    "HardeningConfig",
    "HardeningError",
    "ConfigurationError",
    "StepError",
    "CommandError",
    "run",
    "set_dry_run",
    "is_dry_run",
]
