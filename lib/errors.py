"""Error types raised by hardening steps.

A step either reaches its desired state or raises. The runner stops at the
first StepError, so these types double as the run's exit-code taxonomy.
"""

from __future__ import annotations

from typing import Optional


class HardeningError(Exception):
    """Base exception for harden_host."""
    exit_code = 1


class ConfigurationError(HardeningError):
    """Raised when CLI arguments or config values are invalid."""
    exit_code = 2


class LockError(HardeningError):
    """Raised when another harden_host run holds the lock."""
    exit_code = 3


class StepError(HardeningError):
    """Raised when a step cannot reach its desired state."""
    pass


class CommandError(StepError):
    """Raised when a system command exits non-zero."""

    def __init__(self, cmd: str, returncode: int, stderr: Optional[str] = None):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed (exit code {returncode}): {cmd}")

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return self.returncode if self.returncode > 0 else 1
