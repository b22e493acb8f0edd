"""Common setup steps."""

from __future__ import annotations

from .package_steps import update_and_upgrade_packages

__all__ = [
    'update_and_upgrade_packages',
]
