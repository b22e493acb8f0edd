#!/usr/bin/env python3
"""Machine type capabilities.

The machine type is declared by the operator (``--machine``); it decides
which host-level settings a step may touch.
"""

from __future__ import annotations

from lib.config import MACHINE_TYPES
from lib.types import MachineType


_KERNEL_CAPABLE = ("vm", "privileged", "hardware")
_FIREWALL_CAPABLE = ("vm", "privileged", "hardware")


def _check(machine_type: MachineType) -> str:
    if machine_type not in MACHINE_TYPES:
        raise ValueError(f"Unknown machine_type: {machine_type!r}")
    return machine_type


def can_modify_kernel(machine_type: MachineType) -> bool:
    """Check if kernel parameters can be modified."""
    return _check(machine_type) in _KERNEL_CAPABLE


def can_manage_firewall(machine_type: MachineType) -> bool:
    """Check if firewall can be managed."""
    return _check(machine_type) in _FIREWALL_CAPABLE
