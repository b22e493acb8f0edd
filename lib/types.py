"""Common type aliases for the project to reduce repetition and improve readability.

Add new aliases here when you spot repeated typing patterns across modules.
"""
from __future__ import annotations

from typing import Any, Callable, Literal

# Basic JSON types
JSONDict = dict[str, Any]
JSONList = list[Any]

# Project-specific types
StepFunc = Callable[..., Any]
MachineType = Literal["vm", "hardware", "privileged", "unprivileged", "oci"]

# Size constants
BYTES_PER_KB = 1024
BYTES_PER_MB = 1024 * BYTES_PER_KB

__all__ = [
    "JSONDict",
    "JSONList",
    "StepFunc",
    "MachineType",
    "BYTES_PER_KB",
    "BYTES_PER_MB",
]
