"""Security hardening steps."""

from __future__ import annotations

from .ssh_steps import harden_ssh
from .firewall_steps import configure_firewall
from .kernel_steps import harden_kernel

__all__ = [
    'harden_ssh',
    'configure_firewall',
    'harden_kernel',
]
