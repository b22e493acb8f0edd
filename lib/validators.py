#!/usr/bin/env python3

"""Validation utilities for hardening options."""

import re


def validate_service_name(name: str) -> bool:
    """Validate a service name usable as a directory, container and compose key."""
    pattern = r'^[a-z0-9][a-z0-9_.-]{0,62}$'
    return bool(re.match(pattern, name)) and '..' not in name


def validate_port(port: int) -> bool:
    """Validate a TCP port number."""
    return isinstance(port, int) and not isinstance(port, bool) and 1 <= port <= 65535


def validate_image_ref(image: str) -> bool:
    """Validate a container image reference (registry/name:tag or name@digest)."""
    pattern = (
        r'^([a-z0-9]+([._-][a-z0-9]+)*(:[0-9]+)?/)?'
        r'[a-z0-9]+([._-][a-z0-9]+)*(/[a-z0-9]+([._-][a-z0-9]+)*)*'
        r'(:[A-Za-z0-9_][A-Za-z0-9_.-]{0,127})?(@sha256:[a-f0-9]{64})?$'
    )
    return bool(re.match(pattern, image))


def validate_user_spec(spec: str) -> bool:
    """Validate a numeric uid:gid pair; uid 0 is rejected."""
    match = re.match(r'^(\d{1,10}):(\d{1,10})$', spec)
    if not match:
        return False
    return int(match.group(1)) != 0 and int(match.group(2)) != 0
