#!/usr/bin/env python3

"""Display utilities for hardening runs."""

from lib.config import HardeningConfig


def print_run_header(config: HardeningConfig) -> None:
    print("=" * 60)
    print(f"Secure Host + Docker Setup ({config.service_name})")
    print("=" * 60)
    print(f"Service directory: {config.service_dir}")
    print(f"Image: {config.image_ref}")
    print(f"SSH port: {config.ssh_port}")
    print(f"Machine type: {config.machine_type}")
    if config.custom_steps:
        print(f"Steps: {' '.join(config.custom_steps)}")
    if config.from_step:
        print(f"Resuming from: {config.from_step}")
    if config.dry_run:
        print("Dry-run: Yes")


def print_final_notes(config: HardeningConfig) -> None:
    """Print the closing security reminders and start instructions."""
    print("  DONE ✅")
    print()
    print("SECURITY REMINDERS:")
    print("- Verify image source (checksum, signature)")
    print("- NEVER mount / or /home")
    print("- Do not expose ports unless required")
    print("- Rotate credentials regularly")
    print()
    print("To start:")
    print(f"cd {config.service_dir} && docker compose up -d")
