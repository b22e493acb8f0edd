#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK

import os
import sys
from typing import Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from lib.arg_parser import create_argument_parser
from lib.config import HardeningConfig
from lib.display import print_run_header
from lib.errors import ConfigurationError, LockError, StepError
from lib.lock import run_lock
from lib.logging_utils import get_run_logger
from lib.operation_log import create_operation_logger
from lib.runner import HardeningRun
from lib.step_plan import HARDENING_STEPS, get_steps_for_config
from lib.system_utils import detect_os, require_root, set_dry_run
from lib.verify import print_verification, verify_host


def list_steps() -> None:
    for i, (name, title, _) in enumerate(HARDENING_STEPS, 1):
        print(f"  {i}. {name:<20} {title}")


def run_hardening(config: HardeningConfig) -> int:
    logger = get_run_logger(level=config.log_level)
    steps = get_steps_for_config(config)

    operation_log = create_operation_logger(config=config.to_dict(), steps=[step.name for step in steps])
    logger.info(f"Starting run {operation_log.operation_id} ({len(steps)} steps, dry_run={config.dry_run})")

    run = HardeningRun(config, steps, operation_log)
    succeeded = run.execute()
    operation_log.log_context("step_summary", {"steps": run.get_step_details()})
    if succeeded:
        logger.info(f"Run {operation_log.operation_id} completed")
        return 0

    logger.error(f"Run {operation_log.operation_id} failed at step '{run.failed_step.name}': {run.exception}")
    print(f"\n✗ Hardening stopped (exit code: {run.exit_code})")
    print(f"  Fix the problem, then resume with: --from-step {run.failed_step.name}")
    return run.exit_code


def main(argv: Optional[list[str]] = None) -> int:
    parser = create_argument_parser("Harden this host and prepare a locked-down Docker service")
    args = parser.parse_args(argv)

    if args.list_steps:
        list_steps()
        return 0

    try:
        config = HardeningConfig.from_args(args)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return e.exit_code

    if args.verify:
        print("=" * 60)
        print(f"Verifying hardening of {config.service_name}")
        print("=" * 60)
        return 0 if print_verification(verify_host(config)) else 1

    set_dry_run(config.dry_run)
    if config.dry_run:
        print("=" * 60)
        print("DRY-RUN MODE ENABLED")
        print("=" * 60)

    try:
        distro = detect_os()
        if not config.dry_run:
            require_root()
    except StepError as e:
        print(f"Error: {e}")
        return e.exit_code

    print_run_header(config)
    print(f"OS: {distro}")
    sys.stdout.flush()

    if config.dry_run:
        return run_hardening(config)

    try:
        with run_lock():
            return run_hardening(config)
    except LockError as e:
        print(f"Error: {e}")
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
