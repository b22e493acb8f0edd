"""Fail-fast execution of the ordered hardening steps."""

from __future__ import annotations

import sys
import time
import traceback
from dataclasses import dataclass
from typing import Optional

from lib.config import HardeningConfig
from lib.errors import HardeningError
from lib.operation_log import OperationLogger
from lib.progress import print_step_header, progress_bar
from lib.types import JSONList, StepFunc


@dataclass
class PlannedStep:
    """A single step of a hardening run."""
    name: str
    title: str
    func: StepFunc
    completed: bool = False
    error: Optional[str] = None
    execution_time: Optional[float] = None


class HardeningRun:
    """Runs steps in order and stops at the first failure.

    There is no rollback: a failed run leaves the host as the failing step
    left it, and the operator resumes with --from-step once it is fixed.
    """

    def __init__(self, config: HardeningConfig, steps: list[PlannedStep], logger: OperationLogger):
        self.config = config
        self.steps = steps
        self.logger = logger
        self.status = "pending"
        self.failed_step: Optional[PlannedStep] = None
        self.exception: Optional[BaseException] = None

    def execute(self) -> bool:
        """Execute all steps.

        Returns:
            bool: True if every step completed, False at the first failure
        """
        self.status = "executing"
        total = len(self.steps)

        for i, step in enumerate(self.steps, 1):
            print_step_header(i, total, step.title)
            self.logger.log_step(step.name, "started", step.title)
            step_start_time = time.time()

            try:
                step.func(self.config)
            except (HardeningError, OSError) as e:
                step.error = str(e)
                step.execution_time = time.time() - step_start_time
                self.failed_step = step
                self.exception = e
                self.status = "failed"

                self.logger.log_step(step.name, "failed", step.error, step.execution_time)
                self.logger.log_error(type(e).__name__, f"Step '{step.name}' failed: {e}",
                                      {"step": step.name, "traceback": traceback.format_exc()})
                self.logger.complete("failed", f"Stopped at step {i}/{total}: {step.name}")

                print(f"\n✗ Step '{step.name}' failed: {e}", file=sys.stderr)
                return False

            step.completed = True
            step.execution_time = time.time() - step_start_time
            self.logger.log_step(step.name, "completed", step.title, step.execution_time)

        self.status = "completed"
        self.logger.complete("completed", f"All {total} steps completed")
        print(f"\n{progress_bar(total, total)} All steps completed!")
        sys.stdout.flush()
        return True

    @property
    def exit_code(self) -> int:
        if self.status == "completed":
            return 0
        if isinstance(self.exception, HardeningError):
            return self.exception.exit_code
        return 1

    def get_step_details(self) -> JSONList:
        return [
            {
                "name": step.name,
                "completed": step.completed,
                "error": step.error,
                "execution_time": step.execution_time
            }
            for step in self.steps
        ]
