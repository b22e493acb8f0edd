"""Tests for lib/runner.py and lib/step_plan.py: ordering, fail-fast, exit codes."""

from __future__ import annotations

import io
import os
import sys
import tempfile
import unittest
import uuid
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import MagicMock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lib.config import HardeningConfig
from lib.errors import CommandError, ConfigurationError, StepError
from lib.operation_log import OperationLogger
from lib.runner import HardeningRun, PlannedStep
from lib.step_plan import STEP_NAMES, get_steps_for_config, select_steps


class TestStepPlan(unittest.TestCase):
    def test_canonical_order(self):
        self.assertEqual(STEP_NAMES, [
            'update_packages',
            'harden_ssh',
            'configure_firewall',
            'harden_kernel',
            'install_docker',
            'harden_docker',
            'create_service_dir',
            'write_compose',
            'final_notes',
        ])

    def test_custom_steps_keep_canonical_order(self):
        names = [name for name, _, _ in select_steps(['write_compose', 'harden_ssh'])]
        self.assertEqual(names, ['harden_ssh', 'write_compose'])

    def test_from_step(self):
        names = [name for name, _, _ in select_steps(from_step='install_docker')]
        self.assertEqual(names, STEP_NAMES[4:])

    def test_unknown_step(self):
        with self.assertRaises(ConfigurationError):
            select_steps(['harden_everything'])
        with self.assertRaises(ConfigurationError):
            select_steps(from_step='nope')

    def test_steps_for_config(self):
        steps = get_steps_for_config(HardeningConfig(custom_steps=['harden_kernel']))
        self.assertEqual(len(steps), 1)
        self.assertEqual(steps[0].name, 'harden_kernel')
        self.assertFalse(steps[0].completed)


class TestHardeningRun(unittest.TestCase):
    def setUp(self):
        self.calls = []
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.log_file = os.path.join(tmpdir.name, 'run.log')
        self.op_log = OperationLogger(uuid.uuid4().hex[:8], self.log_file)

    def _step(self, name, error=None):
        def func(config):
            self.calls.append(name)
            if error is not None:
                raise error
        return PlannedStep(name=name, title=name.replace('_', ' '), func=func)

    def _execute(self, steps):
        run = HardeningRun(HardeningConfig(), steps, self.op_log)
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()) as err:
            ok = run.execute()
        return run, ok, err.getvalue()

    def test_all_steps_in_order(self):
        run, ok, _ = self._execute([self._step('a'), self._step('b'), self._step('c')])
        self.assertTrue(ok)
        self.assertEqual(self.calls, ['a', 'b', 'c'])
        self.assertEqual(run.exit_code, 0)
        self.assertTrue(all(detail['completed'] for detail in run.get_step_details()))
        self.assertEqual(self.op_log.status, 'completed')

    def test_stops_at_first_failure(self):
        steps = [
            self._step('create_service_dir', StepError("Group 'docker' does not exist")),
            self._step('write_compose'),
        ]
        run, ok, err = self._execute(steps)
        self.assertFalse(ok)
        self.assertEqual(self.calls, ['create_service_dir'])
        self.assertIs(run.failed_step, steps[0])
        self.assertFalse(steps[1].completed)
        self.assertEqual(run.exit_code, 1)
        self.assertIn("Step 'create_service_dir' failed", err)
        self.assertEqual(self.op_log.status, 'failed')

    def test_command_exit_code_propagates(self):
        run, ok, _ = self._execute([self._step('update_packages', CommandError('apt-get update -qq', 100))])
        self.assertFalse(ok)
        self.assertEqual(run.exit_code, 100)

    def test_os_error_fails_step(self):
        run, ok, _ = self._execute([self._step('harden_docker', PermissionError('denied')), self._step('x')])
        self.assertFalse(ok)
        self.assertEqual(self.calls, ['harden_docker'])
        self.assertEqual(run.exit_code, 1)

    def test_unexpected_exception_propagates(self):
        with self.assertRaises(KeyError):
            self._execute([self._step('a', KeyError('bug'))])

    def test_audit_log_records_steps(self):
        self._execute([self._step('a'), self._step('b', StepError('boom'))])
        for handler in self.op_log.logger.handlers:
            handler.flush()
        with open(self.log_file) as f:
            content = f.read()
        self.assertIn('"step": "a", "status": "completed"', content)
        self.assertIn('"step": "b", "status": "failed"', content)
        self.assertIn('"event_type": "operation_end"', content)

    def test_config_passed_to_steps(self):
        func = MagicMock()
        config = HardeningConfig(ssh_port=2222)
        run = HardeningRun(config, [PlannedStep('a', 'A', func)], self.op_log)
        with redirect_stdout(io.StringIO()):
            run.execute()
        func.assert_called_once_with(config)


if __name__ == '__main__':
    unittest.main()
