"""Tests for lib/progress.py: progress bar and step headers."""

from __future__ import annotations

import io
import os
import sys
import unittest
from contextlib import redirect_stdout

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lib.progress import print_step_header, progress_bar


class TestProgressBar(unittest.TestCase):
    def test_zero_progress(self):
        bar = progress_bar(0, 10)
        self.assertIn('0%', bar)

    def test_full_progress(self):
        bar = progress_bar(10, 10)
        self.assertIn('100%', bar)
        self.assertNotIn('░', bar)

    def test_half_progress(self):
        bar = progress_bar(5, 10)
        self.assertIn('50%', bar)

    def test_zero_total(self):
        bar = progress_bar(0, 0)
        self.assertIn('0%', bar)

    def test_custom_width(self):
        bar = progress_bar(5, 10, width=40)
        self.assertEqual(bar.count('█'), 20)


class TestPrintStepHeader(unittest.TestCase):
    def test_header(self):
        with redirect_stdout(io.StringIO()) as out:
            print_step_header(3, 9, 'Configuring firewall')
        self.assertIn('[3/9] Configuring firewall', out.getvalue())


if __name__ == '__main__':
    unittest.main()
