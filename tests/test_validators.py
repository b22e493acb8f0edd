"""Tests for lib/validators.py."""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lib.validators import (
    validate_image_ref,
    validate_port,
    validate_service_name,
    validate_user_spec,
)


class TestValidateServiceName(unittest.TestCase):
    def test_valid(self):
        for name in ['clawdbot', 'my-bot', 'bot_2', 'a.b']:
            self.assertTrue(validate_service_name(name), name)

    def test_invalid(self):
        for name in ['', 'Bot', '-bot', 'bot/x', '..', 'a..b', 'bot name', 'x' * 64]:
            self.assertFalse(validate_service_name(name), name)


class TestValidatePort(unittest.TestCase):
    def test_bounds(self):
        self.assertTrue(validate_port(1))
        self.assertTrue(validate_port(22))
        self.assertTrue(validate_port(65535))
        self.assertFalse(validate_port(0))
        self.assertFalse(validate_port(65536))

    def test_rejects_bool(self):
        self.assertFalse(validate_port(True))


class TestValidateImageRef(unittest.TestCase):
    def test_valid(self):
        for image in ['clawdbot:latest', 'clawdbot', 'ghcr.io/acme/bot:1.2.3',
                      'localhost:5000/bot:dev', 'acme/bot@sha256:' + 'a' * 64]:
            self.assertTrue(validate_image_ref(image), image)

    def test_invalid(self):
        for image in ['', 'Bot:latest', 'bot:', 'bot latest', 'bot;rm -rf /']:
            self.assertFalse(validate_image_ref(image), image)


class TestValidateUserSpec(unittest.TestCase):
    def test_valid(self):
        self.assertTrue(validate_user_spec('1000:1000'))
        self.assertTrue(validate_user_spec('65534:65534'))

    def test_invalid(self):
        for spec in ['0:0', '1000:0', '1000', 'app:app', '1000:1000:1']:
            self.assertFalse(validate_user_spec(spec), spec)


if __name__ == '__main__':
    unittest.main()
