"""
Configuration Tests
"""

import os
import unittest
from unittest import mock

from merkle_tree.config import DEFAULT_API_URL, DEFAULT_PORT, load_settings


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.api_url, DEFAULT_API_URL)
        self.assertEqual(settings.port, DEFAULT_PORT)
        self.assertEqual(settings.log_level, "INFO")

    def test_overrides(self):
        env = {
            "MERKLE_TREE_API_URL": "http://example.test/",
            "MERKLE_TREE_HOST": "0.0.0.0",
            "MERKLE_TREE_PORT": "9001",
            "MERKLE_TREE_LOG_LEVEL": "debug",
            "MERKLE_TREE_TIMEOUT": "2.5",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.api_url, "http://example.test")
        self.assertEqual(settings.host, "0.0.0.0")
        self.assertEqual(settings.port, 9001)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.timeout, 2.5)

    def test_invalid_port(self):
        with mock.patch.dict(os.environ, {"MERKLE_TREE_PORT": "eighty"}, clear=True):
            with self.assertRaises(ValueError):
                load_settings()


if __name__ == "__main__":
    unittest.main(verbosity=2)
