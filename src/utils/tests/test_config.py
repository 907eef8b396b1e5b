"""Unit tests for environment-based settings."""

import os
import unittest
from unittest.mock import patch

from utils.config import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_REQUEST_TIMEOUT,
    FALLBACK_GEMINI_MODEL,
    Settings,
    load_settings,
)


class TestLoadSettings(unittest.TestCase):
    """Test cases for load_settings."""

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = load_settings()

        self.assertIsNone(settings.api_key)
        self.assertEqual(settings.primary_model, DEFAULT_GEMINI_MODEL)
        self.assertEqual(settings.fallback_model, FALLBACK_GEMINI_MODEL)
        self.assertEqual(settings.request_timeout, DEFAULT_REQUEST_TIMEOUT)
        self.assertEqual(settings.cors_origins, "*")
        self.assertTrue(settings.has_fallback)

    @patch.dict(os.environ, {
        "GEMINI_API_KEY": "secret",
        "GEMINI_MODEL": "gemini/gemini-2.5-pro",
        "GEMINI_FALLBACK_MODEL": "openai/gpt-4.1-mini",
        "ANALYZE_REQUEST_TIMEOUT": "45",
        "LOG_LEVEL": "debug",
    }, clear=True)
    def test_reads_environment(self):
        settings = load_settings()

        self.assertEqual(settings.api_key, "secret")
        self.assertEqual(settings.primary_model, "gemini/gemini-2.5-pro")
        self.assertEqual(settings.fallback_model, "openai/gpt-4.1-mini")
        self.assertEqual(settings.request_timeout, 45.0)
        self.assertEqual(settings.log_level, "DEBUG")

    @patch.dict(os.environ, {"GEMINI_MODEL": "gemini-2.5-flash"}, clear=True)
    def test_bare_gemini_name_gets_provider_prefix(self):
        self.assertEqual(load_settings().primary_model, "gemini/gemini-2.5-flash")

    @patch.dict(os.environ, {"GEMINI_API_KEY": ""}, clear=True)
    def test_empty_api_key_treated_as_missing(self):
        self.assertIsNone(load_settings().api_key)

    @patch.dict(os.environ, {
        "GEMINI_MODEL": "gemini/gemini-2.5-flash",
        "GEMINI_FALLBACK_MODEL": "gemini/gemini-2.5-flash",
    }, clear=True)
    def test_fallback_equal_to_primary_disables_fallback(self):
        self.assertFalse(load_settings().has_fallback)


class TestSettings(unittest.TestCase):
    """Test cases for the Settings value object."""

    def test_settings_is_immutable(self):
        settings = Settings()
        with self.assertRaises(AttributeError):
            settings.api_key = "x"


if __name__ == '__main__':
    unittest.main()
