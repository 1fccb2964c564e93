"""
Tests for logging configuration.
"""

import logging
import warnings
from unittest.mock import patch

from src.consumers.notification.consume import main
from src.core.logger import level_from_env, setup_logging


class TestLevelFromEnv:
    """Tests for LOG_LEVEL resolution."""

    def test_known_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")

        assert level_from_env() == logging.WARNING

    def test_unknown_level_uses_default(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        assert level_from_env(default=logging.ERROR) == logging.ERROR

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert level_from_env() == logging.INFO


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_reconfigures_root_level(self):
        """Test that a second call replaces the level set at import."""
        setup_logging(level=logging.INFO)
        setup_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_no_deprecation_warnings(self):
        """Test that the console renderer is built with current structlog arguments."""
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            setup_logging(level=logging.INFO)

    @patch("src.consumers.notification.consume.NotificationConsumer")
    def test_cli_log_level_applied(self, mock_consumer_class):
        """Test that --log-level takes effect after the import-time setup."""
        try:
            assert main(["--queue-url", "q", "--log-level", "DEBUG"]) == 0
            assert logging.getLogger().level == logging.DEBUG

            assert main(["--queue-url", "q", "--log-level", "ERROR"]) == 0
            assert logging.getLogger().level == logging.ERROR
        finally:
            setup_logging(level=logging.INFO)
