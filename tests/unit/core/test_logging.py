"""
Unit Tests for Centralized Logging.

Tests the logging setup, secret redaction and source handling.
"""

import logging
from unittest.mock import MagicMock

import pytest
import structlog

from tensordock_cli.core.logging import (
    REDACTED,
    VALID_SOURCES,
    get_logger,
    log_with_source,
    redact_secrets,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Restore structlog and root handlers after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestValidSources:
    """Tests for VALID_SOURCES constant."""

    def test_valid_sources_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"cli", "api", "config"})

    def test_valid_sources_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestRedactSecrets:
    """Tests for the redaction processor."""

    def test_top_level_secrets(self):
        event = redact_secrets(None, "info", {"event": "x", "api_key": "k", "API_TOKEN": "t"})
        assert event == {"event": "x", "api_key": REDACTED, "API_TOKEN": REDACTED}

    def test_nested_params(self):
        event = redact_secrets(
            None,
            "debug",
            {"event": "API request", "params": {"api_key": "k", "api_token": "t", "server": "abc"}},
        )
        assert event["params"] == {"api_key": REDACTED, "api_token": REDACTED, "server": "abc"}

    def test_lists_of_dicts(self):
        event = redact_secrets(None, "info", {"items": [{"admin_pass": "p"}, "plain"]})
        assert event["items"] == [{"admin_pass": REDACTED}, "plain"]

    def test_non_secret_values_untouched(self):
        event = redact_secrets(None, "info", {"event": "x", "status_code": 200, "params": None})
        assert event == {"event": "x", "status_code": 200, "params": None}


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_sets_root_level(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_single_stderr_handler(self):
        setup_logging(level="INFO")
        setup_logging(level="INFO")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_quiets_http_libraries(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_json_output_redacts(self, capsys):
        setup_logging(level="INFO", format_type="json")

        get_logger("tensordock_cli.test").info("Request", api_key="secret-key", server="abc")

        err = capsys.readouterr().err
        assert "secret-key" not in err
        assert REDACTED in err
        assert '"server": "abc"' in err

    def test_invalid_level(self):
        with pytest.raises(AttributeError):
            setup_logging(level="LOUD")


class TestLogWithSource:
    """Tests for log_with_source."""

    def test_adds_source(self):
        logger = MagicMock()
        log_with_source(logger, "api", "debug", "API request", method="GET")
        logger.debug.assert_called_once_with("API request", source="api", method="GET")

    def test_level_case_insensitive(self):
        logger = MagicMock()
        log_with_source(logger, "config", "WARNING", "Config file not found")
        logger.warning.assert_called_once_with("Config file not found", source="config")
