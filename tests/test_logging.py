"""Tests for structured logging configuration."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog

from core.config import LoggingSettings
from core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)

if TYPE_CHECKING:
    import pytest


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_default(self) -> None:
        """configure_logging should work with defaults."""
        configure_logging()

        logger = structlog.get_logger()
        assert logger is not None

    def test_configure_logging_with_warning_level(self) -> None:
        """configure_logging should accept lower-case level names."""
        configure_logging(log_level="warning")

        logger = get_logger("test")
        logger.warning("warned")

    def test_configure_from_settings(self) -> None:
        """configure_logging_from_settings should accept LoggingSettings."""
        configure_logging_from_settings(LoggingSettings(level="DEBUG", json_format=True))

        get_logger("settings.test").debug("configured")


class TestJsonOutput:
    """Tests for JSON rendered events."""

    def test_json_event_carries_bound_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Bound context should appear on every JSON event."""
        configure_logging(json_format=True, log_level="DEBUG")
        clear_context()
        bind_context(receipt_id="R-1")

        get_logger("json.test").info("Tax selected", tax_id="3")
        clear_context()

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "Tax selected"
        assert event["tax_id"] == "3"
        assert event["receipt_id"] == "R-1"
        assert event["level"] == "info"

    def test_filtered_below_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Events below the configured level should not be printed."""
        configure_logging(json_format=True, log_level="WARNING")

        get_logger("json.test").debug("hidden")

        assert "hidden" not in capsys.readouterr().out


class TestContextFunctions:
    """Tests for context binding functions."""

    def test_bind_and_clear_context(self) -> None:
        """bind_context and clear_context should manage contextvars."""
        clear_context()

        bind_context(receipt_id="R-2", member_id="M-9")
        assert structlog.contextvars.get_contextvars() == {
            "receipt_id": "R-2",
            "member_id": "M-9",
        }

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
