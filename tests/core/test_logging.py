"""Tests for log formatting and context loggers."""

import json
import logging

import pytest

from mathexpr.core.config import Settings
from mathexpr.core.logging import (
    StructuredFormatter,
    TextFormatter,
    get_context_logger,
    setup_logging,
)


def _record(**extra):
    record = logging.LogRecord(
        name="mathexpr.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Parsed %s",
        args=("2+2",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestFormatters:
    """Test the JSON and text formatters."""

    def test_structured_output(self):
        """Test a record becomes one JSON object."""
        data = json.loads(StructuredFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "mathexpr.test"
        assert data["message"] == "Parsed 2+2"
        assert data["line"] == 10

    def test_structured_extra_data(self):
        """Test extra_data is merged into the object."""
        data = json.loads(StructuredFormatter().format(_record(extra_data={"elements": 3})))
        assert data["elements"] == 3

    def test_text_output(self):
        """Test the human-readable layout."""
        line = TextFormatter().format(_record())
        assert line.endswith(" - mathexpr.test - INFO - Parsed 2+2")


class TestContextLogger:
    """Test LoggerAdapter context handling."""

    def test_context_and_extra_data_are_combined(self, caplog):
        """Test permanent context and per-call data reach the record."""
        logger = get_context_logger("mathexpr.test.adapter", component="parser")
        with caplog.at_level(logging.INFO, logger="mathexpr.test.adapter"):
            logger.info("Parsed", extra_data={"elements": 3})

        record = caplog.records[-1]
        assert record.extra_data == {"component": "parser", "elements": 3}


class TestSetupLogging:
    """Test handler installation."""

    def test_level_and_file_handler(self, tmp_path, restore_root_logger):
        """Test LOG_LEVEL and LOG_FILE are applied."""
        log_file = tmp_path / "logs" / "mathexpr.log"
        setup_logging(Settings(_env_file=None, LOG_LEVEL="debug", LOG_FORMAT="json", LOG_FILE=str(log_file)))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert all(isinstance(h.formatter, StructuredFormatter) for h in root.handlers)
        assert log_file.parent.is_dir()
