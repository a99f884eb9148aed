"""Tests for logging setup."""

import json
import logging

import pytest
from rich.logging import RichHandler

from dockengine.utils.logging import PACKAGE_LOGGER, JsonFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    package = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = package.handlers[:], package.level, package.propagate
    yield
    for handler in package.handlers:
        if handler not in handlers:
            handler.close()
    package.handlers[:] = handlers
    package.setLevel(level)
    package.propagate = propagate


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_rich_console(self):
        """Test the rich handler is attached to the package logger only."""
        root = logging.getLogger()
        root_handlers, root_level = root.handlers[:], root.level

        logger = configure_logging(level="debug")

        assert logger.name == "dockengine"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert any(isinstance(h, RichHandler) for h in logger.handlers)
        assert root.handlers == root_handlers
        assert root.level == root_level

    def test_json_format(self):
        """Test JSON output replaces the rich console."""
        logger = configure_logging(json_format=True)
        assert not any(isinstance(h, RichHandler) for h in logger.handlers)
        assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

    def test_log_file(self, tmp_path):
        """Test module loggers under the package write to the log file."""
        log_file = tmp_path / "logs" / "engine.log"
        logger = configure_logging(level="INFO", log_file=log_file)

        logging.getLogger("dockengine.runners.engine").info("container started")
        for handler in logger.handlers:
            handler.flush()

        assert "container started" in log_file.read_text()

    def test_reconfigure_replaces_own_handlers(self):
        """Test calling again swaps its handlers and keeps foreign ones."""
        foreign = logging.NullHandler()
        logging.getLogger(PACKAGE_LOGGER).addHandler(foreign)

        first = configure_logging()
        count = len(first.handlers)
        second = configure_logging(level="WARNING", json_format=True)

        assert len(second.handlers) == count
        assert foreign in second.handlers
        assert not any(isinstance(h, RichHandler) for h in second.handlers)
        assert second.level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format(self):
        """Test records become JSON objects."""
        record = logging.LogRecord(
            "dockengine", logging.INFO, __file__, 1, "pulled %s", ("alpine",), None
        )
        payload = json.loads(JsonFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "dockengine"
        assert payload["message"] == "pulled alpine"
